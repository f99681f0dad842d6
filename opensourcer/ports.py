"""
Exposed host port detection from composition text.

This is a text heuristic, not a compose parser: ports outside KNOWN_PORTS are
never reported.
"""

from typing import Tuple

# First match wins. Specific application ports come before the generic 80.
KNOWN_PORTS: Tuple[Tuple[int, str], ...] = (
    (2368, "ghost"),
    (3000, "gitea"),
    (3001, "uptime-kuma"),
    (5678, "n8n"),
    (8000, "plausible"),
    (8065, "mattermost"),
    (8080, "nextcloud, vaultwarden, generic"),
    (8096, "jellyfin"),
    (80, "wordpress/nginx"),
)


def detect_port(compose_text: str) -> int:
    """
    Find the host port a composition publishes.

    Args:
        compose_text: Raw docker-compose.yaml contents

    Returns:
        int: First KNOWN_PORTS entry mapped as ``"<port>:`` or ``'<port>:``, else 0
    """
    for port, _ in KNOWN_PORTS:
        if f'"{port}:' in compose_text or f"'{port}:" in compose_text:
            return port
    return 0
