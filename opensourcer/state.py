"""
Filesystem locations and environment-driven configuration.
"""

import os
from pathlib import Path

DEFAULT_HOME = "~/.opensourcer"
STATE_FILENAME = "deployments.json"
EVENTS_FILENAME = "events.ndjson"


def get_opensourcer_home() -> Path:
    """
    Get the opensourcer home directory.

    Returns:
        Path: Home directory (``OPENSOURCER_HOME`` or ``~/.opensourcer``)
    """
    home = os.environ.get("OPENSOURCER_HOME", DEFAULT_HOME)
    return Path(home).expanduser().resolve()


def ensure_home() -> Path:
    """
    Create the home directory if needed and return it.

    Returns:
        Path: Home directory
    """
    home = get_opensourcer_home()
    home.mkdir(parents=True, exist_ok=True)
    return home


def get_catalog_dir() -> Path:
    return get_opensourcer_home() / "catalog"


def get_deployments_dir() -> Path:
    return get_opensourcer_home() / "deployments"


def get_state_file() -> Path:
    return get_opensourcer_home() / STATE_FILENAME


def get_events_file() -> Path:
    return get_opensourcer_home() / EVENTS_FILENAME


def get_docker_binary() -> str:
    return os.environ.get("OPENSOURCER_DOCKER", "docker")
