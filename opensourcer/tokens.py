"""
Secure random token generation for generated credentials.
"""

import secrets


def generate_token(length: int) -> str:
    """
    Generate an uppercase hexadecimal secret.

    ``ceil(length / 2) + 1`` bytes are drawn from the OS CSPRNG, hex-encoded and
    truncated. Errors from the random source propagate: a deployment must not
    start with predictable credentials.

    Args:
        length: Number of characters to return

    Returns:
        str: ``length`` characters from ``0-9A-F``

    Raises:
        ValueError: If length is negative
    """
    if length < 0:
        raise ValueError(f"Token length must be non-negative, got {length}")

    raw = secrets.token_bytes((length + 1) // 2 + 1)
    return raw.hex().upper()[:length]
