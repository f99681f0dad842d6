"""
Deployment ID generation utilities.
"""

import uuid


def new_deployment_id() -> str:
    """
    Generate a new deployment ID.

    Returns:
        str: Random UUID4 string
    """
    return str(uuid.uuid4())


def is_valid_deployment_id(deployment_id: str) -> bool:
    """
    Validate deployment ID format.

    Args:
        deployment_id: ID to validate

    Returns:
        bool: True if the ID is a canonical UUID string
    """
    try:
        return str(uuid.UUID(deployment_id)) == deployment_id
    except (ValueError, TypeError, AttributeError):
        return False


def short_id(deployment_id: str) -> str:
    """First 8 characters, as shown in listings."""
    return deployment_id[:8]
