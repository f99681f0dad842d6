from .models import InputSpec, ServiceInfo, SoftwareDefinition
from .reader import CatalogReader, COMPOSE_FILENAME
from .sync import update_catalog

__all__ = [
    "CatalogReader",
    "COMPOSE_FILENAME",
    "InputSpec",
    "ServiceInfo",
    "SoftwareDefinition",
    "update_catalog",
]
