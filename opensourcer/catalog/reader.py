"""
Read software definitions from the local catalog directory.
"""

import json
import logging
from pathlib import Path
from typing import List, Union

import yaml
from pydantic import ValidationError

from ..errors import InvalidDefinition, NotFound
from .models import SoftwareDefinition

logger = logging.getLogger(__name__)

DEFINITION_FILENAME = "app.json"
COMPOSE_FILENAME = "docker-compose.yaml"
RESERVED_PREFIX = "_"
HIDDEN_PREFIX = "."


class CatalogReader:
    """Read-only view over ``<catalog>/<slug>/app.json`` entries."""

    def __init__(self, catalog_dir: Union[str, Path]):
        self.catalog_dir = Path(catalog_dir)

    def entry_dir(self, slug: str) -> Path:
        return self.catalog_dir / slug

    def compose_path(self, slug: str) -> Path:
        return self.entry_dir(slug) / COMPOSE_FILENAME

    def resolve(self, slug: str) -> SoftwareDefinition:
        """
        Load the definition for a slug.

        Args:
            slug: Catalog directory name

        Returns:
            SoftwareDefinition: Parsed definition

        Raises:
            NotFound: If no app.json exists for the slug
            InvalidDefinition: If app.json cannot be parsed
        """
        if not slug or slug.startswith((RESERVED_PREFIX, HIDDEN_PREFIX)) or "/" in slug:
            raise NotFound(f"Software '{slug}' not found in catalog")

        definition_file = self.entry_dir(slug) / DEFINITION_FILENAME
        if not definition_file.is_file():
            raise NotFound(
                f"Software '{slug}' not found in catalog",
                hint="Run 'opensourcer catalog' to see available software",
            )

        try:
            data = json.loads(definition_file.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise InvalidDefinition(f"Invalid app.json for '{slug}': {e}") from e

        if not isinstance(data, dict):
            raise InvalidDefinition(f"Invalid app.json for '{slug}': expected an object")

        try:
            return SoftwareDefinition.model_validate({**data, "slug": slug})
        except ValidationError as e:
            raise InvalidDefinition(f"Invalid app.json for '{slug}': {e}") from e

    def list_slugs(self) -> List[str]:
        """
        List catalog entries, skipping reserved, hidden and non-directory names.

        Raises:
            NotFound: If the catalog has not been downloaded yet
        """
        if not self.catalog_dir.is_dir():
            raise NotFound(
                "Catalog not found",
                hint="Run 'opensourcer update' first",
            )

        return sorted(
            entry.name
            for entry in self.catalog_dir.iterdir()
            if entry.is_dir() and not entry.name.startswith((RESERVED_PREFIX, HIDDEN_PREFIX))
        )

    def list_definitions(self) -> List[SoftwareDefinition]:
        definitions = []
        for slug in self.list_slugs():
            try:
                definitions.append(self.resolve(slug))
            except (NotFound, InvalidDefinition) as e:
                logger.warning("Skipping catalog entry %s: %s", slug, e.message)
        return definitions

    def compose_services(self, slug: str) -> List[str]:
        """
        Service names declared in the entry's composition file.

        Raises:
            NotFound: If the composition file is missing
            InvalidDefinition: If it is not valid YAML
        """
        compose = self.compose_path(slug)
        if not compose.is_file():
            raise NotFound(f"{COMPOSE_FILENAME} not found for '{slug}'")

        try:
            data = yaml.safe_load(compose.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise InvalidDefinition(f"Invalid {COMPOSE_FILENAME} for '{slug}': {e}") from e

        services = data.get("services") if isinstance(data, dict) else None
        if not isinstance(services, dict):
            return []
        return list(services.keys())
