"""
Tests for reading catalog entries.
"""

import pytest

from opensourcer.catalog import CatalogReader
from opensourcer.errors import InvalidDefinition, NotFound

from conftest import write_entry


class TestResolve:
    def test_resolve_definition(self, catalog_dir):
        definition = CatalogReader(catalog_dir).resolve("ghost")

        assert definition.slug == "ghost"
        assert definition.name == "Ghost"
        assert definition.tags == ["blog", "cms"]
        assert definition.inputs["admin_email"].required
        assert definition.inputs["mail-password"].is_secret
        assert definition.secret_inputs() == ["mail-password"]
        assert definition.services["db"].managed_option == "rds"
        assert definition.services["ghost"].exposed

    def test_slug_comes_from_directory(self, catalog_dir):
        write_entry(catalog_dir, "blog", {"name": "Blog", "slug": "ignored"})
        assert CatalogReader(catalog_dir).resolve("blog").slug == "blog"

    def test_unknown_slug(self, catalog_dir):
        with pytest.raises(NotFound):
            CatalogReader(catalog_dir).resolve("missing")

    @pytest.mark.parametrize("slug", ["_meta", "", "../ghost", ".git", ".."])
    def test_reserved_or_unsafe_slug(self, catalog_dir, slug):
        write_entry(catalog_dir, "_meta")
        with pytest.raises(NotFound):
            CatalogReader(catalog_dir).resolve(slug)

    def test_unparsable_json(self, catalog_dir):
        write_entry(catalog_dir, "broken", raw_app="{nope")
        with pytest.raises(InvalidDefinition):
            CatalogReader(catalog_dir).resolve("broken")

    @pytest.mark.parametrize("app", [
        {"description": "no name"},
        {"name": "X", "tags": "not-a-list"},
        {"name": "X", "inputs": {"a": {"required": "maybe"}}},
    ])
    def test_wrong_structure(self, catalog_dir, app):
        write_entry(catalog_dir, "broken", app)
        with pytest.raises(InvalidDefinition):
            CatalogReader(catalog_dir).resolve("broken")

    def test_non_object_json(self, catalog_dir):
        write_entry(catalog_dir, "broken", raw_app="[1, 2]")
        with pytest.raises(InvalidDefinition):
            CatalogReader(catalog_dir).resolve("broken")


class TestListing:
    def test_list_skips_reserved_and_files(self, catalog_dir):
        write_entry(catalog_dir, "_templates")
        write_entry(catalog_dir, "n8n", {"name": "n8n"})
        (catalog_dir / "README.md").write_text("catalog")

        assert CatalogReader(catalog_dir).list_slugs() == ["ghost", "n8n"]

    def test_list_skips_git_checkout_dir(self, catalog_dir, caplog):
        (catalog_dir / ".git" / "objects").mkdir(parents=True)
        (catalog_dir / ".github").mkdir()

        with caplog.at_level("WARNING", logger="opensourcer.catalog.reader"):
            definitions = CatalogReader(catalog_dir).list_definitions()

        assert [d.slug for d in definitions] == ["ghost"]
        assert "Skipping catalog entry" not in caplog.text

    def test_list_definitions_skips_broken(self, catalog_dir):
        write_entry(catalog_dir, "broken", raw_app="{")
        names = [d.name for d in CatalogReader(catalog_dir).list_definitions()]
        assert names == ["Ghost"]

    def test_missing_catalog(self, tmp_path):
        with pytest.raises(NotFound) as exc:
            CatalogReader(tmp_path / "catalog").list_slugs()
        assert "update" in exc.value.hint


class TestComposeServices:
    def test_services(self, catalog_dir):
        assert CatalogReader(catalog_dir).compose_services("ghost") == ["ghost", "db"]

    def test_invalid_yaml(self, catalog_dir):
        write_entry(catalog_dir, "bad", {"name": "Bad"}, compose="services: [unclosed")
        with pytest.raises(InvalidDefinition):
            CatalogReader(catalog_dir).compose_services("bad")

    def test_no_services_key(self, catalog_dir):
        write_entry(catalog_dir, "bare", {"name": "Bare"}, compose="version: '3'\n")
        assert CatalogReader(catalog_dir).compose_services("bare") == []
