"""
Clone or refresh the local catalog from its git repository.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path

from ..errors import CatalogSyncFailed

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_URL = "https://github.com/opengittr/opensourcer-catalog.git"


def get_catalog_url() -> str:
    return os.environ.get("OPENSOURCER_CATALOG_URL", DEFAULT_CATALOG_URL)


def _git(args: list[str], action: str) -> None:
    try:
        subprocess.run(["git", *args], check=True, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise CatalogSyncFailed("git is not installed", hint="Install git and retry") from e
    except subprocess.CalledProcessError as e:
        raise CatalogSyncFailed(f"Failed to {action} catalog: {(e.stderr or '').strip()}") from e


def clone_catalog(catalog_dir: Path, repo_url: str) -> None:
    """
    Shallow-clone the catalog into place via a temporary sibling directory.

    Args:
        catalog_dir: Final catalog location
        repo_url: Git repository URL
    """
    catalog_dir.parent.mkdir(parents=True, exist_ok=True)
    tmp_dir = catalog_dir.with_name(catalog_dir.name + ".tmp")
    if tmp_dir.exists():
        shutil.rmtree(tmp_dir)

    try:
        _git(["clone", "--depth", "1", repo_url, str(tmp_dir)], "clone")
        os.replace(tmp_dir, catalog_dir)
    finally:
        if tmp_dir.exists():
            shutil.rmtree(tmp_dir, ignore_errors=True)


def pull_catalog(catalog_dir: Path) -> None:
    _git(["-C", str(catalog_dir), "pull", "--rebase"], "update")


def update_catalog(catalog_dir: Path, repo_url: str | None = None) -> str:
    """
    Clone the catalog if absent, otherwise pull the latest changes.

    A directory that exists but is not a git checkout is replaced by a fresh
    clone.

    Args:
        catalog_dir: Catalog location
        repo_url: Git URL, defaults to ``OPENSOURCER_CATALOG_URL``

    Returns:
        str: "cloned" or "updated"

    Raises:
        CatalogSyncFailed: If git fails
    """
    repo_url = repo_url or get_catalog_url()
    catalog_dir = Path(catalog_dir)

    if catalog_dir.exists() and not (catalog_dir / ".git").exists():
        logger.info("Catalog at %s is not a git checkout, re-cloning", catalog_dir)
        shutil.rmtree(catalog_dir)

    if not catalog_dir.exists():
        logger.info("Cloning catalog from %s", repo_url)
        clone_catalog(catalog_dir, repo_url)
        return "cloned"

    logger.info("Pulling catalog updates in %s", catalog_dir)
    pull_catalog(catalog_dir)
    return "updated"
