import json
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import pytest

from opensourcer.catalog import CatalogReader
from opensourcer.engine import ContainerEngine, EngineResult
from opensourcer.events import EventLog
from opensourcer.orchestrator import Orchestrator
from opensourcer.store import DeploymentStore

GHOST_APP = {
    "name": "Ghost",
    "description": "Publishing platform",
    "website": "https://ghost.org",
    "category": "cms",
    "tags": ["blog", "cms"],
    "inputs": {
        "domain": {"label": "Domain", "type": "text"},
        "admin_email": {"label": "Admin email", "type": "text", "required": True},
        "mail-password": {"label": "SMTP password", "type": "password"},
    },
    "services": {
        "ghost": {"exposed": True},
        "db": {"internal": True, "managed_option": "rds"},
    },
}

GHOST_COMPOSE = """services:
  ghost:
    image: ghost:5
    ports:
      - "2368:2368"
    env_file: .env
  db:
    image: mysql:8
"""


class RecordingEngine(ContainerEngine):
    """Stub engine that records calls and returns canned results."""

    def __init__(self, available: bool = True):
        self.available = available
        self.calls: List[tuple] = []
        self.failures: Dict[str, EngineResult] = {}
        self.log_output = "ghost_1  | started\n"

    def fail(self, operation: str, output: str = "boom", returncode: int = 1) -> None:
        self.failures[operation] = EngineResult(ok=False, output=output, returncode=returncode)

    def _record(self, operation: str, *args) -> EngineResult:
        self.calls.append((operation, *args))
        return self.failures.get(operation, EngineResult(ok=True, returncode=0))

    def count(self, operation: str) -> int:
        return sum(1 for call in self.calls if call[0] == operation)

    def is_available(self) -> bool:
        self.calls.append(("is_available",))
        return self.available

    def up(self, compose_path: Path, workdir: Path, env: Mapping[str, str]) -> EngineResult:
        return self._record("up", compose_path, workdir, dict(env))

    def stop(self, compose_path: Path, workdir: Path) -> EngineResult:
        return self._record("stop", compose_path, workdir)

    def start(self, compose_path: Path, workdir: Path) -> EngineResult:
        return self._record("start", compose_path, workdir)

    def down(self, compose_path: Path, workdir: Path) -> EngineResult:
        return self._record("down", compose_path, workdir)

    def logs(self, compose_path: Path, workdir: Path, lines: int = 100) -> EngineResult:
        result = self._record("logs", compose_path, workdir, lines)
        if result.ok:
            return EngineResult(ok=True, output=self.log_output, returncode=0)
        return result


def write_entry(catalog_dir: Path, slug: str, app: Optional[dict] = None,
                compose: str = GHOST_COMPOSE, raw_app: Optional[str] = None) -> Path:
    entry = catalog_dir / slug
    entry.mkdir(parents=True, exist_ok=True)
    if raw_app is not None:
        (entry / "app.json").write_text(raw_app)
    else:
        (entry / "app.json").write_text(json.dumps(app if app is not None else GHOST_APP))
    (entry / "docker-compose.yaml").write_text(compose)
    return entry


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("OPENSOURCER_HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def catalog_dir(home):
    catalog = home / "catalog"
    entry = write_entry(catalog, "ghost")
    (entry / "config").mkdir()
    (entry / "config" / "nginx.conf").write_text("server {}\n")
    return catalog


@pytest.fixture
def engine():
    return RecordingEngine()


@pytest.fixture
def store(home):
    s = DeploymentStore(home / "deployments.json")
    s.load()
    return s


@pytest.fixture
def orchestrator(home, catalog_dir, store, engine):
    return Orchestrator(
        catalog=CatalogReader(catalog_dir),
        store=store,
        engine=engine,
        deployments_dir=home / "deployments",
        events=EventLog(home / "events.ndjson"),
    )
