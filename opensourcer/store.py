"""
Durable record of all known deployments.

The whole list lives in one JSON file, ``{"deployments": [...]}``, which is
rewritten after every mutation. The file is not locked: two processes writing
at the same time lose the earlier write.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, Iterable, Optional, Tuple, Union

from pydantic import ValidationError

from .errors import NotFound, PersistenceFailed
from .ids import is_valid_deployment_id
from .models import Deployment, DeploymentStatus

logger = logging.getLogger(__name__)

Snapshot = Tuple[Deployment, ...]


class DeploymentStore:
    """In-memory snapshot of deployments kept in step with the state file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._deployments: Snapshot = ()

    @property
    def deployments(self) -> Snapshot:
        return self._deployments

    def load(self) -> Snapshot:
        """
        Read the state file into memory.

        A missing or malformed file yields an empty store. Records whose id
        is not a canonical UUID are skipped with a warning.

        Returns:
            Tuple of deployments in file order
        """
        self._deployments = self._read()
        return self._deployments

    def _read(self) -> Snapshot:
        if not self.path.exists():
            return ()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            entries = data.get("deployments") or []
            records = tuple(Deployment.model_validate(entry) for entry in entries)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError,
                AttributeError, TypeError, ValidationError) as e:
            logger.warning("Ignoring unreadable state file %s: %s", self.path, e)
            return ()

        valid = []
        for deployment in records:
            if not is_valid_deployment_id(deployment.id):
                logger.warning("Skipping deployment %s with invalid id %r", deployment.software, deployment.id)
                continue
            valid.append(deployment)
        return tuple(valid)

    def save(self, deployments: Iterable[Deployment]) -> None:
        """
        Atomically rewrite the state file.

        Args:
            deployments: Full list to persist

        Raises:
            PersistenceFailed: If the file cannot be written
        """
        payload = {
            "deployments": [d.model_dump(mode="json") for d in deployments],
        }

        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceFailed(
                f"Failed to write {self.path}: {e}",
                hint="Check permissions on the opensourcer home directory",
            ) from e

    def mutate(self, fn: Callable[[Snapshot], Snapshot]) -> Snapshot:
        """
        Apply ``fn`` to the current snapshot and persist the result.

        The in-memory snapshot only changes once the rewrite succeeds.
        """
        updated = tuple(fn(self._deployments))
        self.save(updated)
        self._deployments = updated
        return updated

    def find(self, software: str) -> Optional[Deployment]:
        for deployment in self._deployments:
            if deployment.software == software:
                return deployment
        return None

    def get(self, deployment_id: str) -> Optional[Deployment]:
        for deployment in self._deployments:
            if deployment.id == deployment_id:
                return deployment
        return None

    def _require(self, deployment_id: str) -> Deployment:
        deployment = self.get(deployment_id)
        if deployment is None:
            raise NotFound(f"Deployment {deployment_id} not found")
        return deployment

    def append(self, deployment: Deployment) -> Deployment:
        self.mutate(lambda current: current + (deployment,))
        return deployment

    def update_status(self, deployment_id: str, status: DeploymentStatus) -> Deployment:
        updated = self._require(deployment_id).with_status(status)
        self.mutate(lambda current: tuple(
            updated if d.id == deployment_id else d for d in current
        ))
        return updated

    def remove(self, deployment_id: str) -> Deployment:
        removed = self._require(deployment_id)
        self.mutate(lambda current: tuple(d for d in current if d.id != deployment_id))
        return removed
