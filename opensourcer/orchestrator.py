"""
Main orchestrator for deployment lifecycle management.
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Union

from .catalog import CatalogReader, COMPOSE_FILENAME, SoftwareDefinition
from .engine import ContainerEngine, DEFAULT_LOG_LINES
from .envman import synthesize, write_env_file, generated_credentials
from .errors import (
    AlreadyDeployed, EngineOperationFailed, EngineUnavailable,
    InvalidDefinition, NotFound, PersistenceFailed, UnsupportedTarget,
)
from .events import EventLog, EventTypes
from .models import Deployment, DeploymentStatus
from .ports import detect_port
from .store import DeploymentStore
from .tokens import generate_token

logger = logging.getLogger(__name__)

LOCAL_TARGET = "local"
KNOWN_TARGETS = ("local", "aws")


@dataclass
class DeployResult:
    """Outcome of a successful deploy."""
    deployment: Deployment
    definition: SoftwareDefinition
    credentials: Dict[str, str] = field(default_factory=dict)


class Orchestrator:
    """
    Drives deployments through absent -> running <-> stopped -> destroyed.

    One instance serves one CLI invocation or API process. The store is
    loaded by the caller before the first request.
    """

    def __init__(
        self,
        catalog: CatalogReader,
        store: DeploymentStore,
        engine: ContainerEngine,
        deployments_dir: Union[str, Path],
        events: Optional[EventLog] = None,
        token_generator: Callable[[int], str] = generate_token,
    ):
        self.catalog = catalog
        self.store = store
        self.engine = engine
        self.deployments_dir = Path(deployments_dir)
        self.events = events or EventLog()
        self.token_generator = token_generator

    def _require(self, software: str) -> Deployment:
        deployment = self.store.find(software)
        if deployment is None:
            raise NotFound(
                f"Deployment '{software}' not found",
                hint="Run 'opensourcer list' to see your deployments",
            )
        return deployment

    @staticmethod
    def _paths(deployment: Deployment) -> Tuple[Path, Path]:
        directory = Path(deployment.directory)
        return directory / COMPOSE_FILENAME, directory

    def _fail(self, software: str, error: EngineOperationFailed) -> EngineOperationFailed:
        self.events.emit(EventTypes.ERROR, software, {
            "operation": error.operation,
            "returncode": error.returncode,
        })
        return error

    def _materialize(self, software: str) -> Path:
        """Copy the catalog entry verbatim into its deployment directory."""
        source = self.catalog.entry_dir(software)
        target = self.deployments_dir / software
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceFailed(
                f"Failed to create deployment directory {target}: {e}",
                hint=f"Check that {self.deployments_dir} is a writable directory",
            ) from e
        try:
            shutil.copytree(source, target, dirs_exist_ok=True)
        except (OSError, shutil.Error) as e:
            raise PersistenceFailed(
                f"Failed to copy catalog files for '{software}': {e}",
                hint=f"Check permissions on {target}",
            ) from e
        return target

    def deploy(
        self,
        software: str,
        inputs: Optional[Mapping[str, str]] = None,
        target: str = LOCAL_TARGET,
    ) -> DeployResult:
        """
        Deploy a catalog entry locally.

        Args:
            software: Catalog slug
            inputs: User-supplied input values keyed by catalog input key
            target: Deployment target, only "local" is implemented

        Returns:
            DeployResult with the committed record and generated credentials

        Raises:
            UnsupportedTarget: For any target other than local
            AlreadyDeployed: If the slug already has a tracked deployment
            EngineUnavailable: If docker is not reachable
            NotFound, InvalidDefinition: If the catalog entry is missing or broken
            PersistenceFailed: If the deployment directory or .env cannot be written
            EngineOperationFailed: If ``docker compose up`` fails. The
                materialized directory is left in place and nothing is recorded.
        """
        if target != LOCAL_TARGET:
            if target in KNOWN_TARGETS:
                raise UnsupportedTarget(
                    f"{target.upper()} deployment not yet implemented",
                    hint="Use --target local",
                )
            raise UnsupportedTarget(f"Unknown target: {target}")

        existing = self.store.find(software)
        if existing is not None:
            raise AlreadyDeployed(
                f"'{software}' is already deployed ({existing.status.value})",
                hint=f"Run 'opensourcer destroy {software}' before deploying it again",
            )

        if not self.engine.is_available():
            raise EngineUnavailable(
                "Docker is required for local deployment: docker is not running or not installed",
                hint="Start Docker and retry",
            )

        definition = self.catalog.resolve(software)
        user_inputs = {k: v for k, v in (inputs or {}).items() if v}

        logger.info("Deploying %s", software)
        self.events.emit(EventTypes.DEPLOY_START, software, {"inputs": sorted(user_inputs)})

        directory = self._materialize(software)
        compose_path = directory / COMPOSE_FILENAME
        try:
            compose_text = compose_path.read_text(encoding="utf-8")
        except OSError as e:
            raise InvalidDefinition(f"{COMPOSE_FILENAME} not found for '{software}'") from e

        env = synthesize(definition, user_inputs, self.token_generator)
        try:
            write_env_file(directory, env)
        except OSError as e:
            raise PersistenceFailed(
                f"Failed to write .env file for '{software}': {e}",
                hint=f"Check permissions on {directory}",
            ) from e
        port = detect_port(compose_text)

        result = self.engine.up(compose_path, directory, env)
        if not result.ok:
            raise self._fail(software, EngineOperationFailed("up", result.output, result.returncode))

        deployment = self.store.append(Deployment(
            software=software,
            target=LOCAL_TARGET,
            status=DeploymentStatus.RUNNING,
            directory=str(directory),
            port=port,
            inputs=user_inputs,
        ))

        self.events.emit(EventTypes.DEPLOY_DONE, software, {"id": deployment.id, "port": port})
        logger.info("Deployed %s as %s", software, deployment.id)
        return DeployResult(
            deployment=deployment,
            definition=definition,
            credentials=generated_credentials(env, user_inputs),
        )

    def stop(self, software: str) -> Deployment:
        deployment = self._require(software)
        result = self.engine.stop(*self._paths(deployment))
        if not result.ok:
            raise self._fail(software, EngineOperationFailed("stop", result.output, result.returncode))

        updated = self.store.update_status(deployment.id, DeploymentStatus.STOPPED)
        self.events.emit(EventTypes.STOP, software, {"id": deployment.id})
        return updated

    def start(self, software: str) -> Deployment:
        deployment = self._require(software)
        result = self.engine.start(*self._paths(deployment))
        if not result.ok:
            raise self._fail(software, EngineOperationFailed("start", result.output, result.returncode))

        updated = self.store.update_status(deployment.id, DeploymentStatus.RUNNING)
        self.events.emit(EventTypes.START, software, {"id": deployment.id})
        return updated

    def destroy(self, software: str, force: bool = False) -> Deployment:
        """
        Tear down containers and volumes, delete the directory, drop the record.

        Args:
            software: Catalog slug of the deployment
            force: Drop the record and directory even if teardown fails

        Returns:
            The removed deployment record

        Raises:
            NotFound: If there is no deployment for the slug
            EngineOperationFailed: If teardown fails and force is not set.
                Record and directory are left untouched.
        """
        deployment = self._require(software)
        compose_path, directory = self._paths(deployment)

        result = self.engine.down(compose_path, directory)
        if not result.ok:
            error = self._fail(software, EngineOperationFailed(
                "down", result.output, result.returncode,
                hint=f"Retry, or run 'opensourcer destroy {software} --force' to forget it",
            ))
            if not force:
                raise error
            logger.warning("Teardown of %s failed, forgetting it anyway: %s", software, error.message)
            self.events.emit(EventTypes.FORCE_DESTROY, software, {"id": deployment.id})

        shutil.rmtree(directory, ignore_errors=True)
        removed = self.store.remove(deployment.id)
        self.events.emit(EventTypes.DESTROY_DONE, software, {"id": deployment.id})
        return removed

    def logs(self, software: str, lines: int = DEFAULT_LOG_LINES) -> str:
        deployment = self._require(software)
        result = self.engine.logs(*self._paths(deployment), lines=lines)
        if not result.ok:
            raise EngineOperationFailed("logs", result.output, result.returncode)
        return result.output

    def list_deployments(self) -> List[Deployment]:
        return list(self.store.deployments)

    def info(self, software: str) -> SoftwareDefinition:
        return self.catalog.resolve(software)


def create_orchestrator(engine: Optional[ContainerEngine] = None) -> Orchestrator:
    """
    Build an orchestrator from OPENSOURCER_* configuration with the store loaded.

    Args:
        engine: Engine to use, defaults to DockerComposeEngine
    """
    from .engine import DockerComposeEngine
    from .state import ensure_home, get_catalog_dir, get_deployments_dir, get_state_file

    ensure_home()
    store = DeploymentStore(get_state_file())
    store.load()
    return Orchestrator(
        catalog=CatalogReader(get_catalog_dir()),
        store=store,
        engine=engine or DockerComposeEngine(),
        deployments_dir=get_deployments_dir(),
    )
