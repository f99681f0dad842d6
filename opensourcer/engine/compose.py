"""
docker compose wrapper functions for deployment orchestration.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import List, Mapping, Optional

from ..state import get_docker_binary
from .base import ContainerEngine, EngineResult, DEFAULT_LOG_LINES

logger = logging.getLogger(__name__)


class DockerComposeEngine(ContainerEngine):
    """Runs ``docker compose`` as a subprocess, once per call, with no timeout."""

    def __init__(self, docker: Optional[str] = None):
        self.docker = docker or get_docker_binary()

    def _run(
        self,
        args: List[str],
        workdir: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> EngineResult:
        """
        Run a docker command and capture its output.

        Args:
            args: Arguments after the docker binary
            workdir: Working directory for the command
            env: Extra environment merged over os.environ

        Returns:
            EngineResult with combined stdout/stderr
        """
        command = [self.docker, *args]
        process_env = None
        if env is not None:
            process_env = {**os.environ, **env}

        logger.debug("Running %s in %s", " ".join(command), workdir)
        try:
            result = subprocess.run(
                command,
                cwd=str(workdir) if workdir else None,
                env=process_env,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except (FileNotFoundError, PermissionError) as e:
            return EngineResult(ok=False, output=f"Failed to run {self.docker}: {e}")

        if result.returncode != 0:
            logger.warning("%s exited with %d", " ".join(command), result.returncode)
        return EngineResult(
            ok=result.returncode == 0,
            output=result.stdout or "",
            returncode=result.returncode,
        )

    def _compose(self, compose_path: Path, *verb: str) -> List[str]:
        return ["compose", "-f", str(compose_path), *verb]

    def is_available(self) -> bool:
        return self._run(["info"]).ok

    def up(self, compose_path: Path, workdir: Path, env: Mapping[str, str]) -> EngineResult:
        return self._run(self._compose(compose_path, "up", "-d"), workdir, env)

    def stop(self, compose_path: Path, workdir: Path) -> EngineResult:
        return self._run(self._compose(compose_path, "stop"), workdir)

    def start(self, compose_path: Path, workdir: Path) -> EngineResult:
        return self._run(self._compose(compose_path, "start"), workdir)

    def down(self, compose_path: Path, workdir: Path) -> EngineResult:
        return self._run(self._compose(compose_path, "down", "-v"), workdir)

    def logs(self, compose_path: Path, workdir: Path, lines: int = DEFAULT_LOG_LINES) -> EngineResult:
        return self._run(self._compose(compose_path, "logs", "--tail", str(lines)), workdir)
