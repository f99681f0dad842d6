"""
Container engine interface consumed by the orchestrator.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_LOG_LINES = 100


@dataclass
class EngineResult:
    """Outcome of a single engine command."""
    ok: bool
    output: str = ""
    returncode: Optional[int] = None


class ContainerEngine(ABC):
    """
    The five compose operations plus an availability probe.

    Every method receives the composition file path and the working
    directory the command must run in.
    """

    @abstractmethod
    def is_available(self) -> bool:
        pass

    @abstractmethod
    def up(self, compose_path: Path, workdir: Path, env: Mapping[str, str]) -> EngineResult:
        pass

    @abstractmethod
    def stop(self, compose_path: Path, workdir: Path) -> EngineResult:
        pass

    @abstractmethod
    def start(self, compose_path: Path, workdir: Path) -> EngineResult:
        pass

    @abstractmethod
    def down(self, compose_path: Path, workdir: Path) -> EngineResult:
        """Remove containers, networks and volumes."""
        pass

    @abstractmethod
    def logs(self, compose_path: Path, workdir: Path, lines: int = DEFAULT_LOG_LINES) -> EngineResult:
        pass
