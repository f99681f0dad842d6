from .base import ContainerEngine, EngineResult, DEFAULT_LOG_LINES
from .compose import DockerComposeEngine

__all__ = ["ContainerEngine", "EngineResult", "DEFAULT_LOG_LINES", "DockerComposeEngine"]
