"""
Error types raised by the deployment lifecycle.
"""

from typing import Optional


class OpensourcerError(Exception):
    """Base class for all errors surfaced to the user."""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.hint = hint

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "hint": self.hint,
        }

    @property
    def code(self) -> str:
        return _camel_to_snake(type(self).__name__)


class NotFound(OpensourcerError):
    """Unknown software slug or unknown deployment."""


class InvalidDefinition(OpensourcerError):
    """Catalog entry exists but cannot be parsed."""


class EngineUnavailable(OpensourcerError):
    """Container engine is not installed or not running."""


class EngineOperationFailed(OpensourcerError):
    """An engine command returned a non-zero exit status."""

    def __init__(self, operation: str, output: str = "", returncode: Optional[int] = None,
                 hint: Optional[str] = None):
        message = f"docker compose {operation} failed"
        if output.strip():
            message = f"{message}: {output.strip()}"
        super().__init__(message, hint)
        self.operation = operation
        self.output = output
        self.returncode = returncode


class PersistenceFailed(OpensourcerError):
    """State file could not be written."""


class AlreadyDeployed(OpensourcerError):
    """A deployment for this software is already tracked."""


class UnsupportedTarget(OpensourcerError):
    """Deployment target other than local."""


class CatalogSyncFailed(OpensourcerError):
    """git clone/pull of the catalog failed."""


def _camel_to_snake(name: str) -> str:
    out = []
    for i, ch in enumerate(name):
        if ch.isupper() and i:
            out.append("_")
        out.append(ch.lower())
    return "".join(out)
