"""
Persisted deployment record.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field

from .ids import new_deployment_id


class DeploymentStatus(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Deployment(BaseModel):
    """One tracked local deployment of a catalog entry."""

    # Unknown keys written by newer versions are dropped on load.
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(default_factory=new_deployment_id)
    software: str
    target: str = "local"
    status: DeploymentStatus = DeploymentStatus.RUNNING
    directory: str
    port: int = 0
    inputs: Dict[str, str] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def url(self) -> str:
        if self.port > 0:
            return f"http://localhost:{self.port}"
        return ""

    def with_status(self, status: DeploymentStatus) -> "Deployment":
        return self.model_copy(update={"status": status, "updated_at": utcnow()})
