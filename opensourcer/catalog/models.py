"""
Catalog entry models, parsed from each entry's app.json.
"""

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

SECRET_INPUT_TYPE = "password"


class InputSpec(BaseModel):
    """A user-configurable value declared by a catalog entry."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    label: str = ""
    placeholder: str = ""
    required: bool = False
    type: str = "text"
    description: str = ""
    default: str = ""

    @property
    def is_secret(self) -> bool:
        return self.type == SECRET_INPUT_TYPE


class ServiceInfo(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    exposed: bool = False
    stateless: bool = False
    internal: bool = False
    managed_option: str = ""


class SoftwareDefinition(BaseModel):
    """Deployable software as described in the catalog."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    slug: str
    name: str
    description: str = ""
    website: str = ""
    icon: str = ""
    category: str = ""
    tags: List[str] = Field(default_factory=list)
    inputs: Dict[str, InputSpec] = Field(default_factory=dict)
    services: Dict[str, ServiceInfo] = Field(default_factory=dict)

    def secret_inputs(self) -> List[str]:
        return [key for key, spec in self.inputs.items() if spec.is_secret]
