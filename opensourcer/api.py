"""FastAPI application exposing the deployment lifecycle over HTTP."""

from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from . import __version__
from .catalog import SoftwareDefinition
from .errors import (
    AlreadyDeployed, EngineUnavailable, InvalidDefinition,
    NotFound, OpensourcerError, UnsupportedTarget,
)
from .models import Deployment
from .orchestrator import Orchestrator, create_orchestrator


# Pydantic models
class DeployRequest(BaseModel):
    software: str
    inputs: Optional[Dict[str, str]] = None
    target: str = "local"


class DeployResponse(BaseModel):
    deployment: Deployment
    credentials: Dict[str, str]


STATUS_CODES = {
    NotFound: 404,
    AlreadyDeployed: 409,
    InvalidDefinition: 400,
    UnsupportedTarget: 400,
    EngineUnavailable: 503,
}


def _http_error(error: OpensourcerError) -> HTTPException:
    return HTTPException(
        status_code=STATUS_CODES.get(type(error), 500),
        detail=error.to_dict(),
    )


def get_orchestrator() -> Orchestrator:
    return create_orchestrator()


app = FastAPI(
    title="opensourcer API",
    description="Local deployment of catalog software",
    version=__version__,
)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"message": "opensourcer API is running", "version": __version__}


@app.get("/catalog", response_model=List[SoftwareDefinition])
def list_catalog(orchestrator: Orchestrator = Depends(get_orchestrator)):
    try:
        return orchestrator.catalog.list_definitions()
    except OpensourcerError as e:
        raise _http_error(e)


@app.get("/catalog/{software}", response_model=SoftwareDefinition)
def get_catalog_entry(software: str, orchestrator: Orchestrator = Depends(get_orchestrator)):
    try:
        return orchestrator.info(software)
    except OpensourcerError as e:
        raise _http_error(e)


@app.get("/deployments", response_model=List[Deployment])
def list_deployments(orchestrator: Orchestrator = Depends(get_orchestrator)):
    return orchestrator.list_deployments()


@app.post("/deployments", response_model=DeployResponse, status_code=201)
def create_deployment(request: DeployRequest, orchestrator: Orchestrator = Depends(get_orchestrator)):
    try:
        result = orchestrator.deploy(request.software, request.inputs, target=request.target)
    except OpensourcerError as e:
        raise _http_error(e)
    return DeployResponse(deployment=result.deployment, credentials=result.credentials)


@app.post("/deployments/{software}/stop", response_model=Deployment)
def stop_deployment(software: str, orchestrator: Orchestrator = Depends(get_orchestrator)):
    try:
        return orchestrator.stop(software)
    except OpensourcerError as e:
        raise _http_error(e)


@app.post("/deployments/{software}/start", response_model=Deployment)
def start_deployment(software: str, orchestrator: Orchestrator = Depends(get_orchestrator)):
    try:
        return orchestrator.start(software)
    except OpensourcerError as e:
        raise _http_error(e)


@app.delete("/deployments/{software}")
def destroy_deployment(software: str, force: bool = False,
                       orchestrator: Orchestrator = Depends(get_orchestrator)):
    try:
        removed = orchestrator.destroy(software, force=force)
    except OpensourcerError as e:
        raise _http_error(e)
    return {"ok": True, "id": removed.id}


@app.get("/deployments/{software}/logs", response_class=PlainTextResponse)
def deployment_logs(software: str, lines: int = 100,
                    orchestrator: Orchestrator = Depends(get_orchestrator)):
    try:
        return orchestrator.logs(software, lines=lines)
    except OpensourcerError as e:
        raise _http_error(e)
