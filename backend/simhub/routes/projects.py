"""
SimHub Backend — Project Route Handlers
=======================================

    POST /api/projects                  register (201), 422 if the path is taken
    GET  /api/projects/{id}             detail
    POST /api/projects/open-or-create   reuse the project at a path or register it
    POST /api/projects/{id}/open        stamp last_opened_at
"""

from fastapi import APIRouter, Depends, Request, status

from simhub.dependencies import get_project_service
from simhub.routes.common import read_json_body
from simhub.schemas.common import ErrorResponse
from simhub.schemas.project import GetOrCreateProjectOutput, ProjectOutput
from simhub.services.project_service import ProjectService

router = APIRouter(prefix="/api/projects", tags=["Projects"])

_NOT_FOUND = {404: {"description": "Project not found", "model": ErrorResponse}}


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ProjectOutput,
    responses={
        400: {"description": "Invalid input", "model": ErrorResponse},
        422: {"description": "Path already registered", "model": ErrorResponse},
    },
    summary="Register a project",
)
async def create_project(
    request: Request,
    service: ProjectService = Depends(get_project_service),
) -> ProjectOutput:
    return await service.create_project(await read_json_body(request))


@router.post(
    "/open-or-create",
    response_model=GetOrCreateProjectOutput,
    summary="Open the project at a path, registering it if needed",
)
async def open_or_create_project(
    request: Request,
    service: ProjectService = Depends(get_project_service),
) -> GetOrCreateProjectOutput:
    return await service.get_or_create(await read_json_body(request))


@router.get(
    "/{project_id}",
    response_model=ProjectOutput,
    responses={**_NOT_FOUND},
    summary="Get a project",
)
async def get_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> ProjectOutput:
    return await service.get_project({"id": project_id})


@router.post(
    "/{project_id}/open",
    response_model=ProjectOutput,
    responses={**_NOT_FOUND},
    summary="Mark a project as opened now",
)
async def open_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
) -> ProjectOutput:
    return await service.open_project({"id": project_id})
