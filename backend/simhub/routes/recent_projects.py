"""
SimHub Backend — Recent Project Route Handlers
==============================================

    POST   /api/recent-projects             record that a folder was opened (upsert by path)
    GET    /api/recent-projects             list, most recently opened first (name, gameVersion, page, perPage)
    DELETE /api/recent-projects?path=...    remove a folder from the list (204)
"""

from fastapi import APIRouter, Depends, Request, Response, status

from simhub.dependencies import get_recent_projects_service
from simhub.routes.common import read_json_body
from simhub.schemas.common import ErrorResponse
from simhub.schemas.recent_project import RecentProjectOutput, RecentProjectSearchOutput
from simhub.services.recent_projects_service import RecentProjectsService

router = APIRouter(prefix="/api/recent-projects", tags=["Recent Projects"])

_INVALID = {400: {"description": "Invalid input", "model": ErrorResponse}}


@router.post(
    "",
    response_model=RecentProjectOutput,
    responses={**_INVALID},
    summary="Record an opened project folder",
)
async def record_recent_project(
    request: Request,
    service: RecentProjectsService = Depends(get_recent_projects_service),
) -> RecentProjectOutput:
    return await service.record_opened(await read_json_body(request))


@router.get(
    "",
    response_model=RecentProjectSearchOutput,
    responses={**_INVALID},
    summary="List recently opened projects",
)
async def list_recent_projects(
    request: Request,
    response: Response,
    service: RecentProjectsService = Depends(get_recent_projects_service),
) -> RecentProjectSearchOutput:
    result = await service.list_recent(request.query_params)
    response.headers["X-Total-Count"] = str(result.pagination.total)
    return result


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**_INVALID, 404: {"description": "Path not in the list", "model": ErrorResponse}},
    summary="Remove a project folder from the recent list",
)
async def remove_recent_project(
    request: Request,
    service: RecentProjectsService = Depends(get_recent_projects_service),
) -> Response:
    await service.remove(request.query_params)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
