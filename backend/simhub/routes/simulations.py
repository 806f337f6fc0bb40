"""
SimHub Backend — Simulation History Route Handlers
==================================================

What:  CRUD surface for simulation history under /api/simulations.
How:   Routes are thin: they hand raw body, query string and path params to
       SimulationHistoryService, which validates them.

Route Inventory:
    POST   /api/simulations               create (201)
    GET    /api/simulations               list with filters + page/perPage
    GET    /api/simulations/{id}          detail
    PATCH  /api/simulations/{id}/status   status transition
    PUT    /api/simulations/{id}/report   attach generated report
    DELETE /api/simulations/{id}          delete (204)
"""

from fastapi import APIRouter, Depends, Request, Response, status

from simhub.dependencies import get_simulation_history_service
from simhub.routes.common import read_json_body
from simhub.schemas.common import ErrorResponse
from simhub.schemas.simulation_history import (
    SimulationHistoryEntryOutput,
    SimulationHistorySearchOutput,
)
from simhub.services.simulation_history_service import SimulationHistoryService

router = APIRouter(prefix="/api/simulations", tags=["Simulation History"])

_NOT_FOUND = {404: {"description": "Entry not found", "model": ErrorResponse}}
_INVALID = {400: {"description": "Invalid input", "model": ErrorResponse}}


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=SimulationHistoryEntryOutput,
    responses={**_INVALID},
    summary="Record a simulation run",
)
async def create_simulation(
    request: Request,
    service: SimulationHistoryService = Depends(get_simulation_history_service),
) -> SimulationHistoryEntryOutput:
    return await service.create_entry(await read_json_body(request))


@router.get(
    "",
    response_model=SimulationHistorySearchOutput,
    responses={**_INVALID},
    summary="Search simulation history",
    description=(
        "Filters: projectPath (case-insensitive substring), status, ttkVersion, "
        "dateFrom / dateTo (inclusive). Newest first. Pagination: page, perPage."
    ),
)
async def list_simulations(
    request: Request,
    response: Response,
    service: SimulationHistoryService = Depends(get_simulation_history_service),
) -> SimulationHistorySearchOutput:
    result = await service.list_entries(request.query_params)
    response.headers["X-Total-Count"] = str(result.pagination.total)
    return result


@router.get(
    "/{entry_id}",
    response_model=SimulationHistoryEntryOutput,
    responses={**_NOT_FOUND},
    summary="Get one simulation run",
)
async def get_simulation(
    entry_id: str,
    service: SimulationHistoryService = Depends(get_simulation_history_service),
) -> SimulationHistoryEntryOutput:
    return await service.get_entry({"id": entry_id})


@router.patch(
    "/{entry_id}/status",
    response_model=SimulationHistoryEntryOutput,
    responses={
        **_INVALID,
        **_NOT_FOUND,
        422: {"description": "Transition not allowed", "model": ErrorResponse},
    },
    summary="Move a simulation run to RUNNING, COMPLETED or FAILED",
)
async def update_simulation_status(
    entry_id: str,
    request: Request,
    service: SimulationHistoryService = Depends(get_simulation_history_service),
) -> SimulationHistoryEntryOutput:
    return await service.update_status({"id": entry_id}, await read_json_body(request))


@router.put(
    "/{entry_id}/report",
    response_model=SimulationHistoryEntryOutput,
    responses={**_INVALID, **_NOT_FOUND},
    summary="Attach a generated report to a simulation run",
)
async def attach_simulation_report(
    entry_id: str,
    request: Request,
    service: SimulationHistoryService = Depends(get_simulation_history_service),
) -> SimulationHistoryEntryOutput:
    return await service.attach_report({"id": entry_id}, await read_json_body(request))


@router.delete(
    "/{entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**_NOT_FOUND},
    summary="Delete a simulation run",
)
async def delete_simulation(
    entry_id: str,
    service: SimulationHistoryService = Depends(get_simulation_history_service),
) -> Response:
    await service.delete_entry({"id": entry_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
