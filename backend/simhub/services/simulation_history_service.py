"""
SimHub Backend — Simulation History Service (Use Case Orchestrator)
===================================================================

What:  The use cases over SimulationHistoryEntry: create, get, list, change
       status, attach report, delete.
Why:   Keeps business rules (state machine, not-found semantics, pagination
       defaults) out of the HTTP layer and out of the storage adapters.
How:   Every method follows the same shape:

    ┌──────────┐    ┌──────────────┐    ┌────────────┐    ┌───────────────┐
    │ raw data │───▶│ validate_    │───▶│ repository │───▶│ validate_     │
    │ (route)  │    │ input()      │    │ port       │    │ response()    │
    └──────────┘    └──────────────┘    └────────────┘    └───────────────┘

Who:   Called by simhub.routes.simulations; receives its repository through
       the constructor (simhub.dependencies builds one per request).

Error Handling Strategy:
    - InputValidationError from validate_input() propagates (400)
    - A None from a lookup becomes NotFoundError here (404)
    - Illegal status transitions raise DomainError from the entity (422)
    - Storage faults propagate untouched (500 via the global handler)
"""

import logging
from typing import Any, Mapping

from simhub.domain.simulation_history import SimulationHistoryEntry, SimulationStatus
from simhub.exceptions import NotFoundError
from simhub.repositories.ports import SimulationHistoryRepository
from simhub.schemas.simulation_history import (
    AttachReportInput,
    CreateSimulationHistoryInput,
    EntryIdParams,
    ListSimulationHistoryQuery,
    SimulationHistoryEntryOutput,
    SimulationHistorySearchOutput,
    UpdateSimulationStatusInput,
)
from simhub.validation import validate_input, validate_response

logger = logging.getLogger(__name__)

_RESOURCE = "Simulation history entry"


class SimulationHistoryService:
    """
    Business logic for simulation history.

    Stateless apart from the injected repository; safe to build per request.
    """

    def __init__(self, repository: SimulationHistoryRepository):
        self.repository = repository

    async def _require(self, entry_id: str) -> SimulationHistoryEntry:
        entry = await self.repository.find_by_id(entry_id)
        if entry is None:
            raise NotFoundError(resource=_RESOURCE, resource_id=entry_id)
        return entry

    async def create_entry(self, raw: Any) -> SimulationHistoryEntryOutput:
        """
        Record a new simulation run.

        Status defaults to PENDING and timestamp to now when not supplied.
        """
        data: CreateSimulationHistoryInput = validate_input(
            CreateSimulationHistoryInput, raw, "body"
        )
        entry = SimulationHistoryEntry.create(
            project_path=data.project_path,
            project_name=data.project_name,
            ttk_version=data.ttk_version,
            config_json=data.config_json,
            status=data.status,
            summary_json=data.summary_json,
            has_report=data.has_report,
            report_file_path=data.report_file_path,
            duration_ms=data.duration_ms,
            battle_count=data.battle_count,
            trecho_count=data.trecho_count,
            timestamp=data.timestamp,
        )
        await self.repository.insert(entry)
        logger.info("Simulation history entry created: %s (%s)", entry.id, entry.project_path)
        return validate_response(SimulationHistoryEntryOutput, entry)

    async def get_entry(self, raw_params: Mapping[str, Any]) -> SimulationHistoryEntryOutput:
        params: EntryIdParams = validate_input(EntryIdParams, raw_params, "params")
        entry = await self._require(params.id)
        return validate_response(SimulationHistoryEntryOutput, entry)

    async def list_entries(self, raw_query: Mapping[str, Any]) -> SimulationHistorySearchOutput:
        """
        Filtered, paginated listing, newest first.

        Defaults: page 1, perPage 20. page >= 1 and 1 <= perPage <= 100 are
        enforced by ListSimulationHistoryQuery.
        """
        query: ListSimulationHistoryQuery = validate_input(
            ListSimulationHistoryQuery, dict(raw_query), "query"
        )
        result = await self.repository.search(query.to_filters(), query.to_pagination())
        logger.debug(
            "Simulation history search: %d of %d (page %d)",
            len(result.items), result.pagination.total, result.pagination.page,
        )
        return validate_response(SimulationHistorySearchOutput, result)

    async def update_status(
        self, raw_params: Mapping[str, Any], raw_body: Any
    ) -> SimulationHistoryEntryOutput:
        """
        Move an entry forward through its state machine.

        RUNNING   → mark_running()
        COMPLETED → mark_completed(summaryJson or "{}")
        FAILED    → mark_failed(summaryJson)

        Raises:
            NotFoundError: unknown id
            DomainError:   the transition is not allowed from the current status
        """
        params: EntryIdParams = validate_input(EntryIdParams, raw_params, "params")
        body: UpdateSimulationStatusInput = validate_input(
            UpdateSimulationStatusInput, raw_body, "body"
        )
        entry = await self._require(params.id)
        previous = entry.status

        target = SimulationStatus(body.status)
        if target is SimulationStatus.RUNNING:
            entry.mark_running()
        elif target is SimulationStatus.COMPLETED:
            entry.mark_completed(body.summary_json if body.summary_json is not None else "{}")
        else:
            entry.mark_failed(body.summary_json)

        await self.repository.update(entry)
        logger.info(
            "Simulation %s: %s -> %s", entry.id, previous.value, entry.status.value
        )
        return validate_response(SimulationHistoryEntryOutput, entry)

    async def attach_report(
        self, raw_params: Mapping[str, Any], raw_body: Any
    ) -> SimulationHistoryEntryOutput:
        params: EntryIdParams = validate_input(EntryIdParams, raw_params, "params")
        body: AttachReportInput = validate_input(AttachReportInput, raw_body, "body")
        entry = await self._require(params.id)
        entry.attach_report(body.report_file_path)
        await self.repository.update(entry)
        logger.info("Report attached to simulation %s", entry.id)
        return validate_response(SimulationHistoryEntryOutput, entry)

    async def delete_entry(self, raw_params: Mapping[str, Any]) -> None:
        """
        Raises:
            NotFoundError: unknown id. The repository itself treats deleting
                an unknown id as a no-op; reporting it is this layer's choice.
        """
        params: EntryIdParams = validate_input(EntryIdParams, raw_params, "params")
        if not await self.repository.exists(params.id):
            raise NotFoundError(resource=_RESOURCE, resource_id=params.id)
        await self.repository.delete(params.id)
        logger.info("Simulation history entry deleted: %s", params.id)
