"""
SimHub Backend — Recent Projects Service
========================================

What:  Record that a folder was opened, list recently opened folders, and
       remove one from the list.
Why:   The launcher screen shows "recent projects" independently of the
       registered project catalogue: opening any folder adds or refreshes
       its entry, keyed by the folder path.

Business Rules:
    - record_opened is an upsert by normalized path: an existing entry gets
      last_opened_at stamped and its metadata overwritten by the fields sent
    - Fields omitted on a repeat open keep their stored values
    - Listing is most recently opened first, 10 per page by default
    - Removing a path that is not in the list is a 404
"""

import logging
from typing import Any, Mapping

from simhub.domain.recent_project import RecentProject
from simhub.exceptions import NotFoundError
from simhub.repositories.ports import RecentProjectsRepository
from simhub.schemas.recent_project import (
    ListRecentProjectsQuery,
    RecentProjectOutput,
    RecentProjectPathQuery,
    RecentProjectSearchOutput,
    RecordRecentProjectInput,
)
from simhub.validation import validate_input, validate_response

logger = logging.getLogger(__name__)


class RecentProjectsService:
    def __init__(self, repository: RecentProjectsRepository):
        self.repository = repository

    async def record_opened(self, raw: Any) -> RecentProjectOutput:
        data: RecordRecentProjectInput = validate_input(RecordRecentProjectInput, raw, "body")

        project = await self.repository.find_by_path(data.path)
        if project is None:
            project = RecentProject(
                path=data.path,
                name=data.name,
                game_version=data.game_version,
                screenshot_path=data.screenshot_path,
                trecho_count=data.trecho_count,
            )
            logger.info("Recent project added: %s", project.path)
        else:
            project.mark_opened()
            project.update_metadata(
                name=data.name,
                game_version=data.game_version,
                screenshot_path=data.screenshot_path,
                trecho_count=data.trecho_count,
            )
            logger.debug("Recent project reopened: %s", project.path)

        stored = await self.repository.upsert(project)
        return validate_response(RecentProjectOutput, stored)

    async def list_recent(self, raw_query: Mapping[str, Any]) -> RecentProjectSearchOutput:
        query: ListRecentProjectsQuery = validate_input(ListRecentProjectsQuery, raw_query, "query")
        result = await self.repository.search(query.to_filters(), query.to_pagination())
        return validate_response(RecentProjectSearchOutput, result)

    async def remove(self, raw_query: Mapping[str, Any]) -> None:
        query: RecentProjectPathQuery = validate_input(RecentProjectPathQuery, raw_query, "query")
        if not await self.repository.exists_by_path(query.path):
            raise NotFoundError(resource="Recent project", resource_id=query.path)
        await self.repository.delete(query.path)
        logger.info("Recent project removed: %s", query.path)
