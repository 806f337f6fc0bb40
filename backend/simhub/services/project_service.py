"""
SimHub Backend — Project Service
================================

What:  Register, fetch and open projects.
Why:   "Open or create" is what the desktop shell calls when the user picks a
       folder: reuse the project at that path if one exists, else register it.

Business Rules:
    - A path belongs to at most one project (DomainError on duplicates)
    - Opening a project stamps last_opened_at
"""

import logging
from typing import Any, Mapping

from simhub.exceptions import DomainError, NotFoundError
from simhub.repositories.ports import ProjectRepository
from simhub.schemas.project import (
    CreateProjectInput,
    GetOrCreateProjectOutput,
    ProjectIdParams,
    ProjectOutput,
)
from simhub.validation import validate_input, validate_response

logger = logging.getLogger(__name__)


class ProjectService:
    def __init__(self, repository: ProjectRepository):
        self.repository = repository

    async def create_project(self, raw: Any) -> ProjectOutput:
        data: CreateProjectInput = validate_input(CreateProjectInput, raw, "body")
        if await self.repository.exists_by_path(data.path):
            raise DomainError(
                f'Project with path "{data.path}" already exists',
                context={"path": data.path},
            )
        project = await self.repository.create(
            name=data.name,
            path=data.path,
            game_version=data.game_version,
            screenshot_path=data.screenshot_path,
        )
        logger.info("Project registered: %s at %s", project.id, project.path)
        return validate_response(ProjectOutput, project)

    async def get_project(self, raw_params: Mapping[str, Any]) -> ProjectOutput:
        params: ProjectIdParams = validate_input(ProjectIdParams, raw_params, "params")
        project = await self.repository.find_by_id(params.id)
        if project is None:
            raise NotFoundError(resource="Project", resource_id=params.id)
        return validate_response(ProjectOutput, project)

    async def get_or_create(self, raw: Any) -> GetOrCreateProjectOutput:
        data: CreateProjectInput = validate_input(CreateProjectInput, raw, "body")
        project = await self.repository.find_by_path(data.path)
        created = False
        if project is None:
            project = await self.repository.create(
                name=data.name,
                path=data.path,
                game_version=data.game_version,
                screenshot_path=data.screenshot_path,
            )
            created = True
            logger.info("Project registered on open: %s at %s", project.id, project.path)
        return validate_response(
            GetOrCreateProjectOutput, {"project": project, "created": created}
        )

    async def open_project(self, raw_params: Mapping[str, Any]) -> ProjectOutput:
        params: ProjectIdParams = validate_input(ProjectIdParams, raw_params, "params")
        if await self.repository.find_by_id(params.id) is None:
            raise NotFoundError(resource="Project", resource_id=params.id)
        await self.repository.update_last_opened(params.id)
        project = await self.repository.find_by_id(params.id)
        return validate_response(ProjectOutput, project)
