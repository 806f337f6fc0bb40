"""
SimHub Backend — Project Schemas
================================

What:  Input and output models for the /api/projects routes.
"""

from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, Field

from simhub.domain.project import MAX_PROJECT_NAME_LENGTH, MIN_PROJECT_NAME_LENGTH
from simhub.schemas.common import CamelModel


class CreateProjectInput(CamelModel):
    """Body of POST /api/projects and POST /api/projects/open-or-create."""
    name: str = Field(min_length=MIN_PROJECT_NAME_LENGTH, max_length=MAX_PROJECT_NAME_LENGTH)
    path: str = Field(min_length=1, max_length=1024)
    game_version: Optional[str] = Field(default=None, max_length=50)
    screenshot_path: Optional[str] = Field(default=None, max_length=1024)


class ProjectIdParams(CamelModel):
    id: str = Field(min_length=1)


class ProjectOutput(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    path: str
    game_version: Optional[str] = None
    screenshot_path: Optional[str] = None
    trecho_count: Optional[int] = None
    last_opened_at: datetime
    created_at: datetime
    updated_at: datetime


class GetOrCreateProjectOutput(CamelModel):
    """created is false when a project already existed at the given path."""
    project: ProjectOutput
    created: bool
