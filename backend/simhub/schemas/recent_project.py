"""
SimHub Backend — Recent Project Schemas
=======================================

What:  Input and output models for the /api/recent-projects routes.
How:   Paths are normalized (trimmed, forward slashes) at the boundary, so the
       repository only ever sees the key it stores. Name and game version
       reuse the aggregate's parse_* rules, which turns a bad value into an
       itemized 400 instead of a 422 from the aggregate.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict, Field, field_validator

from simhub.config import settings
from simhub.domain.common import Invalid
from simhub.domain.recent_project import (
    normalize_project_path,
    parse_game_version,
    parse_recent_project_name,
)
from simhub.schemas.common import CamelModel, PaginationMetaOutput
from simhub.search import PaginationParams, RecentProjectFilters


def _normalized_path(v: str) -> str:
    path = normalize_project_path(v)
    if not path:
        raise ValueError("path cannot be blank")
    return path


class RecordRecentProjectInput(CamelModel):
    """
    Body of POST /api/recent-projects.

    Example:
        {"path": "C:\\Games\\RPG", "name": "RPG Alpha", "gameVersion": "v1.2.0", "trechoCount": 12}
    """
    path: str = Field(min_length=1, max_length=1024)
    name: str
    game_version: Optional[str] = None
    screenshot_path: Optional[str] = Field(default=None, max_length=1024)
    trecho_count: Optional[int] = Field(default=None, ge=0)

    @field_validator("path")
    @classmethod
    def normalize_path(cls, v: str) -> str:
        return _normalized_path(v)

    @field_validator("name")
    @classmethod
    def valid_name(cls, v: str) -> str:
        parsed = parse_recent_project_name(v)
        if isinstance(parsed, Invalid):
            raise ValueError(parsed.reason)
        return parsed.value

    @field_validator("game_version")
    @classmethod
    def valid_game_version(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        parsed = parse_game_version(v)
        if isinstance(parsed, Invalid):
            raise ValueError(parsed.reason)
        return parsed.value


class ListRecentProjectsQuery(CamelModel):
    """
    Query string of GET /api/recent-projects.

    Example:
        ?name=rpg&gameVersion=1.2.0&page=1&perPage=10
    """
    name: Optional[str] = None
    game_version: Optional[str] = None
    page: int = Field(default=1, ge=1)
    per_page: int = Field(
        default=settings.recent_projects_page_size, ge=1, le=settings.max_page_size
    )

    @field_validator("name", "game_version", mode="before")
    @classmethod
    def blank_means_absent(cls, v):
        if isinstance(v, str) and v == "":
            return None
        return v

    def to_filters(self) -> RecentProjectFilters:
        return RecentProjectFilters(name=self.name, game_version=self.game_version)

    def to_pagination(self) -> PaginationParams:
        return PaginationParams(page=self.page, per_page=self.per_page)


class RecentProjectPathQuery(CamelModel):
    """Query string of DELETE /api/recent-projects (?path=...)."""
    path: str = Field(min_length=1, max_length=1024)

    @field_validator("path")
    @classmethod
    def normalize_path(cls, v: str) -> str:
        return _normalized_path(v)


class RecentProjectOutput(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    path: str
    name: str
    game_version: Optional[str] = None
    screenshot_path: Optional[str] = None
    trecho_count: Optional[int] = None
    has_screenshot: bool
    has_trecho_data: bool
    last_opened_at: datetime
    created_at: datetime
    updated_at: datetime


class RecentProjectFiltersOutput(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    name: Optional[str] = None
    game_version: Optional[str] = None


class RecentProjectSearchOutput(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    items: List[RecentProjectOutput]
    filters: RecentProjectFiltersOutput
    pagination: PaginationMetaOutput
