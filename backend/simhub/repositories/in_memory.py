"""
SimHub Backend — In-Memory Repository Adapters
==============================================

What:  Dict-backed implementations of every repository port.
Why:   Second concrete adapter for each port: lets use cases and the HTTP
       layer run without a database (STORAGE_BACKEND=memory) and gives the
       test-suite a reference the SQL adapter must match exactly.
How:   Entities are deep-copied on the way in and on the way out, so a caller
       holding an entity cannot change stored state without calling update().
       Search goes through simhub.search (search_in_memory and
       search_recent_projects_in_memory).

Test helpers (not part of the ports):
    all()    snapshot of every stored entity
    clear()  drop everything
    seed()   bulk insert without the duplicate check
"""

import copy
import logging
from typing import Dict, Iterable, List, Optional, TypeVar

from simhub.domain.common import utcnow
from simhub.domain.project import Project
from simhub.domain.recent_project import RecentProject
from simhub.domain.simulation_history import SimulationHistoryEntry
from simhub.domain.user_preferences import UserPreferences
from simhub.exceptions import DomainError, RecordNotFoundError
from simhub.repositories.ports import (
    ProjectRepository,
    RecentProjectsRepository,
    SimulationHistoryRepository,
    UserPreferencesRepository,
)
from simhub.search import (
    PaginationParams,
    RecentProjectFilters,
    SearchResult,
    SimulationHistoryFilters,
    build_recent_project_predicate,
    matches,
    search_in_memory,
    search_recent_projects_in_memory,
)

logger = logging.getLogger(__name__)

E = TypeVar("E")


def _copy(entity: E) -> E:
    return copy.deepcopy(entity)


class InMemorySimulationHistoryRepository(SimulationHistoryRepository):
    def __init__(self) -> None:
        self._items: Dict[str, SimulationHistoryEntry] = {}

    async def find_by_id(self, id: str) -> Optional[SimulationHistoryEntry]:
        entry = self._items.get(id)
        return _copy(entry) if entry is not None else None

    async def search(
        self,
        filters: SimulationHistoryFilters,
        pagination: PaginationParams,
    ) -> SearchResult:
        result = search_in_memory(list(self._items.values()), filters, pagination)
        return SearchResult(
            items=tuple(_copy(e) for e in result.items),
            filters=result.filters,
            pagination=result.pagination,
        )

    async def insert(self, entry: SimulationHistoryEntry) -> None:
        if entry.id in self._items:
            raise DomainError(
                f"Simulation history entry '{entry.id}' already exists",
                context={"id": entry.id},
            )
        self._items[entry.id] = _copy(entry)

    async def update(self, entry: SimulationHistoryEntry) -> None:
        if entry.id not in self._items:
            raise RecordNotFoundError("simulation history entry", entry.id)
        self._items[entry.id] = _copy(entry)

    async def delete(self, id: str) -> None:
        self._items.pop(id, None)

    async def exists(self, id: str) -> bool:
        return id in self._items

    # ── Test Helpers ──────────────────────────────────────────────────────
    def all(self) -> List[SimulationHistoryEntry]:
        return [_copy(e) for e in self._items.values()]

    def clear(self) -> None:
        self._items.clear()

    def seed(self, entries: Iterable[SimulationHistoryEntry]) -> None:
        for entry in entries:
            self._items[entry.id] = _copy(entry)


class InMemoryUserPreferencesRepository(UserPreferencesRepository):
    def __init__(self) -> None:
        self._items: Dict[str, UserPreferences] = {}

    async def find_by_user_id(self, user_id: str) -> Optional[UserPreferences]:
        preferences = self._items.get(user_id)
        return _copy(preferences) if preferences is not None else None

    async def save(self, preferences: UserPreferences) -> None:
        self._items[preferences.user_id] = _copy(preferences)

    async def delete(self, user_id: str) -> None:
        self._items.pop(user_id, None)

    async def exists(self, user_id: str) -> bool:
        return user_id in self._items

    def all(self) -> List[UserPreferences]:
        return [_copy(p) for p in self._items.values()]

    def clear(self) -> None:
        self._items.clear()


class InMemoryProjectRepository(ProjectRepository):
    def __init__(self) -> None:
        self._items: Dict[str, Project] = {}

    async def exists_by_path(self, path: str) -> bool:
        return any(p.path == path for p in self._items.values())

    async def create(
        self,
        name: str,
        path: str,
        game_version: Optional[str] = None,
        screenshot_path: Optional[str] = None,
    ) -> Project:
        if await self.exists_by_path(path):
            raise DomainError(f"A project already exists at path '{path}'", context={"path": path})
        project = Project(
            name=name,
            path=path,
            game_version=game_version,
            screenshot_path=screenshot_path,
        )
        self._items[project.id] = _copy(project)
        logger.debug("Project created in memory: %s", project.id)
        return project

    async def find_by_id(self, id: str) -> Optional[Project]:
        project = self._items.get(id)
        return _copy(project) if project is not None else None

    async def find_by_path(self, path: str) -> Optional[Project]:
        for project in self._items.values():
            if project.path == path:
                return _copy(project)
        return None

    async def update(self, project: Project) -> None:
        if project.id not in self._items:
            raise RecordNotFoundError("project", project.id)
        self._items[project.id] = _copy(project)

    async def update_last_opened(self, id: str) -> None:
        project = self._items.get(id)
        if project is None:
            return
        now = utcnow()
        project.last_opened_at = now
        project.updated_at = now

    async def delete(self, id: str) -> None:
        self._items.pop(id, None)

    def all(self) -> List[Project]:
        return [_copy(p) for p in self._items.values()]

    def clear(self) -> None:
        self._items.clear()


class InMemoryRecentProjectsRepository(RecentProjectsRepository):
    def __init__(self) -> None:
        self._items: Dict[str, RecentProject] = {}

    async def find_by_path(self, path: str) -> Optional[RecentProject]:
        project = self._items.get(path)
        return _copy(project) if project is not None else None

    async def find_by_id(self, id: str) -> Optional[RecentProject]:
        for project in self._items.values():
            if project.id == id:
                return _copy(project)
        return None

    async def exists_by_path(self, path: str) -> bool:
        return path in self._items

    async def insert(self, project: RecentProject) -> None:
        if project.path in self._items:
            raise DomainError(
                f"A recent project already exists at path '{project.path}'",
                context={"path": project.path},
            )
        self._items[project.path] = _copy(project)

    async def update(self, project: RecentProject) -> None:
        existing = self._items.get(project.path)
        if existing is None:
            raise RecordNotFoundError("recent project", project.path)
        stored = _copy(project)
        stored.id = existing.id
        self._items[project.path] = stored

    async def upsert(self, project: RecentProject) -> RecentProject:
        stored = _copy(project)
        existing = self._items.get(project.path)
        if existing is not None:
            stored.id = existing.id
            stored.created_at = existing.created_at
        self._items[stored.path] = stored
        return _copy(stored)

    async def search(
        self,
        filters: RecentProjectFilters,
        pagination: PaginationParams,
    ) -> SearchResult:
        result = search_recent_projects_in_memory(list(self._items.values()), filters, pagination)
        return SearchResult(
            items=tuple(_copy(p) for p in result.items),
            filters=result.filters,
            pagination=result.pagination,
        )

    async def count(self, filters: RecentProjectFilters) -> int:
        predicate = build_recent_project_predicate(filters)
        return sum(1 for p in self._items.values() if matches(p, predicate))

    async def delete(self, path: str) -> None:
        self._items.pop(path, None)

    def all(self) -> List[RecentProject]:
        return [_copy(p) for p in self._items.values()]

    def clear(self) -> None:
        self._items.clear()
