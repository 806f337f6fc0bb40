"""
SimHub Backend — Repository Ports
=================================

What:  Abstract persistence contracts, one per aggregate.
Why:   Use cases depend on these interfaces, never on a storage engine. The
       in-memory and SQLAlchemy adapters are interchangeable behind them.
How:   Concrete adapters inherit from a port and implement every coroutine.
Who:   Implemented in simhub.repositories.in_memory and simhub.repositories.sql;
       consumed by simhub.services.

Contract shared by all ports:
    - Absence is reported as None (or False), never as an exception.
    - Every operation is atomic with respect to a single aggregate instance.
    - delete() of an unknown key is a no-op.
    - update() of an unknown key raises RecordNotFoundError.
    - Storage faults propagate unchanged.
"""

from abc import ABC, abstractmethod
from typing import Optional

from simhub.domain.project import Project
from simhub.domain.recent_project import RecentProject
from simhub.domain.simulation_history import SimulationHistoryEntry
from simhub.domain.user_preferences import UserPreferences
from simhub.search import (
    PaginationParams,
    RecentProjectFilters,
    SearchResult,
    SimulationHistoryFilters,
)


class SimulationHistoryRepository(ABC):
    """
    Persistence contract for SimulationHistoryEntry.

    Implementations:
        - InMemorySimulationHistoryRepository: dict keyed by id (tests, demos)
        - SqlSimulationHistoryRepository: async SQLAlchemy session
    """

    @abstractmethod
    async def find_by_id(self, id: str) -> Optional[SimulationHistoryEntry]:
        ...

    @abstractmethod
    async def search(
        self,
        filters: SimulationHistoryFilters,
        pagination: PaginationParams,
    ) -> SearchResult:
        """
        Filtered, ordered, paginated listing.

        Ordering is timestamp DESC with id ASC as tie-break; total counts every
        match regardless of the page requested. See simhub.search.
        """
        ...

    @abstractmethod
    async def insert(self, entry: SimulationHistoryEntry) -> None:
        ...

    @abstractmethod
    async def update(self, entry: SimulationHistoryEntry) -> None:
        """
        Replace the stored entry that has entry.id with entry.

        Raises:
            RecordNotFoundError: no entry with that id exists.
        """
        ...

    @abstractmethod
    async def delete(self, id: str) -> None:
        ...

    @abstractmethod
    async def exists(self, id: str) -> bool:
        ...


class UserPreferencesRepository(ABC):
    """Persistence contract for UserPreferences, keyed by user_id."""

    @abstractmethod
    async def find_by_user_id(self, user_id: str) -> Optional[UserPreferences]:
        ...

    @abstractmethod
    async def save(self, preferences: UserPreferences) -> None:
        """Insert, or fully replace the record with the same user_id."""
        ...

    @abstractmethod
    async def delete(self, user_id: str) -> None:
        ...

    @abstractmethod
    async def exists(self, user_id: str) -> bool:
        ...


class ProjectRepository(ABC):
    """Persistence contract for Project. Paths are unique across projects."""

    @abstractmethod
    async def exists_by_path(self, path: str) -> bool:
        ...

    @abstractmethod
    async def create(
        self,
        name: str,
        path: str,
        game_version: Optional[str] = None,
        screenshot_path: Optional[str] = None,
    ) -> Project:
        """Persist a new project and return it with id and timestamps assigned."""
        ...

    @abstractmethod
    async def find_by_id(self, id: str) -> Optional[Project]:
        ...

    @abstractmethod
    async def find_by_path(self, path: str) -> Optional[Project]:
        ...

    @abstractmethod
    async def update(self, project: Project) -> None:
        """
        Raises:
            RecordNotFoundError: no project with that id exists.
        """
        ...

    @abstractmethod
    async def update_last_opened(self, id: str) -> None:
        """Stamp last_opened_at with the current time. No-op for an unknown id."""
        ...

    @abstractmethod
    async def delete(self, id: str) -> None:
        ...


class RecentProjectsRepository(ABC):
    """
    Persistence contract for RecentProject, keyed by its normalized path.

    Paths are compared exactly; normalization happens in the aggregate and
    in the input schemas before a path reaches the repository.
    """

    @abstractmethod
    async def find_by_path(self, path: str) -> Optional[RecentProject]:
        ...

    @abstractmethod
    async def find_by_id(self, id: str) -> Optional[RecentProject]:
        ...

    @abstractmethod
    async def exists_by_path(self, path: str) -> bool:
        ...

    @abstractmethod
    async def insert(self, project: RecentProject) -> None:
        """
        Raises:
            DomainError: a recent project with the same path already exists.
        """
        ...

    @abstractmethod
    async def update(self, project: RecentProject) -> None:
        """
        Replace the stored project that has project.path. The stored id is kept.

        Raises:
            RecordNotFoundError: no recent project with that path exists.
        """
        ...

    @abstractmethod
    async def upsert(self, project: RecentProject) -> RecentProject:
        """
        Insert, or replace the project stored at the same path.

        An existing row keeps its id and created_at; every other field is
        taken from `project`. Returns the project as stored.
        """
        ...

    @abstractmethod
    async def search(
        self,
        filters: RecentProjectFilters,
        pagination: PaginationParams,
    ) -> SearchResult:
        """Filtered page ordered by last_opened_at DESC, id ASC. See simhub.search."""
        ...

    @abstractmethod
    async def count(self, filters: RecentProjectFilters) -> int:
        ...

    @abstractmethod
    async def delete(self, path: str) -> None:
        ...
