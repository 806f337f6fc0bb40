"""
SimHub Backend — Dependency Wiring
==================================

What:  Builds the repository registry and the services for each request.
Why:   Services only know repository ports. This module is the one place that
       decides which adapters stand behind them.
How:   get_repositories() is a FastAPI yield-dependency:
           STORAGE_BACKEND=database → SQL adapters sharing one session_scope()
                                      (commit on success, rollback on error)
           STORAGE_BACKEND=memory   → process-wide in-memory adapters
       Service providers depend on it, so one request shares one registry.

Commit timing:
    Every Depends(get_repositories) uses scope="function": the code after
    `yield` (the commit) runs when the endpoint returns, before the response
    is sent. A failed commit therefore reaches the exception handlers and the
    client gets a 500, never a 201 for a row that was rolled back. With the
    default "request" scope FastAPI would only commit after sending.

Testing:
    Override get_repositories via app.dependency_overrides to run the HTTP
    layer against any adapter set (see tests/conftest.py).
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from simhub.config import settings
from simhub.database import session_scope
from simhub.repositories.in_memory import (
    InMemoryProjectRepository,
    InMemoryRecentProjectsRepository,
    InMemorySimulationHistoryRepository,
    InMemoryUserPreferencesRepository,
)
from simhub.repositories.ports import (
    ProjectRepository,
    RecentProjectsRepository,
    SimulationHistoryRepository,
    UserPreferencesRepository,
)
from simhub.repositories.sql import (
    SqlProjectRepository,
    SqlRecentProjectsRepository,
    SqlSimulationHistoryRepository,
    SqlUserPreferencesRepository,
)
from simhub.services import (
    ProjectService,
    RecentProjectsService,
    SimulationHistoryService,
    UserPreferencesService,
)


@dataclass(frozen=True)
class Repositories:
    simulation_history: SimulationHistoryRepository
    user_preferences: UserPreferencesRepository
    projects: ProjectRepository
    recent_projects: RecentProjectsRepository


def sql_repositories(session: AsyncSession) -> Repositories:
    return Repositories(
        simulation_history=SqlSimulationHistoryRepository(session),
        user_preferences=SqlUserPreferencesRepository(session),
        projects=SqlProjectRepository(session),
        recent_projects=SqlRecentProjectsRepository(session),
    )


def memory_repositories() -> Repositories:
    return Repositories(
        simulation_history=InMemorySimulationHistoryRepository(),
        user_preferences=InMemoryUserPreferencesRepository(),
        projects=InMemoryProjectRepository(),
        recent_projects=InMemoryRecentProjectsRepository(),
    )


@lru_cache(maxsize=1)
def shared_memory_repositories() -> Repositories:
    """Process-wide store for STORAGE_BACKEND=memory; lost on restart."""
    return memory_repositories()


async def get_repositories() -> AsyncGenerator[Repositories, None]:
    if settings.storage_backend == "memory":
        yield shared_memory_repositories()
        return
    async with session_scope() as session:
        yield sql_repositories(session)


def get_simulation_history_service(
    repositories: Repositories = Depends(get_repositories, scope="function"),
) -> SimulationHistoryService:
    return SimulationHistoryService(repositories.simulation_history)


def get_user_preferences_service(
    repositories: Repositories = Depends(get_repositories, scope="function"),
) -> UserPreferencesService:
    return UserPreferencesService(repositories.user_preferences)


def get_project_service(
    repositories: Repositories = Depends(get_repositories, scope="function"),
) -> ProjectService:
    return ProjectService(repositories.projects)


def get_recent_projects_service(
    repositories: Repositories = Depends(get_repositories, scope="function"),
) -> RecentProjectsService:
    return RecentProjectsService(repositories.recent_projects)
