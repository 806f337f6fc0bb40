# Repositories package init
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

__all__ = [
    "InMemoryProjectRepository",
    "InMemoryRecentProjectsRepository",
    "InMemorySimulationHistoryRepository",
    "InMemoryUserPreferencesRepository",
    "ProjectRepository",
    "RecentProjectsRepository",
    "SimulationHistoryRepository",
    "SqlProjectRepository",
    "SqlRecentProjectsRepository",
    "SqlSimulationHistoryRepository",
    "SqlUserPreferencesRepository",
    "UserPreferencesRepository",
]
