# Services package init
"""
SimHub Backend — Services Layer
===============================

What:  Use cases sitting between routes (HTTP) and repository ports (persistence).
Why:   Routes handle HTTP, services handle business rules, adapters handle storage.
How:   Each service receives a repository port in its constructor, validates raw
       input with validate_input(), calls the port, and validates what it
       returns with validate_response().

Service Inventory:
    - SimulationHistoryService: create/get/list/update status/attach report/delete
    - UserPreferencesService:   lazy defaults + partial update
    - ProjectService:           register, get, open-or-create, open
    - RecentProjectsService:    record opened folder, list recent, remove
"""

from simhub.services.project_service import ProjectService
from simhub.services.recent_projects_service import RecentProjectsService
from simhub.services.simulation_history_service import SimulationHistoryService
from simhub.services.user_preferences_service import UserPreferencesService

__all__ = [
    "ProjectService",
    "RecentProjectsService",
    "SimulationHistoryService",
    "UserPreferencesService",
]
