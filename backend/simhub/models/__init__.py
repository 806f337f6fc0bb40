# Models package init
"""
SimHub Backend — SQLAlchemy ORM Models
======================================

Importing this package registers every table on Base.metadata
(needed by Alembic autogenerate and database.init_models()).
"""

from simhub.models.project import ProjectRecord
from simhub.models.recent_project import RecentProjectRecord
from simhub.models.simulation_history import SimulationHistoryRecord
from simhub.models.user_preferences import UserPreferencesRecord

__all__ = [
    "ProjectRecord",
    "RecentProjectRecord",
    "SimulationHistoryRecord",
    "UserPreferencesRecord",
]
