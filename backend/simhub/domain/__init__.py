# Domain package init
"""
SimHub Backend — Domain Layer
=============================

What:  Plain-Python aggregates and value parsing. No I/O, no framework imports.

Aggregates:
    - SimulationHistoryEntry (+ SimulationStatus state machine)
    - UserPreferences (+ ThemeMode, language codes)
    - Project
    - RecentProject (+ path normalization, game version parsing)
"""

from simhub.domain.common import Invalid, ParseResult, Valid, ensure_utc, utcnow
from simhub.domain.project import Project
from simhub.domain.recent_project import (
    RecentProject,
    normalize_project_path,
    parse_game_version,
    parse_recent_project_name,
)
from simhub.domain.simulation_history import (
    SimulationHistoryEntry,
    SimulationStatus,
    TERMINAL_STATUSES,
    parse_simulation_status,
)
from simhub.domain.user_preferences import (
    SUPPORTED_LANGUAGES,
    ThemeMode,
    UserPreferences,
    parse_language_code,
    parse_theme_mode,
)

__all__ = [
    "Invalid",
    "ParseResult",
    "Project",
    "RecentProject",
    "SUPPORTED_LANGUAGES",
    "SimulationHistoryEntry",
    "SimulationStatus",
    "TERMINAL_STATUSES",
    "ThemeMode",
    "UserPreferences",
    "Valid",
    "ensure_utc",
    "normalize_project_path",
    "parse_game_version",
    "parse_language_code",
    "parse_recent_project_name",
    "parse_simulation_status",
    "parse_theme_mode",
    "utcnow",
]
