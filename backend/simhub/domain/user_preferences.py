"""
SimHub Backend — UserPreferences Aggregate
==========================================

What:  Per-user UI preferences (theme, language, window geometry, autosave).
Why:   The desktop shell restores its window and settings from this record.
How:   ThemeMode / LanguageCode parsing returns Valid | Invalid; the aggregate's
       change_* methods accept only already-parsed values and raise DomainError
       for numeric rules.

Invariants:
    - auto_save_interval >= 5000 ms
    - 1 <= max_history_entries <= 1000
    - window dimensions are positive
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Tuple

from simhub.domain.common import Invalid, ParseResult, Valid, ensure_utc, utcnow
from simhub.exceptions import DomainError

MIN_AUTO_SAVE_INTERVAL_MS = 5000
MAX_HISTORY_ENTRIES_RANGE = (1, 1000)

SUPPORTED_LANGUAGES: Tuple[str, ...] = (
    "pt-BR",
    "en-US",
    "es-ES",
    "fr-FR",
    "de-DE",
    "ja-JP",
    "zh-CN",
)


class ThemeMode(str, Enum):
    LIGHT = "LIGHT"
    DARK = "DARK"
    SYSTEM = "SYSTEM"


def parse_theme_mode(value: Any) -> ParseResult[ThemeMode]:
    """Case-insensitive: 'dark' and 'DARK' both parse to ThemeMode.DARK."""
    if isinstance(value, ThemeMode):
        return Valid(value)
    if not isinstance(value, str):
        return Invalid(f"Theme mode must be a string, got {type(value).__name__}")
    try:
        return Valid(ThemeMode(value.upper()))
    except ValueError:
        allowed = ", ".join(m.value for m in ThemeMode)
        return Invalid(f"Invalid theme mode: {value}. Must be one of: {allowed}")


def parse_language_code(value: Any) -> ParseResult[str]:
    """Exact match against SUPPORTED_LANGUAGES ('pt-BR', not 'pt-br')."""
    if isinstance(value, str) and value in SUPPORTED_LANGUAGES:
        return Valid(value)
    return Invalid(
        f"Unsupported language: {value}. Supported languages: {', '.join(SUPPORTED_LANGUAGES)}"
    )


@dataclass
class UserPreferences:
    user_id: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    theme: ThemeMode = ThemeMode.SYSTEM
    language: str = "pt-BR"
    window_width: int = 1280
    window_height: int = 720
    window_x: Optional[int] = None
    window_y: Optional[int] = None
    window_is_maximized: bool = False
    auto_save_interval: int = 30000
    max_history_entries: int = 100
    last_project_path: Optional[str] = None
    last_open_date: Optional[datetime] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        theme = parse_theme_mode(self.theme)
        if isinstance(theme, Invalid):
            raise DomainError(theme.reason)
        self.theme = theme.value

        language = parse_language_code(self.language)
        if isinstance(language, Invalid):
            raise DomainError(language.reason)

        self.created_at = ensure_utc(self.created_at)
        self.updated_at = ensure_utc(self.updated_at) if self.updated_at else self.created_at
        if self.last_open_date is not None:
            self.last_open_date = ensure_utc(self.last_open_date)

    @classmethod
    def create_defaults(cls, user_id: str = "default") -> "UserPreferences":
        now = utcnow()
        return cls(user_id=user_id, created_at=now, updated_at=now)

    # ── Mutations ─────────────────────────────────────────────────────────
    def change_theme(self, theme: ThemeMode) -> None:
        self.theme = theme
        self._touch()

    def change_language(self, language: str) -> None:
        parsed = parse_language_code(language)
        if isinstance(parsed, Invalid):
            raise DomainError(parsed.reason)
        self.language = parsed.value
        self._touch()

    def update_window_dimensions(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise DomainError("Window dimensions must be positive")
        self.window_width = width
        self.window_height = height
        self._touch()

    def update_window_position(self, x: Optional[int], y: Optional[int]) -> None:
        self.window_x = x
        self.window_y = y
        self._touch()

    def set_window_maximized(self, maximized: bool) -> None:
        self.window_is_maximized = maximized
        self._touch()

    def change_auto_save_interval(self, interval: int) -> None:
        if interval < MIN_AUTO_SAVE_INTERVAL_MS:
            raise DomainError(f"Auto-save interval must be at least {MIN_AUTO_SAVE_INTERVAL_MS}ms")
        self.auto_save_interval = interval
        self._touch()

    def change_max_history_entries(self, entries: int) -> None:
        low, high = MAX_HISTORY_ENTRIES_RANGE
        if entries < low or entries > high:
            raise DomainError(f"Max history entries must be between {low} and {high}")
        self.max_history_entries = entries
        self._touch()

    def update_last_project_path(self, path: Optional[str]) -> None:
        """Opening a project also stamps last_open_date; clearing it leaves the date alone."""
        self.last_project_path = path
        if path:
            self.last_open_date = utcnow()
        self._touch()

    def _touch(self) -> None:
        self.updated_at = utcnow()
