"""
SimHub Backend — RecentProject Aggregate
========================================

What:  One entry of the "recently opened" list shown on the launcher screen.
Why:   Distinct from Project: a recent project is recorded every time a folder
       is opened, is keyed by its normalized path, and carries the metadata
       last seen for that folder (game version, screenshot, trecho count).
How:   A mutable dataclass validated in __post_init__, like the other
       aggregates. Value rules live in small parse_* helpers returning
       Valid / Invalid so the input schemas can reuse them.

Value rules:
    path          trimmed, backslashes become "/", must be non-blank
    name          trimmed, 1-255 characters, no control characters
    game_version  optional semantic version, leading "v" allowed
                  (1.2.3, v2.0.0-beta.1, 1.0.0+build.5)
    trecho_count  None or >= 0
"""

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Optional

from simhub.domain.common import Invalid, ParseResult, Valid, ensure_utc, utcnow
from simhub.exceptions import DomainError

MAX_RECENT_PROJECT_NAME_LENGTH = 255

_CONTROL_CHARACTERS = re.compile(r"[\x00-\x1f\x7f]")

_IDENTIFIER = r"(?:0|[1-9][0-9]*|[0-9]*[a-zA-Z-][a-zA-Z0-9-]*)"
_GAME_VERSION = re.compile(
    r"^v?(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)\.(0|[1-9][0-9]*)"
    rf"(?:-{_IDENTIFIER}(?:\.{_IDENTIFIER})*)?"
    r"(?:\+[a-zA-Z0-9-]+(?:\.[a-zA-Z0-9-]+)*)?$"
)


def normalize_project_path(value: str) -> str:
    """Trim and use forward slashes, so C:\\Games\\RPG and C:/Games/RPG are one entry."""
    return value.strip().replace("\\", "/")


def parse_recent_project_name(value: Any) -> ParseResult[str]:
    if not isinstance(value, str):
        return Invalid("Project name must be a string")
    name = value.strip()
    if not name:
        return Invalid("Project name cannot be empty")
    if len(name) > MAX_RECENT_PROJECT_NAME_LENGTH:
        return Invalid(
            f"Project name cannot exceed {MAX_RECENT_PROJECT_NAME_LENGTH} characters"
        )
    if _CONTROL_CHARACTERS.search(name):
        return Invalid("Project name contains invalid characters")
    return Valid(name)


def parse_game_version(value: Any) -> ParseResult[str]:
    """Valid(version) for a semantic version string (trimmed), Invalid otherwise."""
    if not isinstance(value, str):
        return Invalid("Game version must be a string")
    version = value.strip()
    if not _GAME_VERSION.match(version):
        return Invalid(
            f"Invalid game version {value!r}. Expected a semantic version such as 1.2.3"
        )
    return Valid(version)


def _unwrap(result: ParseResult[str]) -> str:
    if isinstance(result, Invalid):
        raise DomainError(result.reason)
    return result.value


@dataclass
class RecentProject:
    """
    A recently opened project folder.

    Invariants (checked on construction):
        - path is normalized and non-blank; it is the natural key
        - name and game_version follow the value rules above
        - trecho_count is None or >= 0
        - every instant is timezone-aware UTC
    """

    path: str
    name: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    game_version: Optional[str] = None
    screenshot_path: Optional[str] = None
    trecho_count: Optional[int] = None
    last_opened_at: datetime = field(default_factory=utcnow)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.path = normalize_project_path(self.path or "")
        if not self.path:
            raise DomainError("Project path is required")
        self.name = _unwrap(parse_recent_project_name(self.name))
        if self.game_version is not None:
            self.game_version = _unwrap(parse_game_version(self.game_version))
        self._check_trecho_count(self.trecho_count)

        self.last_opened_at = ensure_utc(self.last_opened_at)
        self.created_at = ensure_utc(self.created_at)
        self.updated_at = ensure_utc(self.updated_at) if self.updated_at else self.created_at

    @staticmethod
    def _check_trecho_count(value: Optional[int]) -> None:
        if value is not None and value < 0:
            raise DomainError("Trecho count cannot be negative", context={"trecho_count": value})

    def mark_opened(self) -> None:
        now = utcnow()
        self.last_opened_at = now
        self.updated_at = now

    def update_metadata(
        self,
        name: Optional[str] = None,
        game_version: Optional[str] = None,
        screenshot_path: Optional[str] = None,
        trecho_count: Optional[int] = None,
    ) -> None:
        """Overwrite only the fields that were given; None keeps the stored value."""
        if name is not None:
            self.name = _unwrap(parse_recent_project_name(name))
        if game_version is not None:
            self.game_version = _unwrap(parse_game_version(game_version))
        if screenshot_path is not None:
            self.screenshot_path = screenshot_path
        if trecho_count is not None:
            self._check_trecho_count(trecho_count)
            self.trecho_count = trecho_count
        self.updated_at = utcnow()

    def was_opened_within(self, days: int, now: Optional[datetime] = None) -> bool:
        reference = ensure_utc(now) if now is not None else utcnow()
        return self.last_opened_at >= reference - timedelta(days=days)

    @property
    def has_screenshot(self) -> bool:
        return bool(self.screenshot_path and self.screenshot_path.strip())

    @property
    def has_trecho_data(self) -> bool:
        return bool(self.trecho_count)
