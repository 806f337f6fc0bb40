"""
SimHub Backend — Project Aggregate
==================================

What:  A game project the user has registered, keyed by id and unique by path.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from simhub.domain.common import ensure_utc, utcnow
from simhub.exceptions import DomainError

MIN_PROJECT_NAME_LENGTH = 3
MAX_PROJECT_NAME_LENGTH = 100


@dataclass
class Project:
    name: str
    path: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    game_version: Optional[str] = None
    screenshot_path: Optional[str] = None
    trecho_count: Optional[int] = None
    last_opened_at: datetime = field(default_factory=utcnow)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.name = (self.name or "").strip()
        if len(self.name) < MIN_PROJECT_NAME_LENGTH:
            raise DomainError(
                f"Project name must be at least {MIN_PROJECT_NAME_LENGTH} characters long"
            )
        if len(self.name) > MAX_PROJECT_NAME_LENGTH:
            raise DomainError(f"Project name cannot exceed {MAX_PROJECT_NAME_LENGTH} characters")
        if not self.path or not self.path.strip():
            raise DomainError("Project path is required")
        if self.trecho_count is not None and self.trecho_count < 0:
            raise DomainError("Trecho count cannot be negative")

        self.last_opened_at = ensure_utc(self.last_opened_at)
        self.created_at = ensure_utc(self.created_at)
        self.updated_at = ensure_utc(self.updated_at) if self.updated_at else self.created_at

    def mark_opened(self) -> None:
        now = utcnow()
        self.last_opened_at = now
        self.updated_at = now
