"""
SimHub Backend — RecentProjectRecord SQLAlchemy Model
=====================================================

What:  ORM model for the `recent_projects` table.
Why:   path is UNIQUE because it is the natural key of an upsert. name_search
       holds name.lower() computed in Python so the name filter folds
       accented letters the same way on every backend.

    Index on last_opened_at DESC:
        The list is always "most recently opened first".
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from simhub.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecentProjectRecord(Base):
    __tablename__ = "recent_projects"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    path: Mapped[str] = mapped_column(String(1024), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    name_search: Mapped[str] = mapped_column(String(255), nullable=False)
    game_version: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    screenshot_path: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    trecho_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    last_opened_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    __table_args__ = (
        Index("idx_recent_projects_last_opened_at", last_opened_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<RecentProjectRecord(id={self.id}, path='{self.path}')>"
