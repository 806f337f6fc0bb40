"""
SimHub Backend — ProjectRecord SQLAlchemy Model
===============================================

What:  ORM model for the `projects` table.
Why:   path is UNIQUE: registering the same folder twice is a business error,
       and the constraint backs up the use-case check.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from simhub.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProjectRecord(Base):
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    path: Mapped[str] = mapped_column(String(1024), nullable=False, unique=True)
    game_version: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
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

    def __repr__(self) -> str:
        return f"<ProjectRecord(id={self.id}, path='{self.path}')>"
