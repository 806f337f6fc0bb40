"""
SimHub Backend — UserPreferencesRecord SQLAlchemy Model
=======================================================

What:  ORM model for the `user_preferences` table, one row per user_id.
Why:   user_id is UNIQUE so save() can upsert by it; theme and language are
       plain strings validated by the aggregate on the way out.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from simhub.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserPreferencesRecord(Base):
    __tablename__ = "user_preferences"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    theme: Mapped[str] = mapped_column(String(10), nullable=False, default="SYSTEM")
    language: Mapped[str] = mapped_column(String(10), nullable=False, default="pt-BR")

    # ── Window Geometry ───────────────────────────────────────────────────
    window_width: Mapped[int] = mapped_column(Integer, nullable=False, default=1280)
    window_height: Mapped[int] = mapped_column(Integer, nullable=False, default=720)
    window_x: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    window_y: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    window_is_maximized: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # ── Editor Behaviour ──────────────────────────────────────────────────
    auto_save_interval: Mapped[int] = mapped_column(Integer, nullable=False, default=30000)
    max_history_entries: Mapped[int] = mapped_column(Integer, nullable=False, default=100)

    last_project_path: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    last_open_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    def __repr__(self) -> str:
        return f"<UserPreferencesRecord(user_id='{self.user_id}', theme='{self.theme}')>"
