"""
SimHub Backend — SimulationHistoryRecord SQLAlchemy Model
=========================================================

What:  ORM model for the `simulation_history` table.
Why:   Row shape for the SQL adapter; mapped to and from the
       SimulationHistoryEntry aggregate in simhub.repositories.sql.
Who:   Used by SqlSimulationHistoryRepository and by Alembic.

Table Design Rationale:
    - id String(36): opaque UUID text, portable across PostgreSQL and SQLite
    - status String(20): plain text, not a DB enum. Unknown values written by
      another schema version are read back as PENDING instead of failing.
    - config_json / summary_json TEXT: opaque blobs, never queried
    - project_path_search: project_path folded with Python str.lower(). SQLite
      lower() only folds ASCII, so "AÇÃO" would never match "ação" there.
    - timestamp: the ordering key of every history listing

    Index on timestamp DESC:
        The history list is always "newest first"; the index serves both the
        ORDER BY and the date range filter.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from simhub.database import Base


class SimulationHistoryRecord(Base):
    __tablename__ = "simulation_history"

    # ── Primary Key ───────────────────────────────────────────────────────
    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        comment="Opaque entry identifier, assigned once by the aggregate",
    )

    # ── Project ───────────────────────────────────────────────────────────
    project_path: Mapped[str] = mapped_column(String(1024), nullable=False)
    # Written as project_path.lower() by the adapter; substring search runs here
    project_path_search: Mapped[str] = mapped_column(String(1024), nullable=False)
    project_name: Mapped[str] = mapped_column(String(255), nullable=False)

    # ── Run State ─────────────────────────────────────────────────────────
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="PENDING",
        server_default=text("'PENDING'"),
        comment="PENDING, RUNNING, COMPLETED or FAILED",
    )
    ttk_version: Mapped[str] = mapped_column(String(50), nullable=False)

    # ── Opaque Payloads ───────────────────────────────────────────────────
    config_json: Mapped[str] = mapped_column(Text, nullable=False)
    summary_json: Mapped[str] = mapped_column(
        Text, nullable=False, default="{}", server_default=text("'{}'")
    )

    # ── Report ────────────────────────────────────────────────────────────
    # report_file_path is NULL whenever has_report is false
    has_report: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    report_file_path: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    # ── Metrics ───────────────────────────────────────────────────────────
    duration_ms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    battle_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    trecho_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # ── Timestamps ────────────────────────────────────────────────────────
    # All stored in UTC
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        comment="When the run happened; default ordering key",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # ── Indexes ───────────────────────────────────────────────────────────
    __table_args__ = (
        Index("idx_simulation_history_timestamp", timestamp.desc()),
        Index("idx_simulation_history_status", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<SimulationHistoryRecord(id={self.id}, status='{self.status}', "
            f"timestamp='{self.timestamp}')>"
        )
