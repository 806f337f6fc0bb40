"""Create simulation_history, user_preferences and projects tables

Revision ID: 001
Revises: None
Create Date: 2024-06-01 00:00:00.000000+00:00

What:  Initial schema for the three aggregates.
How:   Portable column types only (String ids, TIMESTAMP WITH TIME ZONE), so
       the same migration runs on PostgreSQL and SQLite.

Rollback: downgrade() drops all three tables (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "simulation_history",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("project_path", sa.String(1024), nullable=False),
        sa.Column("project_name", sa.String(255), nullable=False),
        # Plain text, not an enum type: unknown values are read back as PENDING
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'PENDING'"),
            comment="PENDING, RUNNING, COMPLETED or FAILED",
        ),
        sa.Column("ttk_version", sa.String(50), nullable=False),
        sa.Column("config_json", sa.Text(), nullable=False),
        sa.Column("summary_json", sa.Text(), nullable=False, server_default=sa.text("'{}'")),
        sa.Column("has_report", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("report_file_path", sa.String(1024), nullable=True),
        sa.Column("duration_ms", sa.Integer(), nullable=True),
        sa.Column("battle_count", sa.Integer(), nullable=True),
        sa.Column("trecho_count", sa.Integer(), nullable=True),
        sa.Column(
            "timestamp",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            comment="When the run happened; default ordering key",
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    # History listings are always newest first
    op.create_index(
        "idx_simulation_history_timestamp",
        "simulation_history",
        [sa.text("timestamp DESC")],
    )
    op.create_index("idx_simulation_history_status", "simulation_history", ["status"])

    op.create_table(
        "user_preferences",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("theme", sa.String(10), nullable=False),
        sa.Column("language", sa.String(10), nullable=False),
        sa.Column("window_width", sa.Integer(), nullable=False),
        sa.Column("window_height", sa.Integer(), nullable=False),
        sa.Column("window_x", sa.Integer(), nullable=True),
        sa.Column("window_y", sa.Integer(), nullable=True),
        sa.Column("window_is_maximized", sa.Boolean(), nullable=False),
        sa.Column("auto_save_interval", sa.Integer(), nullable=False),
        sa.Column("max_history_entries", sa.Integer(), nullable=False),
        sa.Column("last_project_path", sa.String(1024), nullable=True),
        sa.Column("last_open_date", sa.TIMESTAMP(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )

    op.create_table(
        "projects",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("path", sa.String(1024), nullable=False),
        sa.Column("game_version", sa.String(50), nullable=True),
        sa.Column("screenshot_path", sa.String(1024), nullable=True),
        sa.Column("trecho_count", sa.Integer(), nullable=True),
        sa.Column("last_opened_at", sa.TIMESTAMP(timezone=True), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("path"),
    )


def downgrade() -> None:
    op.drop_table("projects")
    op.drop_table("user_preferences")
    op.drop_index("idx_simulation_history_status", table_name="simulation_history")
    op.drop_index("idx_simulation_history_timestamp", table_name="simulation_history")
    op.drop_table("simulation_history")
