"""Add simulation_history.project_path_search and the recent_projects table

Revision ID: 002
Revises: 001
Create Date: 2024-07-15 00:00:00.000000+00:00

What:  1. project_path_search: project_path folded with Python str.lower(),
          the column the case-insensitive project filter matches against.
       2. recent_projects: the launcher's recently opened list, unique by path.
How:   The new column is added nullable, backfilled row by row in Python
       (SQLite's lower() only folds ASCII), then made NOT NULL in a batch
       operation so the same migration runs on SQLite.

Rollback: downgrade() drops recent_projects and the search column.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _backfill_project_path_search() -> None:
    history = sa.table(
        "simulation_history",
        sa.column("id", sa.String),
        sa.column("project_path", sa.String),
        sa.column("project_path_search", sa.String),
    )
    bind = op.get_bind()
    rows = bind.execute(sa.select(history.c.id, history.c.project_path)).all()
    for row in rows:
        bind.execute(
            history.update()
            .where(history.c.id == row.id)
            .values(project_path_search=row.project_path.lower())
        )


def upgrade() -> None:
    op.add_column(
        "simulation_history",
        sa.Column("project_path_search", sa.String(1024), nullable=True),
    )
    _backfill_project_path_search()
    with op.batch_alter_table("simulation_history") as batch:
        batch.alter_column(
            "project_path_search", existing_type=sa.String(1024), nullable=False
        )

    op.create_table(
        "recent_projects",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("path", sa.String(1024), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("name_search", sa.String(255), nullable=False),
        sa.Column("game_version", sa.String(100), nullable=True),
        sa.Column("screenshot_path", sa.String(1024), nullable=True),
        sa.Column("trecho_count", sa.Integer(), nullable=True),
        sa.Column("last_opened_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("path"),
    )
    # The list is always most recently opened first
    op.create_index(
        "idx_recent_projects_last_opened_at",
        "recent_projects",
        [sa.text("last_opened_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_recent_projects_last_opened_at", table_name="recent_projects")
    op.drop_table("recent_projects")
    with op.batch_alter_table("simulation_history") as batch:
        batch.drop_column("project_path_search")
