"""
SimHub Backend — SQLAlchemy Repository Adapters
===============================================

What:  Relational implementations of every repository port over an AsyncSession.
Why:   Production persistence (PostgreSQL via asyncpg; SQLite via aiosqlite in
       tests) with behavior identical to simhub.repositories.in_memory.
How:   Each adapter receives the request-scoped session in its constructor.
       Writes only flush(); commit and rollback belong to
       simhub.database.session_scope().

Search translation (simhub.search.Condition → SQL):
    ICONTAINS → col_search LIKE '%' || :v.lower() || '%' with % and _ escaped,
                where col_search is the <field>_search column this adapter
                writes as value.lower() (Python folding, not the database's)
    EQ        → col = :v
    GTE / LTE → col >= :v / col <= :v
    ORDER BY timestamp DESC, id ASC (recent projects: last_opened_at DESC,
    id ASC), then OFFSET / LIMIT, plus one COUNT(*)

Schema drift:
    A status string this version does not recognize is read back as PENDING
    and logged at WARNING instead of failing the whole query. The mapping
    happens on read only: a status=PENDING filter compares the stored string,
    so such a row is listed without a status filter but never under PENDING.

Errors:
    sqlalchemy.exc.SQLAlchemyError is not caught here. Storage faults reach
    the global handler unchanged.
"""

import logging
from typing import Any, Dict, Optional, Type

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from simhub.database import Base
from simhub.domain.common import Invalid, ensure_utc, utcnow
from simhub.domain.project import Project
from simhub.domain.recent_project import RecentProject
from simhub.domain.simulation_history import (
    SimulationHistoryEntry,
    SimulationStatus,
    parse_simulation_status,
)
from simhub.domain.user_preferences import UserPreferences
from simhub.exceptions import DomainError, RecordNotFoundError
from simhub.models.project import ProjectRecord
from simhub.models.recent_project import RecentProjectRecord
from simhub.models.simulation_history import SimulationHistoryRecord
from simhub.models.user_preferences import UserPreferencesRecord
from simhub.repositories.ports import (
    ProjectRepository,
    RecentProjectsRepository,
    SimulationHistoryRepository,
    UserPreferencesRepository,
)
from simhub.search import (
    Condition,
    Operator,
    PaginationParams,
    RecentProjectFilters,
    SearchResult,
    SimulationHistoryFilters,
    build_predicate,
    build_recent_project_predicate,
    build_search_result,
    page_offset,
)

logger = logging.getLogger(__name__)


def _optional_utc(value):
    return ensure_utc(value) if value is not None else None


# ── Simulation History ────────────────────────────────────────────────────

def _entry_columns(entry: SimulationHistoryEntry) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "project_path": entry.project_path,
        "project_path_search": entry.project_path.lower(),
        "project_name": entry.project_name,
        "status": entry.status.value,
        "ttk_version": entry.ttk_version,
        "config_json": entry.config_json,
        "summary_json": entry.summary_json,
        "has_report": entry.has_report,
        "report_file_path": entry.report_file_path,
        "duration_ms": entry.duration_ms,
        "battle_count": entry.battle_count,
        "trecho_count": entry.trecho_count,
        "timestamp": entry.timestamp,
        "created_at": entry.created_at,
        "updated_at": entry.updated_at,
    }


def _status_from_row(record: SimulationHistoryRecord) -> SimulationStatus:
    parsed = parse_simulation_status(record.status)
    if isinstance(parsed, Invalid):
        logger.warning(
            "Unknown status %r on simulation history %s, reading it as PENDING",
            record.status, record.id,
        )
        return SimulationStatus.PENDING
    return parsed.value


def _to_entry(record: SimulationHistoryRecord) -> SimulationHistoryEntry:
    return SimulationHistoryEntry(
        id=record.id,
        project_path=record.project_path,
        project_name=record.project_name,
        status=_status_from_row(record),
        ttk_version=record.ttk_version,
        config_json=record.config_json,
        summary_json=record.summary_json,
        has_report=record.has_report,
        report_file_path=record.report_file_path,
        duration_ms=record.duration_ms,
        battle_count=record.battle_count,
        trecho_count=record.trecho_count,
        timestamp=ensure_utc(record.timestamp),
        created_at=ensure_utc(record.created_at),
        updated_at=_optional_utc(record.updated_at),
    )


def _to_clause(model: Type[Base], condition: Condition) -> ColumnElement[bool]:
    if condition.operator is Operator.ICONTAINS:
        search_column = getattr(model, f"{condition.field}_search")
        return search_column.contains(str(condition.value).lower(), autoescape=True)
    column = getattr(model, condition.field)
    if condition.operator is Operator.EQ:
        return column == condition.value
    if condition.operator is Operator.GTE:
        return column >= condition.value
    if condition.operator is Operator.LTE:
        return column <= condition.value
    raise ValueError(f"Unsupported operator: {condition.operator}")


class SqlSimulationHistoryRepository(SimulationHistoryRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_id(self, id: str) -> Optional[SimulationHistoryEntry]:
        record = await self.session.get(SimulationHistoryRecord, id)
        return _to_entry(record) if record is not None else None

    async def search(
        self,
        filters: SimulationHistoryFilters,
        pagination: PaginationParams,
    ) -> SearchResult:
        clauses = [_to_clause(SimulationHistoryRecord, c) for c in build_predicate(filters)]

        # Same WHERE for both statements so total and page never disagree
        count_query = (
            select(func.count())
            .select_from(SimulationHistoryRecord)
            .where(*clauses)
        )
        total = (await self.session.execute(count_query)).scalar_one()

        page_query = (
            select(SimulationHistoryRecord)
            .where(*clauses)
            .order_by(SimulationHistoryRecord.timestamp.desc(), SimulationHistoryRecord.id.asc())
            .offset(page_offset(pagination))
            .limit(pagination.per_page)
        )
        records = (await self.session.execute(page_query)).scalars().all()

        return build_search_result(
            (_to_entry(r) for r in records),
            total=total,
            filters=filters,
            pagination=pagination,
        )

    async def insert(self, entry: SimulationHistoryEntry) -> None:
        if await self.session.get(SimulationHistoryRecord, entry.id) is not None:
            raise DomainError(
                f"Simulation history entry '{entry.id}' already exists",
                context={"id": entry.id},
            )
        self.session.add(SimulationHistoryRecord(**_entry_columns(entry)))
        await self.session.flush()

    async def update(self, entry: SimulationHistoryEntry) -> None:
        record = await self.session.get(SimulationHistoryRecord, entry.id)
        if record is None:
            raise RecordNotFoundError("simulation history entry", entry.id)
        for name, value in _entry_columns(entry).items():
            setattr(record, name, value)
        await self.session.flush()

    async def delete(self, id: str) -> None:
        record = await self.session.get(SimulationHistoryRecord, id)
        if record is None:
            return
        await self.session.delete(record)
        await self.session.flush()

    async def exists(self, id: str) -> bool:
        query = (
            select(func.count())
            .select_from(SimulationHistoryRecord)
            .where(SimulationHistoryRecord.id == id)
        )
        return (await self.session.execute(query)).scalar_one() > 0


# ── User Preferences ──────────────────────────────────────────────────────

def _preferences_columns(preferences: UserPreferences) -> Dict[str, Any]:
    return {
        "id": preferences.id,
        "user_id": preferences.user_id,
        "theme": preferences.theme.value,
        "language": preferences.language,
        "window_width": preferences.window_width,
        "window_height": preferences.window_height,
        "window_x": preferences.window_x,
        "window_y": preferences.window_y,
        "window_is_maximized": preferences.window_is_maximized,
        "auto_save_interval": preferences.auto_save_interval,
        "max_history_entries": preferences.max_history_entries,
        "last_project_path": preferences.last_project_path,
        "last_open_date": preferences.last_open_date,
        "created_at": preferences.created_at,
        "updated_at": preferences.updated_at,
    }


def _to_preferences(record: UserPreferencesRecord) -> UserPreferences:
    return UserPreferences(
        id=record.id,
        user_id=record.user_id,
        theme=record.theme,
        language=record.language,
        window_width=record.window_width,
        window_height=record.window_height,
        window_x=record.window_x,
        window_y=record.window_y,
        window_is_maximized=record.window_is_maximized,
        auto_save_interval=record.auto_save_interval,
        max_history_entries=record.max_history_entries,
        last_project_path=record.last_project_path,
        last_open_date=_optional_utc(record.last_open_date),
        created_at=ensure_utc(record.created_at),
        updated_at=_optional_utc(record.updated_at),
    )


class SqlUserPreferencesRepository(UserPreferencesRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _get_record(self, user_id: str) -> Optional[UserPreferencesRecord]:
        result = await self.session.execute(
            select(UserPreferencesRecord).where(UserPreferencesRecord.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def find_by_user_id(self, user_id: str) -> Optional[UserPreferences]:
        record = await self._get_record(user_id)
        return _to_preferences(record) if record is not None else None

    async def save(self, preferences: UserPreferences) -> None:
        columns = _preferences_columns(preferences)
        record = await self._get_record(preferences.user_id)
        if record is None:
            self.session.add(UserPreferencesRecord(**columns))
        else:
            for name, value in columns.items():
                setattr(record, name, value)
        await self.session.flush()

    async def delete(self, user_id: str) -> None:
        record = await self._get_record(user_id)
        if record is None:
            return
        await self.session.delete(record)
        await self.session.flush()

    async def exists(self, user_id: str) -> bool:
        query = (
            select(func.count())
            .select_from(UserPreferencesRecord)
            .where(UserPreferencesRecord.user_id == user_id)
        )
        return (await self.session.execute(query)).scalar_one() > 0


# ── Projects ──────────────────────────────────────────────────────────────

def _project_columns(project: Project) -> Dict[str, Any]:
    return {
        "id": project.id,
        "name": project.name,
        "path": project.path,
        "game_version": project.game_version,
        "screenshot_path": project.screenshot_path,
        "trecho_count": project.trecho_count,
        "last_opened_at": project.last_opened_at,
        "created_at": project.created_at,
        "updated_at": project.updated_at,
    }


def _to_project(record: ProjectRecord) -> Project:
    return Project(
        id=record.id,
        name=record.name,
        path=record.path,
        game_version=record.game_version,
        screenshot_path=record.screenshot_path,
        trecho_count=record.trecho_count,
        last_opened_at=ensure_utc(record.last_opened_at),
        created_at=ensure_utc(record.created_at),
        updated_at=_optional_utc(record.updated_at),
    )


class SqlProjectRepository(ProjectRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _get_by_path(self, path: str) -> Optional[ProjectRecord]:
        result = await self.session.execute(
            select(ProjectRecord).where(ProjectRecord.path == path)
        )
        return result.scalar_one_or_none()

    async def exists_by_path(self, path: str) -> bool:
        query = select(func.count()).select_from(ProjectRecord).where(ProjectRecord.path == path)
        return (await self.session.execute(query)).scalar_one() > 0

    async def create(
        self,
        name: str,
        path: str,
        game_version: Optional[str] = None,
        screenshot_path: Optional[str] = None,
    ) -> Project:
        if await self.exists_by_path(path):
            raise DomainError(f"A project already exists at path '{path}'", context={"path": path})
        project = Project(
            name=name,
            path=path,
            game_version=game_version,
            screenshot_path=screenshot_path,
        )
        self.session.add(ProjectRecord(**_project_columns(project)))
        await self.session.flush()
        logger.debug("Project row inserted: %s", project.id)
        return project

    async def find_by_id(self, id: str) -> Optional[Project]:
        record = await self.session.get(ProjectRecord, id)
        return _to_project(record) if record is not None else None

    async def find_by_path(self, path: str) -> Optional[Project]:
        record = await self._get_by_path(path)
        return _to_project(record) if record is not None else None

    async def update(self, project: Project) -> None:
        record = await self.session.get(ProjectRecord, project.id)
        if record is None:
            raise RecordNotFoundError("project", project.id)
        for name, value in _project_columns(project).items():
            setattr(record, name, value)
        await self.session.flush()

    async def update_last_opened(self, id: str) -> None:
        record = await self.session.get(ProjectRecord, id)
        if record is None:
            return
        now = utcnow()
        record.last_opened_at = now
        record.updated_at = now
        await self.session.flush()

    async def delete(self, id: str) -> None:
        record = await self.session.get(ProjectRecord, id)
        if record is None:
            return
        await self.session.delete(record)
        await self.session.flush()


# ── Recent Projects ───────────────────────────────────────────────────────

def _recent_project_columns(project: RecentProject) -> Dict[str, Any]:
    return {
        "id": project.id,
        "path": project.path,
        "name": project.name,
        "name_search": project.name.lower(),
        "game_version": project.game_version,
        "screenshot_path": project.screenshot_path,
        "trecho_count": project.trecho_count,
        "last_opened_at": project.last_opened_at,
        "created_at": project.created_at,
        "updated_at": project.updated_at,
    }


def _to_recent_project(record: RecentProjectRecord) -> RecentProject:
    return RecentProject(
        id=record.id,
        path=record.path,
        name=record.name,
        game_version=record.game_version,
        screenshot_path=record.screenshot_path,
        trecho_count=record.trecho_count,
        last_opened_at=ensure_utc(record.last_opened_at),
        created_at=ensure_utc(record.created_at),
        updated_at=_optional_utc(record.updated_at),
    )


class SqlRecentProjectsRepository(RecentProjectsRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _get_by_path(self, path: str) -> Optional[RecentProjectRecord]:
        result = await self.session.execute(
            select(RecentProjectRecord).where(RecentProjectRecord.path == path)
        )
        return result.scalar_one_or_none()

    def _clauses(self, filters: RecentProjectFilters):
        return [_to_clause(RecentProjectRecord, c) for c in build_recent_project_predicate(filters)]

    async def find_by_path(self, path: str) -> Optional[RecentProject]:
        record = await self._get_by_path(path)
        return _to_recent_project(record) if record is not None else None

    async def find_by_id(self, id: str) -> Optional[RecentProject]:
        record = await self.session.get(RecentProjectRecord, id)
        return _to_recent_project(record) if record is not None else None

    async def exists_by_path(self, path: str) -> bool:
        query = (
            select(func.count())
            .select_from(RecentProjectRecord)
            .where(RecentProjectRecord.path == path)
        )
        return (await self.session.execute(query)).scalar_one() > 0

    async def insert(self, project: RecentProject) -> None:
        if await self.exists_by_path(project.path):
            raise DomainError(
                f"A recent project already exists at path '{project.path}'",
                context={"path": project.path},
            )
        self.session.add(RecentProjectRecord(**_recent_project_columns(project)))
        await self.session.flush()

    async def update(self, project: RecentProject) -> None:
        record = await self._get_by_path(project.path)
        if record is None:
            raise RecordNotFoundError("recent project", project.path)
        columns = _recent_project_columns(project)
        del columns["id"]
        for name, value in columns.items():
            setattr(record, name, value)
        await self.session.flush()

    async def upsert(self, project: RecentProject) -> RecentProject:
        columns = _recent_project_columns(project)
        record = await self._get_by_path(project.path)
        if record is None:
            record = RecentProjectRecord(**columns)
            self.session.add(record)
        else:
            # The stored row keeps its identity
            del columns["id"], columns["created_at"]
            for name, value in columns.items():
                setattr(record, name, value)
        await self.session.flush()
        logger.debug("Recent project upserted: %s", record.path)
        return _to_recent_project(record)

    async def search(
        self,
        filters: RecentProjectFilters,
        pagination: PaginationParams,
    ) -> SearchResult:
        clauses = self._clauses(filters)
        total = await self.count(filters)
        page_query = (
            select(RecentProjectRecord)
            .where(*clauses)
            .order_by(RecentProjectRecord.last_opened_at.desc(), RecentProjectRecord.id.asc())
            .offset(page_offset(pagination))
            .limit(pagination.per_page)
        )
        records = (await self.session.execute(page_query)).scalars().all()
        return build_search_result(
            (_to_recent_project(r) for r in records),
            total=total,
            filters=filters,
            pagination=pagination,
        )

    async def count(self, filters: RecentProjectFilters) -> int:
        query = (
            select(func.count())
            .select_from(RecentProjectRecord)
            .where(*self._clauses(filters))
        )
        return (await self.session.execute(query)).scalar_one()

    async def delete(self, path: str) -> None:
        record = await self._get_by_path(path)
        if record is None:
            return
        await self.session.delete(record)
        await self.session.flush()
