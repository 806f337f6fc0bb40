"""
SimHub Backend — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the whole suite.
How:   Environment is pinned BEFORE any simhub import, so the module-level
       settings and engine never point at a real database.

Fixture Hierarchy (all function-scoped):
    ├── sqlite_engine        in-memory SQLite (aiosqlite), tables created
    ├── db_session           AsyncSession on that engine, no commit
    ├── history_repository   parametrized: memory | sql  (same tests, both adapters)
    ├── preferences_repository  parametrized: memory | sql
    ├── project_repository   parametrized: memory | sql
    ├── recent_projects_repository  parametrized: memory | sql
    ├── entry_factory        builds valid SimulationHistoryEntry objects
    ├── test_client          httpx AsyncClient, in-memory adapters
    └── sql_test_client      httpx AsyncClient, SQLite adapters + session_scope
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timedelta, timezone  # noqa: E402
from typing import AsyncGenerator, Callable  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from simhub.database import init_models, session_scope  # noqa: E402
from simhub.dependencies import (  # noqa: E402
    get_repositories,
    memory_repositories,
    sql_repositories,
)
from simhub.domain.simulation_history import SimulationHistoryEntry, SimulationStatus  # noqa: E402
from simhub.repositories.in_memory import (  # noqa: E402
    InMemoryProjectRepository,
    InMemoryRecentProjectsRepository,
    InMemorySimulationHistoryRepository,
    InMemoryUserPreferencesRepository,
)
from simhub.repositories.sql import (  # noqa: E402
    SqlProjectRepository,
    SqlRecentProjectsRepository,
    SqlSimulationHistoryRepository,
    SqlUserPreferencesRepository,
)

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def sqlite_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Fresh in-memory SQLite database per test.

    StaticPool: every session shares the one connection, otherwise each new
    connection would open an empty in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine) -> async_sessionmaker:
    return async_sessionmaker(sqlite_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Repository Fixtures (one test body, both adapters)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture(params=["memory", "sql"])
def history_repository(request, db_session):
    if request.param == "memory":
        return InMemorySimulationHistoryRepository()
    return SqlSimulationHistoryRepository(db_session)


@pytest.fixture(params=["memory", "sql"])
def preferences_repository(request, db_session):
    if request.param == "memory":
        return InMemoryUserPreferencesRepository()
    return SqlUserPreferencesRepository(db_session)


@pytest.fixture(params=["memory", "sql"])
def project_repository(request, db_session):
    if request.param == "memory":
        return InMemoryProjectRepository()
    return SqlProjectRepository(db_session)


@pytest.fixture(params=["memory", "sql"])
def recent_projects_repository(request, db_session):
    if request.param == "memory":
        return InMemoryRecentProjectsRepository()
    return SqlRecentProjectsRepository(db_session)


# ══════════════════════════════════════════════════════════════════════════
# Test Data
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def entry_factory() -> Callable[..., SimulationHistoryEntry]:
    """
    Build a valid entry; any field can be overridden.

    Usage:
        entry = entry_factory(status=SimulationStatus.COMPLETED, minutes=5)
        (minutes offsets the timestamp from BASE_TIME)
    """
    counter = {"n": 0}

    def build(minutes: int = 0, **overrides) -> SimulationHistoryEntry:
        counter["n"] += 1
        fields = {
            "project_path": "/projects/rpg-alpha",
            "project_name": "RPG Alpha",
            "ttk_version": "1.4.0",
            "config_json": '{"battles": 100}',
            "status": SimulationStatus.PENDING,
            "timestamp": BASE_TIME + timedelta(minutes=minutes),
            "id": f"entry-{counter['n']:04d}",
        }
        fields.update(overrides)
        return SimulationHistoryEntry.create(**fields)

    return build


@pytest.fixture
def sample_create_body() -> dict:
    return {
        "projectPath": "/projects/rpg-alpha",
        "projectName": "RPG Alpha",
        "ttkVersion": "1.4.0",
        "configJson": '{"battles": 100}',
        "durationMs": 1500,
        "battleCount": 100,
        "trechoCount": 3,
    }


# ══════════════════════════════════════════════════════════════════════════
# HTTP Clients
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client() -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient against a fresh app wired to fresh in-memory adapters.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from simhub.main import create_app

    app = create_app()
    repositories = memory_repositories()

    async def override_repositories():
        yield repositories

    app.dependency_overrides[get_repositories] = override_repositories
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def sql_test_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Same app, SQL adapters over SQLite with the production commit/rollback scope."""
    from simhub.main import create_app

    app = create_app()

    async def override_repositories():
        async with session_scope(session_factory) as session:
            yield sql_repositories(session)

    app.dependency_overrides[get_repositories] = override_repositories
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
