"""
SimHub Backend — Database Session Management
============================================

What:  Async SQLAlchemy engine, session factory, declarative base and
       the request-scoped session helpers.
Why:   Centralizes all database connection logic in one place.
How:   Creates an async engine with connection pooling; session_scope()
       commits on success and rolls back on error.
Who:   Used by simhub.dependencies to build SQL repository adapters per request,
       by Alembic for metadata, and by the health check.
When:  Engine is created at module import; sessions are created per-request.

Transaction boundary:
    Repository adapters only flush(). Commit/rollback happens here, once per
    request, so each use case's writes land together or not at all.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from simhub.config import settings


def _engine_options() -> Dict[str, Any]:
    """
    Build create_async_engine() keyword arguments from settings.

    SQLite (aiosqlite) uses single-connection pools that reject
    pool_size/max_overflow, so those are only passed for server databases.
    """
    options: Dict[str, Any] = {
        "pool_pre_ping": settings.db_pool_pre_ping,
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle=3600,
        )
    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine: AsyncEngine = create_async_engine(settings.database_url, **_engine_options())

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: entities mapped from rows stay readable after commit
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All tables register with this metadata, which Alembic and init_models() read.
    """
    pass


# ── Session Scope ─────────────────────────────────────────────────────────
@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker = async_session_factory,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Provide a transactional session: commit on success, rollback on error.

    Why a context manager (not only a dependency): the repository registry in
    simhub.dependencies and the tests both need the same semantics outside
    FastAPI's Depends() machinery.

    Raises:
        Any exception raised inside the block, after rollback. Nothing is
        swallowed; storage faults reach the caller unchanged.
    """
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def init_models(bind: AsyncEngine = engine) -> None:
    """
    Create every table registered on Base.metadata.

    When: Startup with DB_CREATE_ALL=true, and in tests against SQLite.
    Production schemas are managed by Alembic instead.
    """
    # Importing the models package registers the tables on Base.metadata
    import simhub.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
