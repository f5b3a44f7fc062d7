"""Engine and sessions for the posts store.

``get_session`` is the session factory the post repository uses unless it
is handed another one. Any zero-argument callable returning an async
context manager over an ``AsyncSession`` fits (``SessionFactory``); the
tests pass one bound to an in-memory engine.

The session commits when the block exits cleanly and rolls back when it
raises, so one repository call is one transaction.

Tests:
    - tests/unit/test_database.py
"""

from __future__ import annotations

import logging
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any, AsyncGenerator, Callable

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from draftboard.config import Settings, get_settings

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]

_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None


def engine_options(settings: Settings) -> dict[str, Any]:
    """Keyword arguments for ``create_async_engine``.

    SQL echo follows ``DEBUG``. SQLite connections may be used from the
    aiosqlite worker thread; PostgreSQL gets a small pre-pinged pool.
    """
    options: dict[str, Any] = {"echo": settings.DEBUG}
    if settings.is_sqlite:
        options["connect_args"] = {"check_same_thread": False}
    else:
        options.update(pool_size=5, max_overflow=10, pool_pre_ping=True)
    return options


def _sqlite_pragmas(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.close()


def get_engine() -> AsyncEngine:
    """Return the process-wide engine, creating it on first use."""
    global _engine

    if _engine is None:
        settings = get_settings()
        _engine = create_async_engine(settings.DATABASE_URL, **engine_options(settings))
        if settings.is_sqlite:
            event.listen(_engine.sync_engine, "connect", _sqlite_pragmas)
        # Credentials live before the "@"
        logger.info(f"Posts database: {settings.DATABASE_URL.split('@')[-1]}")

    return _engine


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Open a session that commits on success and rolls back on error."""
    global _sessionmaker

    if _sessionmaker is None:
        _sessionmaker = async_sessionmaker(
            get_engine(), class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

    session = _sessionmaker()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def init_db() -> None:
    """Create the posts table if it is missing.

    Alembic owns migrations; this covers fresh dev databases at startup.
    """
    from draftboard.models import Base

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Posts schema ready")


async def check_db_connection() -> bool:
    """Report whether the database answers a trivial query (health endpoint)."""
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False
    return True


async def close_db() -> None:
    """Dispose the engine at shutdown; the next session opens a fresh one."""
    global _engine, _sessionmaker

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _sessionmaker = None
        logger.info("Database connections closed")
