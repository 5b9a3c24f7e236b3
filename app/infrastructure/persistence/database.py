"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Schema is owned by the startup bootstrap routine
(app.infrastructure.persistence.bootstrap), which creates and evolves the
tables in place. Both SQLite (aiosqlite) and PostgreSQL (asyncpg) are
supported.

Engine and session factory are created lazily on first use (get_db /
get_db_transactional / get_engine) so import does not trigger Settings
validation.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.core.config import get_settings

logger = logging.getLogger(__name__)

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: AsyncEngine | None = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None

# session.info key holding post-commit callbacks
AFTER_COMMIT_KEY = "after_commit"


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _ensure_engine() -> None:
    """Create engine and AsyncSessionLocal on first use."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return
    settings = get_settings()
    kwargs: dict[str, Any] = {"echo": settings.database_echo}
    if _is_sqlite(settings.database_url):
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs.update(
            pool_pre_ping=True,
            pool_size=settings.db_pool_size if settings.db_pool_size is not None else 20,
            max_overflow=(
                settings.db_max_overflow if settings.db_max_overflow is not None else 30
            ),
            pool_recycle=3600,
            connect_args={
                "command_timeout": (
                    settings.db_command_timeout
                    if settings.db_command_timeout is not None
                    else 60
                )
            },
        )
    engine = create_async_engine(settings.database_url, **kwargs)
    AsyncSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )
    logger.debug("Database engine created (dialect=%s)", engine.dialect.name)


def get_engine() -> AsyncEngine:
    """Return the process-wide async engine, creating it if needed."""
    _ensure_engine()
    assert engine is not None
    return engine


async def dispose_engine() -> None:
    """Dispose the engine (pool) and forget it; next use recreates it."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
    engine = None
    AsyncSessionLocal = None


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


async def get_db():
    """Database session dependency for read operations.

    Does not commit; use get_db_transactional for writes.
    Yields a session and closes it on exit.
    """
    _ensure_engine()
    assert AsyncSessionLocal is not None
    async with AsyncSessionLocal() as session:
        yield session


async def get_db_transactional():
    """Database session dependency for write operations.

    Begins a transaction, commits on success, rolls back on exception.
    Use for POST, PUT, PATCH, DELETE endpoints. Callbacks registered with
    run_after_commit() are awaited once the commit has gone through.
    """
    _ensure_engine()
    assert AsyncSessionLocal is not None
    async with AsyncSessionLocal() as session:
        async with session.begin():
            yield session
        for callback in session.info.pop(AFTER_COMMIT_KEY, []):
            await callback()


def run_after_commit(session: AsyncSession, callback: Callable[[], Awaitable[Any]]) -> None:
    """Queue callback to run after get_db_transactional commits session (once per callback)."""
    callbacks = session.info.setdefault(AFTER_COMMIT_KEY, [])
    if callback not in callbacks:
        callbacks.append(callback)
