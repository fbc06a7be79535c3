"""
QuickNotes Backend: Database Engine & Session Management
==========================================================

What:  Async SQLAlchemy engine construction, declarative Base and a
       transactional session scope.
How:   `create_engine_for_location()` maps a storage location string onto
       an aiosqlite URL and pool; `session_scope()` commits on success and
       rolls back on error.
Who:   Used by NoteStore. Nothing here holds module-level connection state;
       the engine belongs to whichever NoteStore created it.

Connection Pooling Strategy:
    memory:  StaticPool (one connection shared by every session, so every
             request sees the same in-memory database; NoteStore serializes
             transactions on it)
    file:    AsyncAdaptedQueuePool sized by db_pool_size / db_max_overflow

    aiosqlite runs each connection on its own worker thread, so statements
    suspend the calling coroutine instead of blocking the event loop.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

MEMORY_LOCATIONS = {"memory", ":memory:"}


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shares one MetaData)."""
    pass


def is_memory_location(location: str) -> bool:
    return location.strip().lower() in MEMORY_LOCATIONS


def build_database_url(location: str) -> str:
    """
    Translate a storage location into a SQLAlchemy URL.

    Examples:
        "memory"                  → sqlite+aiosqlite://
        "./data/notes.db"         → sqlite+aiosqlite:///data/notes.db
        "/var/lib/notes.db"       → sqlite+aiosqlite:////var/lib/notes.db
        "sqlite+aiosqlite:///x"   → unchanged
    """
    location = location.strip()
    if is_memory_location(location):
        return "sqlite+aiosqlite://"
    if "://" in location:
        return location
    return f"sqlite+aiosqlite:///{Path(location).expanduser()}"


def _enable_case_sensitive_like(dbapi_connection, connection_record) -> None:
    # SQLite's LIKE folds ASCII case unless this pragma is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA case_sensitive_like = ON")
    cursor.close()


def create_engine_for_location(
    location: str,
    pool_size: int = 5,
    max_overflow: int = 10,
    echo: bool = False,
) -> AsyncEngine:
    """
    Build an async engine for the given storage location.

    The engine is lazy: no connection is opened until the first statement,
    so errors for unreachable locations surface in NoteStore.initialize().
    """
    url = build_database_url(location)

    if is_memory_location(location):
        engine = create_async_engine(url, poolclass=StaticPool, echo=echo)
    else:
        engine = create_async_engine(
            url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            echo=echo,
        )

    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_case_sensitive_like)

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False keeps loaded attributes readable after commit
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """
    Provide one short transaction around a block of work.

    How it works:
        1. Opens a session from the factory
        2. Yields it to the caller
        3. On success: commits
        4. On error: rolls back and re-raises
        5. Always: closes the session (returns the connection to the pool)
    """
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
