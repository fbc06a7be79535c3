"""
QuickNotes Backend: Note Store (Persistence)
==============================================

What:  Owns the async engine and runs every SQL statement for notes.
How:   Each public method is one statement inside its own short transaction
       (see database.session_scope). Driver errors are translated into
       DuplicateKeyError / StorageError / StorageUnavailableError here so
       SQLAlchemy types never leak past this module.
Who:   Built by the application lifespan, wrapped by NoteRepository.

Concurrency:
    A single NoteStore is shared by all in-flight requests and callers
    never lock anything. For file stores the pool hands each session its
    own connection. The in-memory store has exactly one connection, so the
    store runs its transactions one at a time under an asyncio.Lock.

Statements (all values are bound parameters):
    insert   INSERT INTO notes (id, content) VALUES (:id, :content)
    update   UPDATE notes SET content = :content WHERE id = :id
    delete   DELETE FROM notes WHERE id = :id
    get      SELECT ... WHERE id = :id
    get_all  SELECT ... ORDER BY id
    search   SELECT ... WHERE content LIKE '%' || :q || '%' ESCAPE '/'
"""

import asyncio
import logging
from contextlib import asynccontextmanager, nullcontext
from typing import AsyncIterator, List, Optional

from sqlalchemy import delete, insert, select, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from quicknotes.database import (
    Base,
    create_engine_for_location,
    create_session_factory,
    is_memory_location,
    session_scope,
)
from quicknotes.exceptions import DuplicateKeyError, StorageError, StorageUnavailableError
from quicknotes.models.note import Note

logger = logging.getLogger(__name__)


class NoteStore:
    """
    Durable (file) or ephemeral (memory) storage of Note rows.

    Lifecycle:
        store = NoteStore()
        await store.initialize("memory")   # or a file path
        ...
        await store.close()
    """

    def __init__(self, pool_size: int = 5, max_overflow: int = 10, echo: bool = False):
        self._pool_size = pool_size
        self._max_overflow = max_overflow
        self._echo = echo
        self._engine: Optional[AsyncEngine] = None
        self._sessions: Optional[async_sessionmaker[AsyncSession]] = None
        # Held around every transaction when all sessions share one connection
        self._serial: Optional[asyncio.Lock] = None
        self.location: Optional[str] = None

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def initialize(self, location: str) -> None:
        """
        Open the storage location and create the notes table if absent.

        Calling it again with the same location only re-runs the (idempotent)
        table creation; a different location closes the previous engine first.

        Raises:
            StorageUnavailableError: The location cannot be opened or the
                schema cannot be created there.
        """
        if self._engine is not None and location != self.location:
            await self.close()

        if self._engine is None:
            try:
                self._engine = create_engine_for_location(
                    location,
                    pool_size=self._pool_size,
                    max_overflow=self._max_overflow,
                    echo=self._echo,
                )
            except SQLAlchemyError as e:
                logger.error("Invalid storage location %r: %s", location, e)
                raise StorageUnavailableError(location, context={"error": str(e)}) from e
            self._sessions = create_session_factory(self._engine)
            self._serial = asyncio.Lock() if is_memory_location(location) else None
            self.location = location

        try:
            async with self._serial or nullcontext():
                async with self._engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            logger.error("Could not prepare storage at %r: %s", location, e)
            await self.close()
            raise StorageUnavailableError(location, context={"error": str(e)}) from e

        logger.info("Note store ready at %s", location)

    async def close(self) -> None:
        """Dispose the engine and every pooled connection."""
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._sessions = None
        self._serial = None
        self.location = None

    async def ping(self) -> bool:
        """Run SELECT 1; False when the store is closed or unreachable."""
        if self._engine is None:
            return False
        try:
            async with self._serial or nullcontext():
                async with self._engine.connect() as conn:
                    await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning("Store ping failed: %s", e)
            return False

    def _session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._sessions is None:
            raise StorageError("Note store is not initialized")
        return self._sessions

    @asynccontextmanager
    async def _scope(self) -> AsyncIterator[AsyncSession]:
        """
        One transaction, run alone when the store is in memory.

        The in-memory database lives on a single shared connection, so two
        open sessions would share one transaction and a rollback in either
        would discard the other's writes. The lock is released only after
        the session has committed or rolled back and returned the connection.
        """
        factory = self._session_factory()
        async with self._serial or nullcontext():
            async with session_scope(factory) as session:
                yield session

    # ── Mutations ─────────────────────────────────────────────────────────

    async def insert(self, note_id: int, content: str) -> None:
        """
        Write a new row.

        Raises:
            DuplicateKeyError: A row with note_id already exists.
            StorageError: Any other database failure.
        """
        try:
            async with self._scope() as session:
                await session.execute(insert(Note).values(id=note_id, content=content))
        except IntegrityError as e:
            raise DuplicateKeyError(note_id, context={"error": str(e.orig)}) from e
        except SQLAlchemyError as e:
            raise StorageError(
                "Failed to insert note",
                context={"note_id": note_id, "error": str(e)},
            ) from e
        logger.debug("Inserted note %d", note_id)

    async def update(self, note_id: int, content: str) -> int:
        """Overwrite the content of note_id. Returns rows changed (0 when absent)."""
        try:
            async with self._scope() as session:
                result = await session.execute(
                    update(Note).where(Note.id == note_id).values(content=content)
                )
                changed = result.rowcount
        except SQLAlchemyError as e:
            raise StorageError(
                "Failed to update note",
                context={"note_id": note_id, "error": str(e)},
            ) from e
        logger.debug("Updated note %d (%d row(s))", note_id, changed)
        return changed

    async def delete(self, note_id: int) -> int:
        """Remove note_id. Returns rows removed (0 when absent)."""
        try:
            async with self._scope() as session:
                result = await session.execute(delete(Note).where(Note.id == note_id))
                removed = result.rowcount
        except SQLAlchemyError as e:
            raise StorageError(
                "Failed to delete note",
                context={"note_id": note_id, "error": str(e)},
            ) from e
        logger.debug("Deleted note %d (%d row(s))", note_id, removed)
        return removed

    # ── Queries ───────────────────────────────────────────────────────────

    async def get(self, note_id: int) -> Optional[Note]:
        try:
            async with self._scope() as session:
                result = await session.execute(select(Note).where(Note.id == note_id))
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageError(
                "Failed to read note",
                context={"note_id": note_id, "error": str(e)},
            ) from e

    async def get_all(self) -> List[Note]:
        try:
            async with self._scope() as session:
                result = await session.execute(select(Note).order_by(Note.id))
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StorageError("Failed to list notes", context={"error": str(e)}) from e

    async def search(self, substring: str) -> List[Note]:
        """
        Rows whose content contains `substring` (case-sensitive).

        autoescape=True escapes %, _ and the escape character itself, so a
        query such as "50%" matches the literal text "50%" only. An empty
        substring matches every row.
        """
        try:
            async with self._scope() as session:
                result = await session.execute(
                    select(Note)
                    .where(Note.content.contains(substring, autoescape=True))
                    .order_by(Note.id)
                )
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StorageError(
                "Failed to search notes",
                context={"query": substring, "error": str(e)},
            ) from e
