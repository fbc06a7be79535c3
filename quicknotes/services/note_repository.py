"""
QuickNotes Backend: Note Repository (Business Rules)
======================================================

What:  Request-facing CRUD operations with validation and the error policy.
How:   Validates input, delegates to NoteStore, and converts store results
       into NoteSchema objects.
Who:   Reached by route handlers through `get_note_repository`.

Error Policy:
    ┌──────────────┬──────────────────────────────────────────────────┐
    │ create       │ empty content → ValidationError                  │
    │              │ duplicate id  → DuplicateKeyError (propagates)   │
    │              │ storage fault → StorageError("Failed to create") │
    │ update       │ empty content → ValidationError                  │
    │              │ missing id    → silent success                   │
    │              │ storage fault → StorageError("Failed to update") │
    │ delete       │ storage fault → StorageError("Failed to delete") │
    │ read         │ missing id or storage fault → NotFoundError      │
    │ list, search │ storage fault → []                               │
    └──────────────┴──────────────────────────────────────────────────┘

    Read paths mask storage faults (logged at ERROR) so clients always get a
    well-formed answer; only mutations report failure.
"""

import logging
from typing import List

from quicknotes.exceptions import NotFoundError, StorageError, ValidationError
from quicknotes.schemas.note import NoteSchema
from quicknotes.services.note_store import NoteStore

logger = logging.getLogger(__name__)


class NoteRepository:
    """Mediates between HTTP handlers and a NoteStore."""

    def __init__(self, store: NoteStore):
        self.store = store

    @staticmethod
    def _validate_content(content: str) -> None:
        if not content:
            raise ValidationError(message="Note content must not be empty", field="content")

    async def create(self, note_id: int, content: str) -> NoteSchema:
        """
        Store a new note.

        Raises:
            ValidationError: content is empty (nothing is written)
            DuplicateKeyError: note_id is already taken
            StorageError: the insert failed for any other reason
        """
        self._validate_content(content)
        try:
            await self.store.insert(note_id, content)
        except StorageError as e:
            logger.error("Create failed for note %d: %s | Context: %s", note_id, e.message, e.context)
            raise StorageError("Failed to create note", context=e.context) from e
        logger.info("Created note %d", note_id)
        return NoteSchema(id=note_id, content=content)

    async def read(self, note_id: int) -> NoteSchema:
        try:
            note = await self.store.get(note_id)
        except StorageError as e:
            logger.error("Read failed for note %d: %s | Context: %s", note_id, e.message, e.context)
            note = None
        if note is None:
            raise NotFoundError(resource="note", resource_id=note_id)
        return NoteSchema.model_validate(note)

    async def update(self, note_id: int, content: str) -> NoteSchema:
        """
        Replace the content of a note.

        An id with no row is not an error: nothing is written and the
        submitted note is echoed back.
        """
        self._validate_content(content)
        try:
            changed = await self.store.update(note_id, content)
        except StorageError as e:
            logger.error("Update failed for note %d: %s | Context: %s", note_id, e.message, e.context)
            raise StorageError("Failed to update note", context=e.context) from e
        if changed == 0:
            logger.info("Update for note %d matched no row", note_id)
        return NoteSchema(id=note_id, content=content)

    async def delete(self, note_id: int) -> None:
        try:
            removed = await self.store.delete(note_id)
        except StorageError as e:
            logger.error("Delete failed for note %d: %s | Context: %s", note_id, e.message, e.context)
            raise StorageError("Failed to delete note", context=e.context) from e
        if removed == 0:
            logger.info("Delete for note %d matched no row", note_id)

    async def list(self) -> List[NoteSchema]:
        try:
            notes = await self.store.get_all()
        except StorageError as e:
            logger.error("Listing notes failed, returning []: %s | Context: %s", e.message, e.context)
            return []
        return [NoteSchema.model_validate(note) for note in notes]

    async def search(self, query: str) -> List[NoteSchema]:
        """Notes whose content contains `query`; an empty query returns every note."""
        try:
            notes = await self.store.search(query)
        except StorageError as e:
            logger.error("Search for %r failed, returning []: %s | Context: %s", query, e.message, e.context)
            return []
        return [NoteSchema.model_validate(note) for note in notes]
