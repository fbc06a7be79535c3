"""
QuickNotes Backend: Notes Route Handlers
==========================================

What:  The CRUD and search endpoints.
How:   Extracts path/body parameters, delegates to NoteRepository, returns
       JSON. Failures are raised as QuickNotesError subclasses and turned
       into plain-text responses by the handlers in main.py.

Endpoints:
    GET    /notes              → 200 [Note]
    POST   /notes              → 201 Note    (400 empty content, 409 duplicate id)
    GET    /notes/{note_id}    → 200 Note    (404 missing)
    PUT    /notes/{note_id}    → 200 Note    (400 empty content)
    DELETE /notes/{note_id}    → 204
    GET    /search/{query}     → 200 [Note]
"""

import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, Path, Response, status

from quicknotes.dependencies import get_note_repository
from quicknotes.schemas.note import NOTE_ID_MAX, NOTE_ID_MIN, NoteSchema, NoteUpdate
from quicknotes.services.note_repository import NoteRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notes"])

ERROR_TEXT = {"content": {"text/plain": {}}}

NoteId = Annotated[int, Path(ge=NOTE_ID_MIN, le=NOTE_ID_MAX, description="Note id")]


@router.get(
    "/notes",
    response_model=List[NoteSchema],
    summary="List all notes",
)
async def list_notes(
    repository: NoteRepository = Depends(get_note_repository),
) -> List[NoteSchema]:
    """Every stored note; `[]` when there are none or storage is unreachable."""
    return await repository.list()


@router.post(
    "/notes",
    response_model=NoteSchema,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Empty content or storage failure", **ERROR_TEXT},
        409: {"description": "A note with this id exists", **ERROR_TEXT},
    },
    summary="Create a note with a client-chosen id",
)
async def create_note(
    note: NoteSchema,
    repository: NoteRepository = Depends(get_note_repository),
) -> NoteSchema:
    return await repository.create(note.id, note.content)


@router.get(
    "/notes/{note_id}",
    response_model=NoteSchema,
    responses={404: {"description": "Note not found", **ERROR_TEXT}},
    summary="Get a single note by id",
)
async def get_note(
    note_id: NoteId,
    repository: NoteRepository = Depends(get_note_repository),
) -> NoteSchema:
    return await repository.read(note_id)


@router.put(
    "/notes/{note_id}",
    response_model=NoteSchema,
    responses={400: {"description": "Empty content or storage failure", **ERROR_TEXT}},
    summary="Replace a note's content",
    description=(
        "Overwrites the content of the note identified by the path id. "
        "Updating an id that does not exist succeeds without creating a note."
    ),
)
async def update_note(
    payload: NoteUpdate,
    note_id: NoteId,
    repository: NoteRepository = Depends(get_note_repository),
) -> NoteSchema:
    if payload.id is not None and payload.id != note_id:
        logger.debug("Ignoring body id %s for PUT /notes/%d", payload.id, note_id)
    return await repository.update(note_id, payload.content)


@router.delete(
    "/notes/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={400: {"description": "Storage failure", **ERROR_TEXT}},
    summary="Delete a note (idempotent)",
)
async def delete_note(
    note_id: NoteId,
    repository: NoteRepository = Depends(get_note_repository),
) -> Response:
    await repository.delete(note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/search/{query:path}",
    response_model=List[NoteSchema],
    summary="Find notes containing a substring",
    description=(
        "Case-sensitive substring match on note content. "
        "Characters such as % and _ are matched literally."
    ),
)
async def search_notes(
    query: str,
    repository: NoteRepository = Depends(get_note_repository),
) -> List[NoteSchema]:
    return await repository.search(query)
