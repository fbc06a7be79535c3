"""
QuickNotes Backend: Request Dependencies
==========================================

What:  FastAPI dependencies that hand shared, startup-built objects to
       route handlers.
How:   The lifespan stores them on `app.state`; each dependency reads them
       back from the current request's app. Tests can swap them with
       `app.dependency_overrides`.
"""

from fastapi import Request

from quicknotes.services.asset_service import AssetService
from quicknotes.services.note_repository import NoteRepository


def get_note_repository(request: Request) -> NoteRepository:
    return request.app.state.repository


def get_asset_service(request: Request) -> AssetService:
    return request.app.state.assets
