"""
QuickNotes Backend: Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.

Fixture Hierarchy:
    ├── app_settings:  Settings with an in-memory store
    ├── note_store:    Initialized in-memory NoteStore (real SQLite)
    ├── mock_store:    AsyncMock standing in for NoteStore
    ├── static_dir:    Temporary static directory with an index.html
    ├── app:           FastAPI app built from app_settings
    └── test_client:   HTTPX AsyncClient with the app's lifespan running
"""

import os

# Override settings for testing BEFORE any app imports
os.environ["STORAGE_LOCATION"] = "memory"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from quicknotes.config import Settings
from quicknotes.main import create_app
from quicknotes.services.note_store import NoteStore

INDEX_HTML = b"<!DOCTYPE html><html><body><h1>Test page</h1></body></html>\n"


@pytest.fixture
def index_html():
    return INDEX_HTML


@pytest.fixture
def static_dir(tmp_path):
    """A temporary static directory holding a known index.html."""
    directory = tmp_path / "static"
    directory.mkdir()
    (directory / "index.html").write_bytes(INDEX_HTML)
    return directory


@pytest.fixture
def app_settings(static_dir):
    return Settings(
        storage_location="memory",
        static_dir=str(static_dir),
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def note_store():
    """A real NoteStore over a fresh in-memory database."""
    store = NoteStore()
    await store.initialize("memory")
    yield store
    await store.close()


@pytest.fixture
def mock_store():
    """
    AsyncMock with NoteStore's interface.

    Usage:
        mock_store.get_all.return_value = [note]
        mock_store.insert.side_effect = DuplicateKeyError(1)
    """
    return AsyncMock(spec=NoteStore)


@pytest.fixture
def app(app_settings):
    return create_app(app_settings)


@pytest_asyncio.fixture
async def test_client(app):
    """
    Async HTTP client talking to the app in-process.

    ASGITransport does not send lifespan events, so the app's lifespan is
    entered here to open the store and publish the repository.
    """
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
