"""
QuickNotes Backend: Application Package
=========================================

What: A small notes CRUD service (FastAPI + async SQLAlchemy over SQLite).
Who:  Imported by uvicorn (`quicknotes.main:app`), by the `quicknotes`
      console script, and by the test suite.

Architecture Note:
    The backend is split into thin layers:

    ┌─────────────────────────────────────┐
    │      Routes (HTTP Routing Layer)    │  ← status codes, wire format
    ├─────────────────────────────────────┤
    │      NoteRepository (Validation)    │  ← empty-content checks, error policy
    ├─────────────────────────────────────┤
    │      NoteStore (Persistence)        │  ← SQL statements, driver errors
    ├─────────────────────────────────────┤
    │      SQLite via aiosqlite           │  ← memory or file backed
    └─────────────────────────────────────┘

    The repository instance is built at startup and handed to request
    handlers through `app.state`; there is no module-level store.
"""

__version__ = "1.0.0"
