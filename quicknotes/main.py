"""
QuickNotes Backend: FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() assembles middleware, exception handlers and routes; the
       lifespan opens the note store and publishes the shared objects on
       `app.state`.
Who:   uvicorn (`quicknotes.main:app`), the `quicknotes` console script and
       the tests (which call create_app() with their own Settings).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  Rate Limit → Request ID → Logging → Timeout → CORS │
    │                                                     │
    │  Routes:                                            │
    │  /notes  /notes/{id}  /search/{q}  /  /health       │
    │                                                     │
    │  Exception Handlers (plain-text bodies):            │
    │  Validation→400  NotFound→404  Duplicate→409        │
    │  Storage→400     other→500                          │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Configure logging
    2. Initialize the NoteStore (abort startup if the location can't be opened)
    3. Publish NoteRepository and AssetService on app.state

    Shutdown:
    1. Dispose the store's engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from quicknotes import __version__
from quicknotes.config import Settings, settings as default_settings
from quicknotes.exceptions import (
    DuplicateKeyError,
    NotFoundError,
    QuickNotesError,
    StorageError,
    StorageUnavailableError,
    ValidationError,
)
from quicknotes.middleware.logging import RequestLoggingMiddleware
from quicknotes.middleware.rate_limit import RateLimitMiddleware
from quicknotes.middleware.request_id import RequestIDMiddleware, request_id_var
from quicknotes.middleware.timeout import TimeoutMiddleware
from quicknotes.routes import health, notes, static
from quicknotes.services.asset_service import AssetService
from quicknotes.services.note_repository import NoteRepository
from quicknotes.services.note_store import NoteStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] quicknotes.access: GET /notes 200 1.2ms [ab12cd34] from 127.0.0.1
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries log every statement/request at INFO or DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the store on startup and close it on shutdown.

    A StorageUnavailableError is logged and re-raised: uvicorn then reports
    "Application startup failed" and exits without listening.
    """
    config: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config.log_level)
    logger.info("QuickNotes %s starting up...", __version__)

    store = NoteStore(
        pool_size=config.db_pool_size,
        max_overflow=config.db_max_overflow,
        echo=config.log_level == "DEBUG",
    )
    try:
        await store.initialize(config.storage_location)
    except StorageUnavailableError as e:
        logger.critical("Cannot start: %s | Context: %s", e.message, e.context)
        raise

    app.state.store = store
    app.state.repository = NoteRepository(store)
    app.state.assets = AssetService(config.static_dir)

    logger.info("Storage: %s", config.storage_location)
    logger.info("Static directory: %s", app.state.assets.static_dir)
    logger.info("Server ready at http://%s:%d", config.server_host, config.server_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("QuickNotes shutting down...")
    await store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP status codes and plain-text bodies.

    Handler hierarchy:
        ValidationError      → 400
        NotFoundError        → 404 (includes AssetMissingError)
        DuplicateKeyError    → 409
        StorageError         → 400 with the repository's generic reason
        QuickNotesError      → 500
        Exception            → 500

    Context dicts are logged, never returned. Timeouts never reach these
    handlers; TimeoutMiddleware answers 504 itself.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return PlainTextResponse(exc.message, status_code=400)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return PlainTextResponse(exc.message, status_code=404)

    @app.exception_handler(DuplicateKeyError)
    async def handle_duplicate_key(request: Request, exc: DuplicateKeyError):
        logger.warning("[%s] Duplicate key: %s", request_id_var.get(""), exc.message)
        return PlainTextResponse(exc.message, status_code=409)

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        logger.error(
            "[%s] Storage error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return PlainTextResponse(exc.message, status_code=400)

    @app.exception_handler(QuickNotesError)
    async def handle_app_error(request: Request, exc: QuickNotesError):
        logger.error(
            "[%s] Unhandled application error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return PlainTextResponse("An internal error occurred", status_code=500)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return PlainTextResponse("An unexpected error occurred", status_code=500)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Configuration to use; defaults to the environment-loaded
            `quicknotes.config.settings`.

    No storage is opened here; that happens in the lifespan.
    """
    config = app_settings or default_settings

    app = FastAPI(
        title="QuickNotes API",
        description="Create, read, update, delete and search short text notes.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = config

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RateLimit → RequestID → Logging → Timeout → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(TimeoutMiddleware, timeout_seconds=config.request_timeout_seconds)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=config.rate_limit_requests,
        window_seconds=config.rate_limit_window,
    )

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(notes.router)
    app.include_router(static.router)
    app.include_router(health.router)

    return app


# uvicorn expects `quicknotes.main:app` to be importable
app = create_app()
