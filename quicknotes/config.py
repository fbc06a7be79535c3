"""
QuickNotes Backend: Application Configuration
===============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and exposes a `settings` object for the CLI.
Who:   The process entry point (`quicknotes.__main__`) and `create_app()`.
When:  Loaded once at import time; `create_app()` also accepts an explicit
       Settings instance so tests can build isolated applications.

Storage location:
    "memory"        → one in-memory SQLite database for the process lifetime
    "./notes.db"    → durable SQLite file (created if absent)
    "sqlite+aiosqlite:///..." → passed to SQLAlchemy unchanged
"""

from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# Directory bundled with the package that holds the client page
DEFAULT_STATIC_DIR = str(Path(__file__).resolve().parent / "static")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have working defaults for local development: an in-memory
    store, the bundled static page and localhost:8000.
    """

    # ── Storage ───────────────────────────────────────────────────────────
    # What: Where notes live. "memory" or a file path (see module docstring)
    storage_location: str = Field(
        default="memory",
        description="'memory' for an ephemeral store, or a SQLite file path",
    )

    # What: Pool sizing for file-backed databases
    # The in-memory store always uses a single shared connection
    db_pool_size: int = Field(default=5, ge=1, le=100)
    db_max_overflow: int = Field(default=10, ge=0, le=50)

    # ── Static Assets ─────────────────────────────────────────────────────
    # What: Directory containing index.html, served at "/"
    static_dir: str = Field(default=DEFAULT_STATIC_DIR)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated URLs (parsed by the property below)
    cors_origins: str = Field(default="http://localhost:8000")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    server_host: str = Field(default="localhost")
    server_port: int = Field(default=8000, ge=1, le=65535)

    # What: Upper bound on the time a single request may take (seconds)
    request_timeout_seconds: float = Field(default=30.0, gt=0, le=600)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("storage_location")
    @classmethod
    def validate_storage_location(cls, v: str) -> str:
        """Rejects blank locations; anything else is resolved by the store."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("storage_location must not be empty")
        return stripped

    # ── Rate Limiting ─────────────────────────────────────────────────────
    # What: Per-IP sliding window rate limit
    rate_limit_requests: int = Field(default=1000, ge=10, le=100000)
    rate_limit_window: int = Field(default=60, ge=1, le=86400)  # seconds

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # STORAGE_LOCATION and storage_location both work
        "extra": "ignore",
    }


# Process-wide settings for the CLI entry point and `quicknotes.main:app`
settings = Settings()
