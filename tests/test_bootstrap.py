"""
QuickNotes Backend: Configuration, Startup & Middleware Tests
===============================================================

What we test:
    ✅ Settings validation (log level, storage location, CORS parsing)
    ✅ Startup aborts when the storage location cannot be opened
    ✅ Request IDs are generated or echoed
    ✅ Slow requests are cut off with 504
    ✅ Clients over the rate limit receive 429
"""

import asyncio

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pydantic import ValidationError as SettingsValidationError

from quicknotes.config import Settings
from quicknotes.exceptions import StorageUnavailableError
from quicknotes.main import create_app
from quicknotes.middleware.rate_limit import RateLimitMiddleware
from quicknotes.middleware.request_id import RequestIDMiddleware
from quicknotes.middleware.timeout import TimeoutMiddleware


class TestSettings:
    """Tests for Settings parsing and validation."""

    def test_defaults(self):
        config = Settings(_env_file=None)
        assert config.server_port == 8000
        assert config.server_host == "localhost"

    def test_log_level_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(SettingsValidationError):
            Settings(log_level="chatty")

    def test_blank_storage_location_rejected(self):
        with pytest.raises(SettingsValidationError):
            Settings(storage_location="   ")

    def test_storage_location_from_environment(self, monkeypatch):
        monkeypatch.setenv("STORAGE_LOCATION", "/tmp/notes.db")
        assert Settings().storage_location == "/tmp/notes.db"

    def test_cors_origins_list(self):
        config = Settings(cors_origins="http://a.test, http://b.test,")
        assert config.cors_origins_list == ["http://a.test", "http://b.test"]


class TestStartup:
    """Tests for the application lifespan."""

    @pytest.mark.asyncio
    async def test_unopenable_storage_aborts_startup(self, tmp_path, static_dir):
        config = Settings(
            storage_location=str(tmp_path / "no-such-dir" / "notes.db"),
            static_dir=str(static_dir),
            log_level="WARNING",
        )
        app = create_app(config)

        with pytest.raises(StorageUnavailableError):
            async with app.router.lifespan_context(app):
                pass

    @pytest.mark.asyncio
    async def test_file_storage_persists_between_app_instances(self, tmp_path, static_dir):
        config = Settings(
            storage_location=str(tmp_path / "notes.db"),
            static_dir=str(static_dir),
            log_level="WARNING",
        )

        first = create_app(config)
        async with first.router.lifespan_context(first):
            async with AsyncClient(transport=ASGITransport(app=first), base_url="http://test") as client:
                await client.post("/notes", json={"id": 1, "content": "persisted"})

        second = create_app(config)
        async with second.router.lifespan_context(second):
            async with AsyncClient(transport=ASGITransport(app=second), base_url="http://test") as client:
                response = await client.get("/notes/1")

        assert response.json() == {"id": 1, "content": "persisted"}


def build_probe_app() -> FastAPI:
    probe = FastAPI()

    @probe.get("/fast")
    async def fast():
        return {"ok": True}

    @probe.get("/slow")
    async def slow():
        await asyncio.sleep(5)
        return {"ok": True}

    return probe


class TestMiddleware:
    """Tests for request ID, timeout and rate limit middleware."""

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/notes")
        assert response.headers.get("X-Request-ID")

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/notes", headers={"X-Request-ID": "trace-123"})
        assert response.headers["X-Request-ID"] == "trace-123"

    @pytest.mark.asyncio
    async def test_slow_request_times_out(self):
        probe = build_probe_app()
        probe.add_middleware(TimeoutMiddleware, timeout_seconds=0.05)
        probe.add_middleware(RequestIDMiddleware)

        async with AsyncClient(transport=ASGITransport(app=probe), base_url="http://test") as client:
            slow = await client.get("/slow")
            fast = await client.get("/fast")

        assert slow.status_code == 504
        assert "0.05" in slow.text
        assert fast.status_code == 200

    @pytest.mark.asyncio
    async def test_rate_limit_rejects_excess_requests(self):
        probe = build_probe_app()
        probe.add_middleware(RateLimitMiddleware, max_requests=3, window_seconds=60)

        async with AsyncClient(transport=ASGITransport(app=probe), base_url="http://test") as client:
            statuses = [(await client.get("/fast")).status_code for _ in range(4)]
            limited = await client.get("/fast")

        assert statuses == [200, 200, 200, 429]
        assert int(limited.headers["Retry-After"]) > 0
