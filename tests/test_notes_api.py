"""
QuickNotes Backend: Notes API Tests
=====================================

What:  End-to-end tests of the HTTP endpoints over an in-memory store.
How:   httpx AsyncClient → ASGITransport → FastAPI app with its lifespan
       running (see conftest.test_client).
"""

import pytest

from quicknotes.exceptions import StorageError


class TestCreateNote:
    """Tests for POST /notes."""

    @pytest.mark.asyncio
    async def test_create_and_read_round_trip(self, test_client):
        response = await test_client.post("/notes", json={"id": 1, "content": "Hello"})

        assert response.status_code == 201
        assert response.json() == {"id": 1, "content": "Hello"}

        fetched = await test_client.get("/notes/1")
        assert fetched.status_code == 200
        assert fetched.json() == {"id": 1, "content": "Hello"}

    @pytest.mark.asyncio
    async def test_create_empty_content_rejected(self, test_client):
        response = await test_client.post("/notes", json={"id": 1, "content": ""})

        assert response.status_code == 400
        assert response.headers["content-type"].startswith("text/plain")
        assert "empty" in response.text

        listing = await test_client.get("/notes")
        assert listing.json() == []

    @pytest.mark.asyncio
    async def test_create_duplicate_id_conflicts(self, test_client):
        await test_client.post("/notes", json={"id": 1, "content": "first"})

        response = await test_client.post("/notes", json={"id": 1, "content": "second"})

        assert response.status_code == 409
        fetched = await test_client.get("/notes/1")
        assert fetched.json()["content"] == "first"

    @pytest.mark.asyncio
    async def test_create_malformed_body(self, test_client):
        response = await test_client.post("/notes", json={"content": "no id"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_create_id_out_of_range(self, test_client):
        response = await test_client.post("/notes", json={"id": 2**63, "content": "big"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_create_storage_failure_is_400(self, test_client, app, monkeypatch):
        async def failing_insert(note_id, content):
            raise StorageError("Failed to insert note", context={"error": "disk full"})

        monkeypatch.setattr(app.state.store, "insert", failing_insert)

        response = await test_client.post("/notes", json={"id": 1, "content": "x"})

        assert response.status_code == 400
        assert response.text == "Failed to create note"


class TestReadNote:
    """Tests for GET /notes/{id}."""

    @pytest.mark.asyncio
    async def test_missing_note_is_404(self, test_client):
        response = await test_client.get("/notes/12345")

        assert response.status_code == 404
        assert "12345" in response.text

    @pytest.mark.asyncio
    async def test_non_integer_id_is_422(self, test_client):
        response = await test_client.get("/notes/abc")
        assert response.status_code == 422


class TestUpdateNote:
    """Tests for PUT /notes/{id}."""

    @pytest.mark.asyncio
    async def test_update_then_read(self, test_client):
        await test_client.post("/notes", json={"id": 1, "content": "old"})

        response = await test_client.put("/notes/1", json={"id": 1, "content": "new"})

        assert response.status_code == 200
        assert response.json() == {"id": 1, "content": "new"}
        assert (await test_client.get("/notes/1")).json()["content"] == "new"

    @pytest.mark.asyncio
    async def test_update_without_body_id(self, test_client):
        await test_client.post("/notes", json={"id": 3, "content": "old"})

        response = await test_client.put("/notes/3", json={"content": "new"})

        assert response.status_code == 200
        assert response.json() == {"id": 3, "content": "new"}

    @pytest.mark.asyncio
    async def test_update_missing_id_creates_nothing(self, test_client):
        response = await test_client.put("/notes/99", json={"id": 99, "content": "ghost"})

        assert response.status_code == 200
        assert (await test_client.get("/notes/99")).status_code == 404
        assert (await test_client.get("/notes")).json() == []

    @pytest.mark.asyncio
    async def test_update_empty_content_rejected(self, test_client):
        await test_client.post("/notes", json={"id": 1, "content": "keep"})

        response = await test_client.put("/notes/1", json={"id": 1, "content": ""})

        assert response.status_code == 400
        assert (await test_client.get("/notes/1")).json()["content"] == "keep"


class TestDeleteNote:
    """Tests for DELETE /notes/{id}."""

    @pytest.mark.asyncio
    async def test_delete_then_read_is_404(self, test_client):
        await test_client.post("/notes", json={"id": 1, "content": "bye"})

        response = await test_client.delete("/notes/1")

        assert response.status_code == 204
        assert response.content == b""
        assert (await test_client.get("/notes/1")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_twice_is_idempotent(self, test_client):
        await test_client.post("/notes", json={"id": 1, "content": "bye"})

        first = await test_client.delete("/notes/1")
        second = await test_client.delete("/notes/1")

        assert first.status_code == 204
        assert second.status_code == 204


class TestListAndSearch:
    """Tests for GET /notes and GET /search/{query}."""

    @pytest.mark.asyncio
    async def test_empty_list_is_array(self, test_client):
        response = await test_client.get("/notes")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_list_returns_every_note(self, test_client):
        inserted = [{"id": i, "content": f"note {i}"} for i in range(1, 6)]
        for note in inserted:
            await test_client.post("/notes", json=note)

        response = await test_client.get("/notes")

        assert len(response.json()) == 5
        assert sorted(response.json(), key=lambda n: n["id"]) == inserted

    @pytest.mark.asyncio
    async def test_search_single_match(self, test_client):
        await test_client.post("/notes", json={"id": 1, "content": "alpha beta"})
        await test_client.post("/notes", json={"id": 2, "content": "gamma"})

        response = await test_client.get("/search/beta")

        assert response.json() == [{"id": 1, "content": "alpha beta"}]

    @pytest.mark.asyncio
    async def test_search_no_match_is_empty_array(self, test_client):
        await test_client.post("/notes", json={"id": 1, "content": "alpha"})

        response = await test_client.get("/search/zeta")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_search_percent_matches_literally(self, test_client):
        await test_client.post("/notes", json={"id": 1, "content": "50% off"})
        await test_client.post("/notes", json={"id": 2, "content": "fifty off"})

        response = await test_client.get("/search/50%25")

        assert [n["id"] for n in response.json()] == [1]

    @pytest.mark.asyncio
    async def test_search_query_with_slash(self, test_client):
        await test_client.post("/notes", json={"id": 1, "content": "a/b"})
        await test_client.post("/notes", json={"id": 2, "content": "ab"})

        encoded = await test_client.get("/search/a%2Fb")
        raw = await test_client.get("/search/a/b")

        assert encoded.status_code == 200
        assert encoded.json() == [{"id": 1, "content": "a/b"}]
        assert raw.json() == [{"id": 1, "content": "a/b"}]

    @pytest.mark.asyncio
    async def test_list_storage_failure_is_empty_array(self, test_client, app, monkeypatch):
        async def failing_get_all():
            raise StorageError("Failed to list notes")

        monkeypatch.setattr(app.state.store, "get_all", failing_get_all)

        response = await test_client.get("/notes")

        assert response.status_code == 200
        assert response.json() == []


class TestScenario:
    """The full create/list/search/update/delete walkthrough."""

    @pytest.mark.asyncio
    async def test_walkthrough(self, test_client):
        await test_client.post("/notes", json={"id": 1, "content": "Hello Rust CRUD App"})
        await test_client.post("/notes", json={"id": 2, "content": "Another note"})

        listing = (await test_client.get("/notes")).json()
        assert sorted(n["id"] for n in listing) == [1, 2]

        found = (await test_client.get("/search/Rust")).json()
        assert found == [{"id": 1, "content": "Hello Rust CRUD App"}]

        await test_client.put("/notes/1", json={"id": 1, "content": "Updated"})
        assert (await test_client.get("/notes/1")).json() == {"id": 1, "content": "Updated"}

        await test_client.delete("/notes/2")
        assert (await test_client.get("/notes")).json() == [{"id": 1, "content": "Updated"}]
