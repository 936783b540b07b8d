"""Error envelope and system endpoint tests."""

from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient

ENVELOPE_KEYS = {"timestamp", "status", "error", "message", "path"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "petstore"}
    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_request_id_is_propagated(client):
    response = await client.get("/api/categories", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_not_found_envelope(client):
    path = "/api/categories/00000000-0000-0000-0000-000000000000"
    response = await client.get(path)

    assert response.status_code == 404
    body = response.json()
    assert set(body) == ENVELOPE_KEYS
    assert body["status"] == 404
    assert body["error"] == "Not Found"
    assert body["path"] == path
    assert body["message"].startswith("Category not found")
    datetime.fromisoformat(body["timestamp"].replace("Z", "+00:00"))


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unknown_route_uses_envelope(client):
    response = await client.get("/api/nope")

    assert response.status_code == 404
    assert set(response.json()) == ENVELOPE_KEYS


@pytest.mark.asyncio
@pytest.mark.integration
async def test_malformed_path_param_is_validation_failure(client):
    response = await client.get("/api/pets/not-a-uuid")

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation Failed"
    assert "pet_id" in body["message"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unexpected_error_hides_details():
    from services.petstore_service.app.main import create_app

    app = create_app()

    @app.get("/api/explode")
    async def explode():
        raise RuntimeError("secret internals")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/api/explode")

    assert response.status_code == 500
    body = response.json()
    assert set(body) == ENVELOPE_KEYS
    assert body["message"] == "An unexpected error occurred"
    assert "secret" not in response.text
