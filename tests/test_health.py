"""Root and health endpoint tests."""

import pytest


@pytest.mark.asyncio
async def test_welcome(client):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert resp.json() == {"message": "welcome"}


@pytest.mark.asyncio
async def test_health_returns_ok(client):
    """Health endpoint should report server, version and database status."""
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["server"] == "ok"
    assert data["database"] == "ok"
    assert data["status"] == "healthy"
    assert "version" in data


@pytest.mark.asyncio
async def test_unknown_route_is_jsonapi_404(client):
    resp = await client.get("/api/nope")
    assert resp.status_code == 404
    error = resp.json()["errors"][0]
    assert error["status"] == "404"
    assert error["title"] == "Not Found"


@pytest.mark.asyncio
async def test_wrong_method_is_jsonapi_405(client):
    resp = await client.patch("/api/auth", json={})
    assert resp.status_code == 405
    assert resp.json()["errors"][0]["title"] == "Method Not Allowed"
