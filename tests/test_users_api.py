"""User listing tests."""

import pytest

from accountd.schemas.jsonapi import JSONAPI_MEDIA_TYPE


@pytest.mark.asyncio
async def test_list_users_requires_token(client):
    r = await client.get("/api/users")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_list_users(client, make_user, user_headers):
    await make_user(name="Linus Torvalds", role="admin")

    r = await client.get("/api/users", headers=user_headers)
    assert r.status_code == 200
    assert r.headers["content-type"].startswith(JSONAPI_MEDIA_TYPE)
    resources = r.json()["data"]
    by_name = {res["attributes"]["name"]: res for res in resources}
    assert by_name["Linus Torvalds"]["attributes"] == {"name": "Linus Torvalds", "role": "admin"}
    assert by_name["Regular"]["attributes"]["role"] == "user"
    assert all(res["type"] == "users" for res in resources)


@pytest.mark.asyncio
async def test_list_users_never_exposes_passwords(client, user_headers):
    r = await client.get("/api/users", headers=user_headers)
    body = r.text
    assert "password" not in body
    assert "$2" not in body
