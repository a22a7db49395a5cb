"""CLI tests: database commands against a temporary SQLite file.

Learn: The database commands read ACCOUNTD_* settings like the server,
so tests point ACCOUNTD_DATABASE_URL at a file in tmp_path and clear the
cached settings. API commands run against an httpx.MockTransport
swapped in for _client().
"""

import asyncio
import json

import httpx
import pytest
from click.testing import CliRunner

import accountd.cli.main as cli_main
from accountd.cli.main import _check, main
from accountd.config import get_settings
from accountd.db.engine import create_engine, create_session_factory
from accountd.services.user_service import UserService


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    monkeypatch.setenv("ACCOUNTD_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setenv("ACCOUNTD_BCRYPT_ROUNDS", "4")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _stored_users():
    async def _load():
        settings = get_settings()
        engine = create_engine(settings)
        try:
            async with create_session_factory(engine)() as db:
                return await UserService(db).list_users()
        finally:
            await engine.dispose()

    return asyncio.run(_load())


def test_version():
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "accountd" in result.output


def test_init_db_create_user_and_seed(cli_env):
    runner = CliRunner()

    result = runner.invoke(main, ["init-db"])
    assert result.exit_code == 0, result.output

    result = runner.invoke(main, ["create-user", "Ada Lovelace", "engine-1843", "--role", "admin"])
    assert result.exit_code == 0, result.output
    assert "Created admin 'Ada Lovelace'" in result.output

    result = runner.invoke(main, ["seed"])
    assert result.exit_code == 0, result.output
    assert "Password" in result.output

    users = _stored_users()
    assert len(users) == 7
    assert sum(u.role == "admin" for u in users) == 4


def test_create_user_rejects_unknown_role(cli_env):
    result = CliRunner().invoke(main, ["create-user", "Eve", "pw", "--role", "root"])
    assert result.exit_code != 0


def test_accounts_list_requires_token(monkeypatch):
    monkeypatch.delenv("ACCOUNTD_TOKEN", raising=False)
    result = CliRunner().invoke(main, ["accounts", "list"])
    assert result.exit_code == 1
    assert "--token required" in result.output


def test_check_returns_body_on_success():
    r = httpx.Response(200, json={"data": []})
    assert _check(r) == {"data": []}


def test_check_exits_on_jsonapi_error():
    r = httpx.Response(
        403,
        json={"errors": [{"status": "403", "title": "Forbidden", "detail": "Insufficient access rights"}]},
    )
    with pytest.raises(SystemExit) as exc:
        _check(r)
    assert exc.value.code == 1


# ═══════════════════════════════════════════════════════════
# API commands over a mock transport
# ═══════════════════════════════════════════════════════════

ACCOUNT_ID = "0b6f5f0e-7a53-4c1e-9d0f-3a0d2c1b9e11"


def _api_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/api/auth":
        assert json.loads(request.content) == {"id": "u-1", "password": "pw"}
        return httpx.Response(201, json={"token": "tok-123"})
    assert request.headers["Authorization"] == "Bearer tok-123"
    if request.method == "GET" and request.url.path == "/api/accounts":
        return httpx.Response(200, json={"data": [
            {"type": "accounts", "id": ACCOUNT_ID, "attributes": {"name": "Acme"}},
        ]})
    if request.method == "POST" and request.url.path == "/api/accounts":
        return httpx.Response(
            201,
            json={"message": "Account created"},
            headers={"Location": f"/api/accounts/{ACCOUNT_ID}"},
        )
    if request.method == "PUT":
        return httpx.Response(200, json={"message": "Account updated"})
    if request.method == "DELETE":
        return httpx.Response(200, json={"message": "Successfully deleted"})
    return httpx.Response(
        404, json={"errors": [{"status": "404", "title": "Not Found", "detail": "Account not found"}]}
    )


@pytest.fixture
def mock_api(monkeypatch):
    def _mock_client(token=None):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        return httpx.AsyncClient(
            transport=httpx.MockTransport(_api_handler),
            base_url="http://accountd.test",
            headers=headers,
        )

    monkeypatch.setattr(cli_main, "_client", _mock_client)
    monkeypatch.delenv("ACCOUNTD_TOKEN", raising=False)


def test_login_prints_token(mock_api):
    result = CliRunner().invoke(main, ["login", "u-1", "pw"])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "tok-123"


def test_accounts_list_flattens_resources(mock_api):
    result = CliRunner().invoke(main, ["accounts", "list", "--token", "tok-123"])
    assert result.exit_code == 0, result.output
    assert ACCOUNT_ID in result.output
    assert "Acme" in result.output


def test_accounts_list_json_uses_token_envvar(mock_api, monkeypatch):
    monkeypatch.setenv("ACCOUNTD_TOKEN", "tok-123")
    result = CliRunner().invoke(main, ["accounts", "list", "--json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["data"][0]["attributes"] == {"name": "Acme"}


def test_accounts_create_echoes_location(mock_api):
    result = CliRunner().invoke(main, ["accounts", "create", "Acme", "--token", "tok-123"])
    assert result.exit_code == 0, result.output
    assert "Account created" in result.output
    assert f"/api/accounts/{ACCOUNT_ID}" in result.output


def test_accounts_update_and_delete(mock_api):
    runner = CliRunner()
    result = runner.invoke(main, ["accounts", "update", ACCOUNT_ID, "Initech", "--token", "tok-123"])
    assert result.exit_code == 0, result.output
    assert "Account updated" in result.output

    result = runner.invoke(main, ["accounts", "delete", ACCOUNT_ID, "--token", "tok-123"])
    assert result.exit_code == 0, result.output
    assert "Successfully deleted" in result.output


def test_accounts_get_missing_exits_with_error(mock_api):
    result = CliRunner().invoke(main, ["accounts", "get", "nope", "--token", "tok-123"])
    assert result.exit_code == 1
    assert "Account not found" in result.output
