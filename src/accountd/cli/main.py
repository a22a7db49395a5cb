"""accountd CLI: run the server, manage the database, talk to the API.

Usage:
    accountd serve --port 8080                  # Run the API with uvicorn
    accountd init-db                            # Create tables (dev; prefer alembic upgrade head)
    accountd seed                               # Insert 3 users + 3 admins, print credentials
    accountd create-user "Ada Lovelace" s3cret --role admin
    accountd login <user-id> <password>         # Print a token
    accountd accounts list                      # Needs ACCOUNTD_TOKEN (or --token)
    accountd accounts create "Acme"             # Needs an admin token

Database commands use the same ACCOUNTD_* settings as the server; API
commands talk to ACCOUNTD_API_URL over HTTP.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import sys
from typing import Optional

import click
import httpx

from accountd import __version__

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:8080"


def _api_url() -> str:
    return os.environ.get("ACCOUNTD_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the accountd API."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(base_url=_api_url(), headers=headers, timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k, "—"))[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


def _check(r: httpx.Response) -> dict:
    """Return the JSON body, or print the JSON:API errors and exit 1."""
    if r.is_success:
        return r.json()
    try:
        errors = r.json().get("errors", [])
    except ValueError:
        errors = []
    if not errors:
        click.secho(f"Error: HTTP {r.status_code}", fg="red", err=True)
    for err in errors:
        click.secho(
            f"Error {err.get('status')}: {err.get('title')} — {err.get('detail', '')}",
            fg="red",
            err=True,
        )
    sys.exit(1)


def _require_token(token: Optional[str]) -> str:
    if not token:
        click.secho(
            "Error: --token required (or set ACCOUNTD_TOKEN env var)",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return token


def _flatten(resource: dict) -> dict:
    """JSON:API resource → flat row for tables."""
    return {"id": resource["id"], **resource.get("attributes", {})}


def _open_db():
    from accountd.config import get_settings
    from accountd.db.engine import create_engine, create_session_factory

    settings = get_settings()
    engine = create_engine(settings)
    return settings, engine, create_session_factory(engine)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="accountd")
def main():
    """accountd: accounts and users behind JWT auth."""


# ---------------------------------------------------------------------------
# Server and database
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", default=None, help="Bind address (default: ACCOUNTD_HOST)")
@click.option("--port", type=int, default=None, help="Port (default: ACCOUNTD_PORT)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    from accountd.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "accountd.main:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@main.command("init-db")
def init_db():
    """Create the accounts and users tables if they don't exist."""
    _run(_init_db_impl())


async def _init_db_impl():
    from accountd.db.engine import create_schema

    _, engine, _ = _open_db()
    try:
        await create_schema(engine)
    finally:
        await engine.dispose()
    click.secho("Schema created.", fg="green")


@main.command()
def seed():
    """Insert three users and three admins with random passwords."""
    _run(_seed_impl())


async def _seed_impl():
    from accountd.services.user_service import UserService

    settings, engine, factory = _open_db()
    try:
        async with factory() as db:
            seeded = await UserService(db, bcrypt_rounds=settings.bcrypt_rounds).seed_users()
            rows = [
                {"id": str(u.id), "name": u.name, "role": u.role, "password": pw}
                for u, pw in seeded
            ]
    finally:
        await engine.dispose()

    _print_table(rows, [
        ("ID", "id", 36),
        ("Name", "name", 24),
        ("Role", "role", 6),
        ("Password", "password", 10),
    ])
    click.echo()
    click.secho("Passwords are stored hashed; this is the only time they are shown.", fg="yellow")


@main.command("create-user")
@click.argument("name")
@click.argument("password")
@click.option("--role", type=click.Choice(["user", "admin"]), default="user", show_default=True)
def create_user(name: str, password: str, role: str):
    """Create a single user with a known password."""
    _run(_create_user_impl(name, password, role))


async def _create_user_impl(name: str, password: str, role: str):
    from accountd.services.user_service import UserService

    name = name.strip()
    if not name:
        click.secho("Error: name must not be empty", fg="red", err=True)
        sys.exit(1)

    settings, engine, factory = _open_db()
    try:
        async with factory() as db:
            user = await UserService(db, bcrypt_rounds=settings.bcrypt_rounds).create_user(
                name=name, password=password, role=role
            )
            user_id = str(user.id)
    finally:
        await engine.dispose()
    click.secho(f"Created {role} '{name}' ({user_id})", fg="green")


# ---------------------------------------------------------------------------
# API client
# ---------------------------------------------------------------------------


@main.command()
@click.argument("user_id")
@click.argument("password")
def login(user_id: str, password: str):
    """Exchange a user id and password for a token (printed to stdout)."""
    _run(_login_impl(user_id, password))


async def _login_impl(user_id: str, password: str):
    async with _client() as c:
        r = await c.post("/api/auth", json={"id": user_id, "password": password})
        data = _check(r)
    click.echo(data["token"])


_token_option = click.option(
    "--token",
    envvar="ACCOUNTD_TOKEN",
    help="Bearer token (or set ACCOUNTD_TOKEN)",
)


@main.group()
def accounts():
    """List, show, create, rename and delete accounts."""


@accounts.command("list")
@_token_option
@click.option("--json", "as_json", is_flag=True, help="Print the raw JSON:API document")
def accounts_list(token: Optional[str], as_json: bool):
    """List all accounts."""
    _run(_accounts_list_impl(_require_token(token), as_json))


async def _accounts_list_impl(token: str, as_json: bool):
    async with _client(token) as c:
        doc = _check(await c.get("/api/accounts"))
    if as_json:
        click.echo(_pretty_json(doc))
        return
    rows = [_flatten(res) for res in doc["data"]]
    if not rows:
        click.echo("No accounts.")
        return
    _print_table(rows, [("ID", "id", 36), ("Name", "name", 40)])


@accounts.command("get")
@click.argument("account_id")
@_token_option
def accounts_get(account_id: str, token: Optional[str]):
    """Show one account."""
    _run(_accounts_get_impl(account_id, _require_token(token)))


async def _accounts_get_impl(account_id: str, token: str):
    async with _client(token) as c:
        doc = _check(await c.get(f"/api/accounts/{account_id}"))
    click.echo(_pretty_json(doc))


@accounts.command("create")
@click.argument("name")
@_token_option
def accounts_create(name: str, token: Optional[str]):
    """Create an account (admin)."""
    _run(_accounts_create_impl(name, _require_token(token)))


async def _accounts_create_impl(name: str, token: str):
    async with _client(token) as c:
        r = await c.post("/api/accounts", json={"name": name})
        data = _check(r)
    click.secho(data["message"], fg="green")
    location = r.headers.get("Location")
    if location:
        click.echo(f"  {location}")


@accounts.command("update")
@click.argument("account_id")
@click.argument("name")
@_token_option
def accounts_update(account_id: str, name: str, token: Optional[str]):
    """Rename an account (admin)."""
    _run(_accounts_update_impl(account_id, name, _require_token(token)))


async def _accounts_update_impl(account_id: str, name: str, token: str):
    async with _client(token) as c:
        data = _check(await c.put(f"/api/accounts/{account_id}", json={"name": name}))
    click.secho(data["message"], fg="green")


@accounts.command("delete")
@click.argument("account_id")
@_token_option
def accounts_delete(account_id: str, token: Optional[str]):
    """Delete an account (admin)."""
    _run(_accounts_delete_impl(account_id, _require_token(token)))


async def _accounts_delete_impl(account_id: str, token: str):
    async with _client(token) as c:
        data = _check(await c.delete(f"/api/accounts/{account_id}"))
    click.secho(data["message"], fg="green")


if __name__ == "__main__":
    main()
