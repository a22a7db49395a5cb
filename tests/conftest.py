"""Test fixtures: a fresh app and in-memory database per test.

Learn: create_app() takes an explicit Settings, so each test builds its
own app against sqlite+aiosqlite in memory. The engine uses a static pool
(one shared connection), which keeps the in-memory database alive for
the whole test; disposing the engine at teardown throws it away. No
rollback tricks are needed for isolation.

Tokens are minted straight from app.state.tokens for users inserted
through UserService, so most tests don't need to call POST /api/auth.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from accountd.auth.jwt import Claims
from accountd.config import Settings
from accountd.db.engine import create_schema
from accountd.main import create_app
from accountd.services.user_service import UserService

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"
TEST_JWT_SECRET = "test-secret-do-not-use-in-prod"


def make_settings(**overrides) -> Settings:
    values = {
        "database_url": TEST_DB_URL,
        "jwt_secret": TEST_JWT_SECRET,
        "bcrypt_rounds": 4,  # bcrypt's minimum: keeps hashing fast in tests
        "environment": "development",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings(request):
    """Test settings; parametrize indirectly with a dict of overrides."""
    return make_settings(**getattr(request, "param", {}))


@pytest_asyncio.fixture()
async def app(settings):
    application = create_app(settings)
    await create_schema(application.state.engine)
    try:
        yield application
    finally:
        await application.state.engine.dispose()


@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture()
async def make_user(app):
    """Factory: insert a user with a known password, return the ORM row."""

    async def _make(name: str = "Test User", password: str = "secret-123", role: str = "user"):
        async with app.state.session_factory() as db:
            svc = UserService(db, bcrypt_rounds=app.state.settings.bcrypt_rounds)
            return await svc.create_user(name=name, password=password, role=role)

    return _make


@pytest.fixture
def token_for(app):
    """Mint a token for a user row."""

    def _mint(user) -> str:
        return app.state.tokens.issue(
            Claims(id=str(user.id), name=user.name, role=user.role)
        )

    return _mint


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture()
async def admin_headers(make_user, token_for):
    admin = await make_user(name="Admin", role="admin")
    return bearer(token_for(admin))


@pytest_asyncio.fixture()
async def user_headers(make_user, token_for):
    user = await make_user(name="Regular", role="user")
    return bearer(token_for(user))
