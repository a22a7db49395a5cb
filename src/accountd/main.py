"""FastAPI application factory.

Learn: App factory pattern: create_app() returns a configured FastAPI
instance. Everything that depends on configuration (engine, session
factory, token service) is built here from one Settings value and kept
on app.state; nothing is created at import time. Lifespan handles
optional schema creation at startup and engine disposal at shutdown.

Run with: uvicorn accountd.main:create_app --factory
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from accountd import __version__
from accountd.api import api_router, root_router
from accountd.api.exception_handlers import register_exception_handlers
from accountd.auth.jwt import TokenService
from accountd.config import Settings, get_settings
from accountd.db.engine import create_engine, create_schema, create_session_factory
from accountd.middleware.request_id import RequestIdMiddleware
from accountd.middleware.security import SecurityHeadersMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    settings: Settings = app.state.settings
    logger.info(
        "accountd.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    if settings.create_schema:
        await create_schema(app.state.engine)
        logger.info("accountd.schema_created")

    yield

    logger.info("accountd.shutdown")
    await app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="accountd",
        description="Accounts and users behind JWT auth, served as JSON:API",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = create_engine(settings)
    app.state.session_factory = create_session_factory(app.state.engine)
    app.state.tokens = TokenService.from_settings(settings)

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → CORS → handler
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)

    app.include_router(root_router)
    app.include_router(api_router)

    return app
