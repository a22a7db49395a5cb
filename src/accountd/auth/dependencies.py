"""FastAPI auth dependencies: the auth gate and the role gate.

Learn: These run as Depends() ahead of route handlers, either per route
or for a whole router via include_router(dependencies=[...]). FastAPI
caches a dependency per request, so a route guarded by both the router's
auth gate and its own role gate verifies the token only once.

Pipeline: get_current_user (401) → require_role(...) (403) → handler.
"""

from typing import Optional

import structlog
from fastapi import Depends, Header, Request

from accountd.auth.jwt import Claims, TokenService, VerificationError
from accountd.errors import ForbiddenError, UnauthorizedError

logger = structlog.get_logger()

BEARER_PREFIX = "Bearer "


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service),
) -> Claims:
    """Require a valid Bearer token; attach its claims to request.state."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise UnauthorizedError("No token provided")
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise UnauthorizedError("No token provided")

    try:
        claims = tokens.verify(token)
    except VerificationError as e:
        logger.info("auth.failed", reason=str(e), path=request.url.path)
        raise UnauthorizedError("Failed to authenticate token")

    request.state.claims = claims
    structlog.contextvars.bind_contextvars(user_id=claims.id)
    return claims


def require_role(*roles: str):
    """Build a dependency that only lets the given roles through."""

    async def role_gate(claims: Claims = Depends(get_current_user)) -> Claims:
        if claims.role not in roles:
            logger.info("auth.forbidden", user_id=claims.id, role=claims.role)
            raise ForbiddenError("Insufficient access rights")
        return claims

    return role_gate


require_admin = require_role("admin")
