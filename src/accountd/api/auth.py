"""Auth API: exchange a user id and password for a token.

Learn: POST /api/auth is the only way to obtain a token:
- missing or malformed fields → 400 (request validation)
- unknown user id → 404 (including ids that aren't UUIDs)
- wrong password → 401
- success → 201 {"token": ...} carrying {id, name, role}

Legacy plaintext passwords are re-hashed with bcrypt on a successful login.
"""

import uuid

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from accountd.api.deps import get_app_settings
from accountd.auth.dependencies import get_token_service
from accountd.auth.jwt import Claims, TokenService
from accountd.auth.password import needs_upgrade, verify_password
from accountd.config import Settings
from accountd.db.engine import get_db
from accountd.errors import NotFoundError, UnauthorizedError
from accountd.schemas.auth import AuthRequest, TokenResponse
from accountd.services.user_service import UserService

logger = structlog.get_logger()

router = APIRouter(prefix="/auth")


@router.post("", response_model=TokenResponse, status_code=201)
async def authenticate(
    body: AuthRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_app_settings),
):
    """Verify a user's password and issue a token."""
    try:
        user_id = uuid.UUID(body.id)
    except ValueError:
        raise NotFoundError("User not found")

    svc = UserService(db, bcrypt_rounds=settings.bcrypt_rounds)
    user = await svc.get_user(user_id)
    if not user:
        raise NotFoundError("User not found")

    if not verify_password(body.password, user.password_hash):
        logger.info("auth.wrong_password", user_id=str(user.id))
        raise UnauthorizedError("Authentication failed. Wrong password")

    if needs_upgrade(user.password_hash):
        await svc.upgrade_password(user, body.password)

    token = tokens.issue(Claims(id=str(user.id), name=user.name, role=user.role))
    logger.info("auth.token_issued", user_id=str(user.id), role=user.role)
    return TokenResponse(token=token)
