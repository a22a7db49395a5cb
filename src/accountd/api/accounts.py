"""Account API routes.

Learn: Every route here sits behind the auth gate (applied when the
router is included, see api/__init__.py). Mutations add the admin role
gate per route. Routes handle HTTP concerns (status codes, JSON:API
shaping), AccountService handles the store.

Updating or deleting an id that doesn't exist answers with the usual
success message unless strict_account_lookups is on; the miss is logged
either way.
"""

import uuid

import structlog
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from accountd.api.deps import get_app_settings
from accountd.auth.dependencies import require_admin
from accountd.config import Settings
from accountd.db.engine import get_db
from accountd.errors import NotFoundError
from accountd.schemas.account import (
    AccountDocument,
    AccountListDocument,
    AccountResource,
    AccountWrite,
)
from accountd.schemas.jsonapi import JsonApiResponse, MessageResponse
from accountd.services.account_service import AccountService

logger = structlog.get_logger()

router = APIRouter(prefix="/accounts")


def _svc(db: AsyncSession = Depends(get_db)) -> AccountService:
    return AccountService(db)


def _missing(account_id: uuid.UUID, action: str, settings: Settings) -> None:
    logger.warning("account.missing", account_id=str(account_id), action=action)
    if settings.strict_account_lookups:
        raise NotFoundError("Account not found")


@router.get("", response_model=AccountListDocument, response_class=JsonApiResponse)
async def list_accounts(svc: AccountService = Depends(_svc)):
    accounts = await svc.list_accounts()
    return AccountListDocument(data=[AccountResource.from_model(a) for a in accounts])


@router.post(
    "",
    response_model=MessageResponse,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
async def create_account(
    body: AccountWrite,
    request: Request,
    response: Response,
    svc: AccountService = Depends(_svc),
):
    """Create an account. The new id is only exposed through Location."""
    account = await svc.create_account(name=body.name)
    response.headers["Location"] = str(
        request.url_for("get_account", account_id=str(account.id)).path
    )
    logger.info("account.created", account_id=str(account.id))
    return MessageResponse(message="Account created")


@router.get(
    "/{account_id}",
    response_model=AccountDocument,
    response_class=JsonApiResponse,
)
async def get_account(account_id: uuid.UUID, svc: AccountService = Depends(_svc)):
    account = await svc.get_account(account_id)
    if not account:
        raise NotFoundError("Account not found")
    return AccountDocument(data=AccountResource.from_model(account))


@router.put(
    "/{account_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
async def update_account(
    account_id: uuid.UUID,
    body: AccountWrite,
    svc: AccountService = Depends(_svc),
    settings: Settings = Depends(get_app_settings),
):
    if not await svc.update_account(account_id, name=body.name):
        _missing(account_id, "update", settings)
    return MessageResponse(message="Account updated")


@router.delete(
    "/{account_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
async def delete_account(
    account_id: uuid.UUID,
    svc: AccountService = Depends(_svc),
    settings: Settings = Depends(get_app_settings),
):
    if not await svc.delete_account(account_id):
        _missing(account_id, "delete", settings)
    return MessageResponse(message="Successfully deleted")
