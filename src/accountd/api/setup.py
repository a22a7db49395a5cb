"""Setup route: seed the users collection.

Learn: GET /setup is unauthenticated and not idempotent; each call adds
three users and three admins. Turn it off outside development with
ACCOUNTD_ENABLE_SETUP=false, in which case the route answers 404.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from accountd.api.deps import get_app_settings
from accountd.config import Settings
from accountd.db.engine import get_db
from accountd.errors import NotFoundError
from accountd.schemas.user import SeededUser, SetupResponse
from accountd.services.user_service import UserService

router = APIRouter()


@router.get("/setup", response_model=SetupResponse)
async def setup(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    if not settings.enable_setup:
        raise NotFoundError()
    seeded = await UserService(db, bcrypt_rounds=settings.bcrypt_rounds).seed_users()
    return SetupResponse(
        message="Users created",
        users=[
            SeededUser(id=u.id, name=u.name, role=u.role, password=pw)
            for u, pw in seeded
        ],
    )
