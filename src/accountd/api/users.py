"""User API routes: read-only listing for authenticated callers."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from accountd.db.engine import get_db
from accountd.schemas.jsonapi import JsonApiResponse
from accountd.schemas.user import UserListDocument, UserResource
from accountd.services.user_service import UserService

router = APIRouter(prefix="/users")


@router.get("", response_model=UserListDocument, response_class=JsonApiResponse)
async def list_users(db: AsyncSession = Depends(get_db)):
    users = await UserService(db).list_users()
    return UserListDocument(data=[UserResource.from_model(u) for u in users])
