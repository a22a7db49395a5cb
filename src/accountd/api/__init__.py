"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter. This protects all routes in each router
without modifying individual handlers. Health, token issuance and
setup are open; account mutations add the admin gate per route.
"""

from fastapi import APIRouter, Depends

from accountd.api.accounts import router as accounts_router
from accountd.api.auth import router as auth_router
from accountd.api.health import router as health_router
from accountd.api.setup import router as setup_router
from accountd.api.users import router as users_router
from accountd.auth.dependencies import get_current_user

# All protected routers require a valid bearer token
_auth = [Depends(get_current_user)]

root_router = APIRouter()


@root_router.get("/")
async def welcome():
    return {"message": "welcome"}


root_router.include_router(setup_router, tags=["setup"])

api_router = APIRouter(prefix="/api")

# Open routes: no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes: require a valid JWT
api_router.include_router(users_router, tags=["users"], dependencies=_auth)
api_router.include_router(accounts_router, tags=["accounts"], dependencies=_auth)
