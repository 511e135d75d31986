"""Admin API — user provisioning and privilege changes.

Learn: Every route here sits behind require_admin, attached once at
include_router level in notevault.api. Handlers still ask for the
RequestContext when they need to know *which* admin is acting; FastAPI
reuses the already-resolved dependency.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from notevault.auth.dependencies import RequestContext, require_admin
from notevault.db.engine import get_db
from notevault.schemas.user import AdminFlagUpdate, AdminUserCreate, UserRead
from notevault.services.admin_service import AdminService

router = APIRouter(prefix="/admin")


def _svc(db: AsyncSession = Depends(get_db)) -> AdminService:
    return AdminService(db)


@router.post("/users", response_model=UserRead, status_code=201)
async def create_user(body: AdminUserCreate, svc: AdminService = Depends(_svc)):
    """Create a user with an explicit initial admin flag."""
    return await svc.create_user(body.email, body.password, is_admin=body.is_admin)


@router.get("/users", response_model=list[UserRead])
async def list_users(svc: AdminService = Depends(_svc)):
    return await svc.list_users()


@router.put("/users/{user_id}/admin", status_code=204)
async def set_admin_flag(
    user_id: int,
    body: AdminFlagUpdate,
    ctx: RequestContext = Depends(require_admin),
    svc: AdminService = Depends(_svc),
):
    """Promote or demote another user. Admins can't demote themselves."""
    await svc.set_admin_flag(actor_id=ctx.user_id, target_id=user_id, flag=body.is_admin)
    return Response(status_code=204)
