"""API route aggregation.

All routers registered here get mounted in main.py under /api.

Learn: Gate stages are applied at the include_router level using
FastAPI's dependencies parameter. This protects every route in a router
without modifying individual handlers. Auth (login/logout/register) and
the public share route are open; /me asks for its own session.
"""

from fastapi import APIRouter, Depends

from notevault.api.admin import router as admin_router
from notevault.api.auth import router as auth_router
from notevault.api.notes import router as notes_router
from notevault.api.share import router as share_router
from notevault.auth.dependencies import require_admin, require_session

api_router = APIRouter(prefix="/api")

# Open routes, no session required
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(share_router, tags=["share"])

# Session required
api_router.include_router(notes_router, tags=["notes"], dependencies=[Depends(require_session)])

# Session + admin required
api_router.include_router(admin_router, tags=["admin"], dependencies=[Depends(require_admin)])
