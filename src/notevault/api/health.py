"""Health check endpoint.

Learn: Simple GET endpoint that verifies the server is running and the
store answers a trivial query. Always 200; the body says whether the
store is reachable.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notevault import __version__
from notevault.db.engine import get_db

router = APIRouter()


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Check server health and store connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        await db.execute(text("SELECT 1"))
        checks["store"] = "ok"
    except SQLAlchemyError as e:
        checks["store"] = f"error: {type(e).__name__}"

    status = "healthy" if checks["store"] == "ok" else "degraded"
    return {"status": status, **checks}
