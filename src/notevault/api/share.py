"""Public share API — read a note by its capability token.

No session dependency: the token is the credential. Unknown and
disabled tokens both answer 404.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from notevault.db.engine import get_db
from notevault.schemas.note import SharedNoteRead
from notevault.services.share_service import ShareService

router = APIRouter()


@router.get("/share/{token}", response_model=SharedNoteRead)
async def get_shared(token: str, db: AsyncSession = Depends(get_db)):
    return await ShareService(db).resolve_shared(token)
