"""Share service — capability tokens for public, read-only note links.

Learn: Holding the token *is* the permission. There's no session on the
public read path; whoever has /share/<token> can read that one note for
as long as the owner keeps sharing enabled.

Rules that matter here:
- Only the owner can enable/disable, and a non-owner gets NotFoundError,
  the same answer as for a note that doesn't exist (no existence oracle).
- One link per note. Enabling again flips the flag back on and returns
  the same token, so links already handed out keep working.
- A disabled token and a token that never existed look identical from
  the outside.
- Two concurrent first-time enables for one note race on the unique
  note_id constraint; the loser gets InternalError and may retry.
"""

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from notevault.auth.tokens import new_share_token
from notevault.db.models import Note, ShareLink
from notevault.errors import InternalError, NotFoundError
from notevault.services.note_service import NoteService

logger = structlog.get_logger()

SHARE_PATH_PREFIX = "/share/"


def share_path(token: str) -> str:
    """Public path the frontend serves a shared note under."""
    return f"{SHARE_PATH_PREFIX}{token}"


class ShareService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.notes = NoteService(db)

    async def get_link(self, note_id: int) -> ShareLink | None:
        result = await self.db.execute(
            select(ShareLink).where(ShareLink.note_id == note_id)
        )
        return result.scalars().first()

    # ─── Owner operations ───────────────────────────────

    async def enable_share(self, note_id: int, user_id: int) -> ShareLink:
        """Turn sharing on, minting a token only the first time."""
        await self.notes.get_owned(note_id, user_id)

        link = await self.get_link(note_id)
        if link:
            link.is_enabled = True
            await self.db.commit()
            logger.info("share.enabled", note_id=note_id, reused=True)
            return link

        link = ShareLink(note_id=note_id, token=new_share_token(), is_enabled=True)
        self.db.add(link)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning("share.create_conflict", note_id=note_id)
            raise InternalError("could not create share link") from e

        logger.info("share.enabled", note_id=note_id, reused=False)
        return link

    async def disable_share(self, note_id: int, user_id: int) -> None:
        """Turn sharing off. The token is kept for a later re-enable."""
        await self.notes.get_owned(note_id, user_id)

        link = await self.get_link(note_id)
        if link is None:
            return
        link.is_enabled = False
        await self.db.commit()
        logger.info("share.disabled", note_id=note_id)

    # ─── Public read ────────────────────────────────────

    async def resolve_shared(self, token: str) -> Note:
        result = await self.db.execute(
            select(Note)
            .join(ShareLink, ShareLink.note_id == Note.id)
            .where(ShareLink.token == token, ShareLink.is_enabled.is_(True))
        )
        note = result.scalars().first()
        if not note:
            raise NotFoundError()
        return note
