"""Note service — per-user note storage.

Every lookup is scoped to the owner. A note that exists but belongs to
someone else raises the same NotFoundError as one that doesn't exist.
"""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from notevault.db.models import Note
from notevault.errors import NotFoundError

logger = structlog.get_logger()


class NoteService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_owned(self, note_id: int, user_id: int) -> Note:
        result = await self.db.execute(
            select(Note).where(Note.id == note_id, Note.user_id == user_id)
        )
        note = result.scalars().first()
        if not note:
            raise NotFoundError()
        return note

    async def list_notes(self, user_id: int) -> list[Note]:
        result = await self.db.execute(
            select(Note)
            .where(Note.user_id == user_id)
            .order_by(Note.updated_at.desc(), Note.id.desc())
        )
        return list(result.scalars().all())

    async def create_note(self, user_id: int, title: str, content: str) -> Note:
        note = Note(user_id=user_id, title=title, content=content)
        self.db.add(note)
        await self.db.commit()
        await self.db.refresh(note)
        logger.info("note.created", note_id=note.id, user_id=user_id)
        return note

    async def update_note(self, note_id: int, user_id: int, title: str, content: str) -> Note:
        note = await self.get_owned(note_id, user_id)
        note.title = title
        note.content = content
        await self.db.commit()
        await self.db.refresh(note)
        return note

    async def delete_note(self, note_id: int, user_id: int) -> None:
        """Delete a note; its share link goes with it (ON DELETE CASCADE)."""
        note = await self.get_owned(note_id, user_id)
        await self.db.delete(note)
        await self.db.commit()
        logger.info("note.deleted", note_id=note_id, user_id=user_id)
