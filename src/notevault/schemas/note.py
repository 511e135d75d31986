"""Pydantic schemas for notes and share links."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from notevault.schemas.user import CamelModel


class NoteWrite(CamelModel):
    title: str = Field(default="", max_length=500)
    content: str = ""


class SharedNoteRead(CamelModel):
    """What an anonymous reader of a share link gets."""

    id: int
    title: str
    content: str
    created_at: datetime
    updated_at: datetime


class NoteRead(SharedNoteRead):
    share_url: Optional[str] = None


class ShareLinkRead(CamelModel):
    token: str
    share_url: str
