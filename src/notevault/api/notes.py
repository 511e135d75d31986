"""Notes API — the owner's notes and their share switches.

Learn: All routes need a session (router-level require_session) and
every lookup is scoped to ctx.user_id. Someone else's note id gets 404,
exactly like an id that doesn't exist.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from notevault.auth.dependencies import RequestContext, require_session
from notevault.db.engine import get_db
from notevault.db.models import Note
from notevault.schemas.note import NoteRead, NoteWrite, ShareLinkRead
from notevault.services.note_service import NoteService
from notevault.services.share_service import ShareService, share_path

router = APIRouter(prefix="/notes")


def _notes(db: AsyncSession = Depends(get_db)) -> NoteService:
    return NoteService(db)


def _shares(db: AsyncSession = Depends(get_db)) -> ShareService:
    return ShareService(db)


async def _note_read(note: Note, shares: ShareService) -> NoteRead:
    read = NoteRead.model_validate(note)
    link = await shares.get_link(note.id)
    if link and link.is_enabled:
        read.share_url = share_path(link.token)
    return read


# ─── CRUD ───────────────────────────────────────────────

@router.get("", response_model=list[NoteRead])
async def list_notes(
    ctx: RequestContext = Depends(require_session),
    svc: NoteService = Depends(_notes),
):
    return await svc.list_notes(ctx.user_id)


@router.post("", response_model=NoteRead, status_code=201)
async def create_note(
    body: NoteWrite,
    ctx: RequestContext = Depends(require_session),
    svc: NoteService = Depends(_notes),
):
    return await svc.create_note(ctx.user_id, body.title, body.content)


@router.get("/{note_id}", response_model=NoteRead)
async def get_note(
    note_id: int,
    ctx: RequestContext = Depends(require_session),
    svc: NoteService = Depends(_notes),
    shares: ShareService = Depends(_shares),
):
    """Get one note; includes shareUrl while sharing is enabled."""
    note = await svc.get_owned(note_id, ctx.user_id)
    return await _note_read(note, shares)


@router.put("/{note_id}", status_code=204)
async def update_note(
    note_id: int,
    body: NoteWrite,
    ctx: RequestContext = Depends(require_session),
    svc: NoteService = Depends(_notes),
):
    await svc.update_note(note_id, ctx.user_id, body.title, body.content)
    return Response(status_code=204)


@router.delete("/{note_id}", status_code=204)
async def delete_note(
    note_id: int,
    ctx: RequestContext = Depends(require_session),
    svc: NoteService = Depends(_notes),
):
    await svc.delete_note(note_id, ctx.user_id)
    return Response(status_code=204)


# ─── Sharing ────────────────────────────────────────────

@router.post("/{note_id}/share", response_model=ShareLinkRead)
async def enable_share(
    note_id: int,
    ctx: RequestContext = Depends(require_session),
    shares: ShareService = Depends(_shares),
):
    """Enable sharing; returns the (stable) token and its public path."""
    link = await shares.enable_share(note_id, ctx.user_id)
    return ShareLinkRead(token=link.token, share_url=share_path(link.token))


@router.post("/{note_id}/share/disable", status_code=204)
async def disable_share(
    note_id: int,
    ctx: RequestContext = Depends(require_session),
    shares: ShareService = Depends(_shares),
):
    await shares.disable_share(note_id, ctx.user_id)
    return Response(status_code=204)
