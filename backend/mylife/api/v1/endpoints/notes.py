from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from mylife.api.v1.schemas.envelope import ok_response
from mylife.core.services.note_service import NoteService
from mylife.dependencies import get_note_service

router = APIRouter()


@router.get("")
async def list_notes(service: NoteService = Depends(get_note_service)):
    """List notes of every type, newest first."""
    notes = await service.list_notes()
    return ok_response([n.to_wire() for n in notes])


@router.get("/count")
async def count_notes(service: NoteService = Depends(get_note_service)):
    return ok_response(await service.count_notes())


@router.get("/{note_id}")
async def get_note(note_id: str, service: NoteService = Depends(get_note_service)):
    note = await service.get_note(note_id)
    return ok_response(note.to_wire())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_note(payload: dict[str, Any] = Body(...), service: NoteService = Depends(get_note_service)):
    note = await service.create_note(payload)
    return ok_response(note.to_wire(), status.HTTP_201_CREATED)


@router.put("/{note_id}")
async def update_note(
    note_id: str,
    payload: dict[str, Any] = Body(...),
    service: NoteService = Depends(get_note_service),
):
    note = await service.update_note(note_id, payload)
    return ok_response(note.to_wire())


@router.delete("/{note_id}")
async def delete_note(note_id: str, service: NoteService = Depends(get_note_service)):
    note = await service.delete_note(note_id)
    return ok_response(note.to_wire())
