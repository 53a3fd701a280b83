from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from mylife.api.v1.schemas.envelope import ok_response
from mylife.core.models.tag import Role
from mylife.core.services.tag_service import TagService
from mylife.dependencies import get_tag_service

router = APIRouter()


@router.get("")
async def list_tags(role: Role | None = None, service: TagService = Depends(get_tag_service)):
    """List tags by name, optionally only those that carry ``role``."""
    tags = await service.list_tags(role=role)
    return ok_response([t.to_wire() for t in tags])


@router.get("/count")
async def count_tags(service: TagService = Depends(get_tag_service)):
    return ok_response(await service.count_tags())


@router.get("/{tag_id}")
async def get_tag(tag_id: str, service: TagService = Depends(get_tag_service)):
    tag = await service.get_tag(tag_id)
    return ok_response(tag.to_wire())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_tag(payload: dict[str, Any] = Body(...), service: TagService = Depends(get_tag_service)):
    tag = await service.create_tag(payload)
    return ok_response(tag.to_wire(), status.HTTP_201_CREATED)


@router.put("/{tag_id}")
async def update_tag(
    tag_id: str,
    payload: dict[str, Any] = Body(...),
    service: TagService = Depends(get_tag_service),
):
    tag = await service.update_tag(tag_id, payload)
    return ok_response(tag.to_wire())


@router.delete("/{tag_id}")
async def delete_tag(tag_id: str, service: TagService = Depends(get_tag_service)):
    tag = await service.delete_tag(tag_id)
    return ok_response(tag.to_wire())
