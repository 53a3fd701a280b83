from __future__ import annotations

from fastapi import APIRouter

from mylife.api.v1.schemas.envelope import ok_response

router = APIRouter()


@router.get("/")
async def index():
    return ok_response(messages=["MyLife API is working."])
