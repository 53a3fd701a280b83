from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from mylife.core.schemas.validation import FieldError

if TYPE_CHECKING:
    from collections.abc import Sequence


class Envelope(BaseModel):
    """Wrapper around every response body."""

    status: Literal["ok", "error"]
    messages: list[str | dict[str, Any]] = Field(default_factory=list)
    data: Any = None


def _message(message: str | FieldError) -> str | dict[str, Any]:
    return message.to_wire() if isinstance(message, FieldError) else message


def ok_response(data: Any = None, status_code: int = status.HTTP_200_OK, messages: Sequence[str] = ()) -> JSONResponse:
    envelope = Envelope(status="ok", messages=list(messages), data=data)
    return JSONResponse(status_code=status_code, content=envelope.model_dump(mode="json"))


def error_response(messages: Sequence[str | FieldError], data: Any, status_code: int) -> JSONResponse:
    envelope = Envelope(status="error", messages=[_message(m) for m in messages], data=data)
    return JSONResponse(status_code=status_code, content=envelope.model_dump(mode="json"))
