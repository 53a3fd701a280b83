from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


class FieldError(BaseModel):
    """A single field-level validation failure.

    ``value`` is only serialized when it was explicitly set; its absence on the
    wire tells the client the field was missing from the request entirely.
    Dump with ``exclude_unset=True`` to keep that distinction.
    """

    model_config = ConfigDict(extra="forbid")

    value: Any = None
    msg: str
    param: str
    location: Literal["body"] = "body"

    def to_wire(self) -> dict[str, Any]:
        data = self.model_dump(mode="json", exclude_unset=True)
        data["location"] = self.location
        return data
