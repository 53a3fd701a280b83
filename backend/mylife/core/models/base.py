from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, ClassVar
from uuid import UUID, uuid4

from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel

from mylife.utils.dates import utc_now


class EntityKind(str, Enum):
    """Top-level record kinds, named the way they appear in messages."""

    TAG = "tag"
    PERSON = "person"
    NOTE = "note"


def new_id() -> str:
    return str(uuid4())


def is_id(value: Any) -> bool:
    """True when ``value`` looks like a server-assigned id."""
    if not isinstance(value, str):
        return False
    try:
        UUID(value)
    except ValueError:
        return False
    return True


class AppBaseModel(PydanticBaseModel):
    """Base model for all domain models.

    Field names are snake_case in Python and camelCase on the wire and in
    the document store.
    """

    model_config = ConfigDict(
        from_attributes=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class EmbeddedModel(AppBaseModel):
    """Entry embedded in a parent document. Unset optional fields are left out."""

    model_config = ConfigDict(extra="ignore")

    @model_serializer(mode="wrap")
    def _drop_none(self, handler: Any) -> dict[str, Any]:
        return {key: value for key, value in handler(self).items() if value is not None}


class TimestampedModel(AppBaseModel):
    """Base model for stored entities: server-assigned id and timestamps."""

    # Computed fields that are rendered on the wire but never persisted.
    derived_fields: ClassVar[frozenset[str]] = frozenset()

    id: str = Field(default_factory=new_id)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def to_document(self) -> dict[str, Any]:
        """Return the JSON document written to the store."""
        return self.model_dump(mode="json", by_alias=True, exclude=set(self.derived_fields))
