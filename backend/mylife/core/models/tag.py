from __future__ import annotations

from enum import Enum

from pydantic import Field

from .base import TimestampedModel


class Role(str, Enum):
    """Capabilities a tag can grant; the value is the flag's wire name."""

    TYPE = "isType"
    TAG = "isTag"
    WORKOUT = "isWorkout"
    PERSON = "isPerson"

    @property
    def label(self) -> str:
        return _ROLE_LABELS[self]


_ROLE_LABELS = {
    Role.TYPE: "type",
    Role.TAG: "tag",
    Role.WORKOUT: "workout",
    Role.PERSON: "person tag",
}


class Tag(TimestampedModel):
    """Taxonomy entry whose role flags gate where it may be referenced."""

    name: str = Field(min_length=1, max_length=25)
    description: str = ""
    is_type: bool = False
    is_tag: bool = False
    is_workout: bool = False
    is_person: bool = False

    @property
    def roles(self) -> frozenset[Role]:
        flags = {
            Role.TYPE: self.is_type,
            Role.TAG: self.is_tag,
            Role.WORKOUT: self.is_workout,
            Role.PERSON: self.is_person,
        }
        return frozenset(role for role, enabled in flags.items() if enabled)

    def has_role(self, role: Role) -> bool:
        return role in self.roles


def has_role(tag: Tag, role: Role) -> bool:
    return tag.has_role(role)
