from __future__ import annotations

import datetime as dt  # noqa: TCH003

from pydantic import Field, computed_field

from .base import EmbeddedModel, TimestampedModel


class PersonNote(EmbeddedModel):
    date: dt.date | None = None
    note: str = Field(min_length=1)


class PersonPhoto(EmbeddedModel):
    description: str | None = None
    image: str


def format_middle_name(middle_name: str | None) -> str:
    """Render a middle name, using an initial with a period for single letters."""
    if not middle_name:
        return ""
    if len(middle_name) == 1:
        return f"{middle_name}."
    return middle_name


def person_lookup_name(first_name: str, middle_name: str | None, last_name: str | None) -> str:
    """Name used to reference a person by name, e.g. ``Janet M. Doe``."""
    parts = [first_name, format_middle_name(middle_name), last_name or ""]
    return " ".join(part for part in parts if part)


class Person(TimestampedModel):
    """Person domain model."""

    derived_fields = frozenset({"name"})

    first_name: str = Field(min_length=1, max_length=25)
    middle_name: str = Field(default="", max_length=25)
    last_name: str = Field(default="", max_length=25)
    preferred_name: str = Field(default="", max_length=25)
    birthdate: dt.date | None = None
    google_photo_url: str = Field(default="", max_length=250)
    picasa_contact_id: str = Field(default="", max_length=16)
    tags: list[str] = Field(default_factory=list)
    notes: list[PersonNote] = Field(default_factory=list)
    photos: list[PersonPhoto] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def name(self) -> str:
        name = self.first_name
        if self.preferred_name:
            name = f"{name} ({self.preferred_name})"
        middle = format_middle_name(self.middle_name)
        if middle:
            name = f"{name} {middle}"
        if self.last_name:
            name = f"{name} {self.last_name}"
        return name

    @property
    def lookup_name(self) -> str:
        return person_lookup_name(self.first_name, self.middle_name, self.last_name)

    @property
    def identity(self) -> tuple[str, str, str]:
        return (self.first_name, self.middle_name, self.last_name)
