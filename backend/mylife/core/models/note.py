from __future__ import annotations

import datetime as dt  # noqa: TCH003
from enum import Enum
from typing import Any, Literal

from pydantic import ConfigDict, Field

from .base import AppBaseModel, EmbeddedModel, TimestampedModel


class BookFormat(str, Enum):
    BOOK = "Book"
    EBOOK = "eBook"
    AUDIOBOOK = "Audiobook"


class BookStatus(str, Enum):
    COMPLETED = "Completed"
    ABANDONED = "Abandoned"


class Bike(str, Enum):
    MEC_NATIONAL_2018 = "MEC National 2018"


class BikeDataSource(str, Enum):
    BELL_F20 = "Bell F20 Bike Computer"
    STRAVA = "Strava"


class Metric(EmbeddedModel):
    """Time-series measurement recorded for a hike or bike ride."""

    data_source: str | None = None
    start_date: str | None = None  # ISO 8601, kept as submitted
    moving_time: int | None = Field(default=None, ge=0)
    total_time: int | None = Field(default=None, ge=0)
    distance: float | None = Field(default=None, ge=0)
    avg_speed: float | None = Field(default=None, ge=0)
    max_speed: float | None = Field(default=None, ge=0)
    elevation_gain: float | None = None
    max_elevation: float | None = None


class WorkoutMetric(AppBaseModel):
    """Free-form property/value pair recorded for a workout."""

    model_config = ConfigDict(extra="ignore")

    property: str = Field(min_length=1)
    value: Any


class Note(TimestampedModel):
    """Fields shared by every kind of note.

    ``kind`` names the registered note type the document was validated as; it
    is the discriminator used to load a stored document back into its model.
    """

    kind: str
    type: str
    tags: list[str] = Field(default_factory=list)
    date: dt.date
    title: str = Field(min_length=1, max_length=200)
    description: str = ""
    people: list[str] = Field(default_factory=list)
    place: str = ""
    photo_album: str = ""


class LifeNote(Note):
    kind: Literal["Life"] = "Life"


class HealthNote(Note):
    kind: Literal["Health"] = "Health"


class BookNote(Note):
    kind: Literal["Book"] = "Book"
    authors: list[str] = Field(min_length=1)
    format: BookFormat | None = None
    status: BookStatus
    rating: int | None = Field(default=None, ge=1, le=10)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "kind": "Book",
                    "type": "2f1c5a0e-8d7e-4a4c-9d0e-2b0b4f7d1c11",
                    "tags": [],
                    "date": "2020-09-13",
                    "title": "The Handmaid's Tale",
                    "description": "",
                    "people": [],
                    "place": "Vancouver, BC, Canada",
                    "authors": ["Margaret Atwood"],
                    "format": "Audiobook",
                    "status": "Completed",
                    "rating": 9,
                }
            ]
        }
    }


class HikeNote(Note):
    kind: Literal["Hike"] = "Hike"
    metrics: list[Metric] = Field(default_factory=list)


class BikeRideNote(Note):
    kind: Literal["Bike Ride"] = "Bike Ride"
    bike: Bike
    metrics: list[Metric] = Field(default_factory=list)


class WorkoutNote(Note):
    kind: Literal["Workout"] = "Workout"
    workout: str
    metrics: list[WorkoutMetric] = Field(default_factory=list)
