"""Registry of note types.

Each note type is a ``NoteSchema``: the model its documents load into, the
field rules that apply on top of the shared note rules, optional cross-field
validators, and the single-tag reference fields whose role must be checked.
Adding a note type means registering another schema; nothing else changes.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic.alias_generators import to_camel

from mylife.core.errors import UnknownNoteTypeError
from mylife.core.models.note import (
    Bike,
    BikeDataSource,
    BikeRideNote,
    BookFormat,
    BookNote,
    BookStatus,
    HealthNote,
    HikeNote,
    LifeNote,
    Metric,
    Note,
    WorkoutMetric,
    WorkoutNote,
)
from mylife.core.models.tag import Role
from mylife.core.validation.rules import ExtraValidator, FieldRule, body

if TYPE_CHECKING:
    from mylife.core.models.base import AppBaseModel

# Assigned by the server, never taken from a payload.
SERVER_FIELDS = frozenset({"id", "kind", "createdAt", "updatedAt"})


@dataclass(frozen=True)
class NoteSchema:
    name: str
    model: type[Note]
    fields: tuple[FieldRule, ...] = ()
    metric_shape: type[AppBaseModel] | None = None
    extra_validators: tuple[ExtraValidator, ...] = ()
    references: Mapping[str, Role] = field(default_factory=dict)

    @property
    def payload_fields(self) -> frozenset[str]:
        """Wire names of the model fields a payload may supply."""
        names = {info.alias or to_camel(name) for name, info in self.model.model_fields.items()}
        return frozenset(names) - SERVER_FIELDS


class NoteTypeRegistry:
    def __init__(self) -> None:
        self._schemas: dict[str, NoteSchema] = {}

    def register(self, schema: NoteSchema) -> NoteSchema:
        if schema.name in self._schemas:
            raise ValueError(f"Note type '{schema.name}' is already registered")
        self._schemas[schema.name] = schema
        return schema

    def get_schema(self, type_name: Any) -> NoteSchema:
        schema = self._schemas.get(type_name) if isinstance(type_name, str) else None
        if schema is None:
            raise UnknownNoteTypeError(type_name)
        return schema

    def names(self) -> list[str]:
        return list(self._schemas)

    def load(self, doc: Mapping[str, Any]) -> Note:
        """Load a stored note document into the model of its type."""
        return self.get_schema(doc.get("kind")).model.model_validate(doc)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._schemas


def _choices(values: type) -> list[str]:
    return [member.value for member in values]


def metric_rules(data_source: FieldRule) -> tuple[FieldRule, ...]:
    """Rules for the time-series metrics recorded on hikes and bike rides."""
    return (
        body("metrics").optional().is_list("Metrics must be specified in an array if it is specified at all."),
        data_source,
        body("metrics.*.startDate", "Start date must be a valid ISO 8601 date/time.").optional().is_iso8601(),
        body("metrics.*.movingTime", "Moving time must be an integer greater than or equal to 0 s.")
        .optional()
        .is_int(min=0),
        body("metrics.*.totalTime", "Total time must be an integer greater than or equal to 0 s.")
        .optional()
        .is_int(min=0),
        body("metrics.*.distance", "Distance must be a number greater than or equal to 0 km.")
        .optional()
        .is_number(min=0),
        body("metrics.*.avgSpeed", "Average speed must be greater than or equal to 0 km/h.")
        .optional()
        .is_number(min=0),
        body("metrics.*.maxSpeed", "Maximum speed must be greater than or equal to 0 km/h.")
        .optional()
        .is_number(min=0),
        body("metrics.*.elevationGain", "Elevation gain must be a number in metres.").optional().is_number(),
        body("metrics.*.maxElevation", "Maximum elevation must be a number in metres.").optional().is_number(),
        # Metric sets are compared once their fields have been trimmed.
        body("metrics").optional().no_duplicates("Duplicate metric sets are not allowed."),
    )


BOOK = NoteSchema(
    name="Book",
    model=BookNote,
    fields=(
        body("authors")
        .is_list("Authors must be specified in an array.")
        .min_items(1, "At least one author is required."),
        body("authors.*", "Each author's name is required and cannot exceed 100 characters.")
        .trim()
        .length(1, 100),
        body("authors").no_duplicates("Duplicate authors are not allowed."),
        body("format", f"Format must be one of: {', '.join(_choices(BookFormat))}.")
        .optional()
        .trim()
        .is_in(_choices(BookFormat)),
        body("status", f"Status must be one of: {', '.join(_choices(BookStatus))}.")
        .trim()
        .is_in(_choices(BookStatus)),
        body("rating", "Rating must be an integer between 1 and 10.").optional().is_int(min=1, max=10),
    ),
)

HIKE = NoteSchema(
    name="Hike",
    model=HikeNote,
    metric_shape=Metric,
    fields=metric_rules(
        body("metrics.*.dataSource", "Data source cannot exceed 100 characters.")
        .optional()
        .trim()
        .length(0, 100)
    ),
)

BIKE_RIDE = NoteSchema(
    name="Bike Ride",
    model=BikeRideNote,
    metric_shape=Metric,
    fields=(
        body("bike", f"Bike must be one of: {', '.join(_choices(Bike))}.").trim().is_in(_choices(Bike)),
        *metric_rules(
            body("metrics.*.dataSource", f"Data source must be one of: {', '.join(_choices(BikeDataSource))}.")
            .optional()
            .trim()
            .is_in(_choices(BikeDataSource))
        ),
    ),
)

WORKOUT = NoteSchema(
    name="Workout",
    model=WorkoutNote,
    metric_shape=WorkoutMetric,
    references={"workout": Role.WORKOUT},
    fields=(
        body("workout", "A workout type is required.").trim().length(1),
        body("metrics").optional().is_list("Metrics must be specified in an array if it is specified at all."),
        body("metrics.*.property", "Property is required.").trim().length(1),
        body("metrics.*.value", "Value is required.").not_empty(),
        body("metrics").optional().no_duplicates("Duplicate metric sets are not allowed."),
    ),
)

HEALTH = NoteSchema(name="Health", model=HealthNote)

LIFE = NoteSchema(name="Life", model=LifeNote)


def build_default_registry() -> NoteTypeRegistry:
    registry = NoteTypeRegistry()
    for schema in (BOOK, HIKE, BIKE_RIDE, WORKOUT, HEALTH, LIFE):
        registry.register(schema)
    return registry


note_types = build_default_registry()
