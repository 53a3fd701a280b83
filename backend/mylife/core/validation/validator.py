from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mylife.core.models.base import EntityKind
from mylife.core.validation.rules import ValidationResult, run_rules
from mylife.core.validation.schemas import NOTE_RULES, PERSON_RULES, TAG_RULES

if TYPE_CHECKING:
    from collections.abc import Mapping

    from mylife.core.services.note_types import NoteTypeRegistry


class FieldValidator:
    """Validates and normalizes raw request payloads.

    Notes are validated against the shared note rules followed by the rules
    of their registered type; tags and people have a fixed rule set. The
    validator never touches the store.
    """

    def __init__(self, note_types: NoteTypeRegistry) -> None:
        self._note_types = note_types

    def validate(
        self,
        kind: EntityKind,
        payload: Mapping[str, Any],
        *,
        note_type: str | None = None,
    ) -> ValidationResult:
        if kind is EntityKind.TAG:
            return run_rules(TAG_RULES, payload)
        if kind is EntityKind.PERSON:
            return run_rules(PERSON_RULES, payload)

        schema = self._note_types.get_schema(note_type)
        return run_rules((*NOTE_RULES, *schema.fields), payload, schema.extra_validators)
