from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from mylife.core.errors import InvalidReferenceError, UnknownNoteTypeError
from mylife.core.models.base import EntityKind, is_id
from mylife.core.models.tag import Role
from mylife.utils.arrays import contains_duplicates
from mylife.utils.dates import utc_now
from mylife.utils.logging import get_logger

from .base import CollectionService

if TYPE_CHECKING:
    from collections.abc import Mapping

    from mylife.core.models.note import Note
    from mylife.core.repositories.document_store import DocumentStore
    from mylife.core.validation.validator import FieldValidator

    from .duplicates import DuplicateDetector
    from .note_types import NoteSchema, NoteTypeRegistry
    from .taxonomy import TaxonomyGraph

logger = get_logger(__name__)


@dataclass
class ResolvedReferences:
    type: str
    tags: list[str]
    people: list[str]
    single: dict[str, str] = field(default_factory=dict)


class NoteService(CollectionService):
    """Create, read, update and delete notes of every registered type.

    A mutation runs through type resolution, field validation, the duplicate
    check, reference resolution and finally the write. Each stage raises its
    own error kind and nothing is written unless every stage passes.
    """

    kind = EntityKind.NOTE

    def __init__(
        self,
        store: DocumentStore,
        note_types: NoteTypeRegistry,
        validator: FieldValidator,
        duplicates: DuplicateDetector,
        taxonomy: TaxonomyGraph,
    ) -> None:
        super().__init__(store.notes)
        self._tags = store.tags
        self._note_types = note_types
        self._validator = validator
        self._duplicates = duplicates
        self._taxonomy = taxonomy

    async def list_notes(self) -> list[Note]:
        docs = await self._guard(self._collection.find(order_by=[("date", True)]), data=None)
        return [self._note_types.load(d) for d in docs]

    async def count_notes(self) -> int:
        return await self._guard(self._collection.count(), data=None)

    async def get_note(self, note_id: str) -> Note:
        return self._note_types.load(await self._require(note_id))

    async def create_note(self, payload: Mapping[str, Any]) -> Note:
        schema = await self._schema_for(payload)
        data = self._raise_for_errors(
            self._validator.validate(EntityKind.NOTE, payload, note_type=schema.name)
        )
        await self._duplicates.ensure_note_slot_free(data["date"], data["title"], data=data)
        refs = await self._resolve_references(schema, data)

        note = self._build(schema, data, refs, **self._new_timestamps())
        doc = await self._guard(self._collection.insert(note.to_document()), data=data)
        logger.info("Created note %s", note.id, extra={"note_kind": schema.name})
        return self._note_types.load(doc)

    async def update_note(self, note_id: str, payload: Mapping[str, Any]) -> Note:
        schema = await self._schema_for(payload)
        data = self._raise_for_errors(
            self._validator.validate(EntityKind.NOTE, payload, note_type=schema.name)
        )
        existing = self._note_types.load(await self._require(note_id))
        await self._duplicates.ensure_note_slot_free(
            data["date"], data["title"], data=data, exclude_id=note_id
        )
        refs = await self._resolve_references(schema, data)

        note = self._build(
            schema,
            data,
            refs,
            id=existing.id,
            createdAt=existing.created_at,
            updatedAt=utc_now(),
        )
        doc = await self._guard(self._collection.update_by_id(note_id, note.to_document()), data=data)
        if doc is None:
            raise self._not_found(note_id)
        logger.info("Updated note %s", note_id, extra={"note_kind": schema.name})
        return self._note_types.load(doc)

    async def delete_note(self, note_id: str) -> Note:
        await self._require(note_id)
        doc = await self._guard(self._collection.delete_by_id(note_id), data=note_id)
        if doc is None:
            raise self._not_found(note_id)
        logger.info("Deleted note %s", note_id)
        return self._note_types.load(doc)

    async def _schema_for(self, payload: Mapping[str, Any]) -> NoteSchema:
        """Pick the note type from the payload's ``type``, a type name or tag id."""
        type_value = payload.get("type")
        name = type_value.strip() if isinstance(type_value, str) else None
        if name in self._note_types:
            return self._note_types.get_schema(name)
        if is_id(name):
            doc = await self._guard(self._tags.find_by_id(name), data=dict(payload))
            if doc is not None and doc.get("name") in self._note_types:
                return self._note_types.get_schema(doc["name"])
        raise UnknownNoteTypeError(type_value, data=dict(payload))

    async def _resolve_references(self, schema: NoteSchema, data: dict[str, Any]) -> ResolvedReferences:
        """Resolve every tag and person reference, collecting all failures."""
        messages: list[str] = []

        type_id = None
        try:
            type_id = (await self._taxonomy.resolve_tag(data["type"], Role.TYPE)).id
        except InvalidReferenceError as err:
            messages.extend(err.messages)

        tags, invalid_tags = await self._taxonomy.resolve_many(data["tags"], Role.TAG)
        if invalid_tags:
            messages.append(f"Invalid tag(s): {', '.join(map(str, invalid_tags))}.")
        tag_ids = [tag.id for tag in tags]
        if contains_duplicates(tag_ids):
            messages.append("Duplicate tags are not allowed.")
        if type_id is not None and type_id in tag_ids:
            messages.append("The same tag cannot be specified in both the type and tags fields.")

        people, invalid_people = await self._taxonomy.resolve_people(data["people"])
        if invalid_people:
            messages.append(f"Invalid people: {', '.join(map(str, invalid_people))}.")
        person_ids = [person.id for person in people]
        if contains_duplicates(person_ids):
            messages.append("Duplicate names are not allowed.")

        single: dict[str, str] = {}
        for field_name, role in schema.references.items():
            try:
                single[field_name] = (await self._taxonomy.resolve_tag(data[field_name], role)).id
            except InvalidReferenceError as err:
                messages.extend(err.messages)

        if messages:
            raise InvalidReferenceError(messages, data=data)
        return ResolvedReferences(
            type=type_id,
            tags=tag_ids,
            people=person_ids,
            single=single,
        )

    @staticmethod
    def _build(schema: NoteSchema, data: dict[str, Any], refs: ResolvedReferences, **server_fields: Any) -> Note:
        fields = {
            name: value
            for name, value in data.items()
            if name in schema.payload_fields and value is not None
        }
        return schema.model.model_validate(
            {
                **fields,
                "type": refs.type,
                "tags": refs.tags,
                "people": refs.people,
                **refs.single,
                **server_fields,
            }
        )
