from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mylife.core.errors import InvalidReferenceError
from mylife.core.models.base import EntityKind
from mylife.core.models.person import Person
from mylife.core.models.tag import Role
from mylife.utils.arrays import contains_duplicates
from mylife.utils.dates import utc_now
from mylife.utils.logging import get_logger

from .base import CollectionService

if TYPE_CHECKING:
    from collections.abc import Mapping

    from mylife.core.repositories.document_store import DocumentStore
    from mylife.core.validation.validator import FieldValidator

    from .duplicates import DuplicateDetector
    from .integrity import ReferentialIntegrityChecker
    from .taxonomy import TaxonomyGraph

logger = get_logger(__name__)

PERSON_FIELDS = (
    "firstName",
    "middleName",
    "lastName",
    "preferredName",
    "birthdate",
    "googlePhotoUrl",
    "picasaContactId",
    "notes",
    "photos",
)


class PersonService(CollectionService):
    kind = EntityKind.PERSON

    def __init__(
        self,
        store: DocumentStore,
        validator: FieldValidator,
        duplicates: DuplicateDetector,
        taxonomy: TaxonomyGraph,
        integrity: ReferentialIntegrityChecker,
    ) -> None:
        super().__init__(store.people)
        self._validator = validator
        self._duplicates = duplicates
        self._taxonomy = taxonomy
        self._integrity = integrity

    async def list_people(self) -> list[Person]:
        docs = await self._guard(
            self._collection.find(order_by=[("firstName", False), ("lastName", False)]), data=None
        )
        return [Person.model_validate(d) for d in docs]

    async def count_people(self) -> int:
        return await self._guard(self._collection.count(), data=None)

    async def get_person(self, person_id: str) -> Person:
        return Person.model_validate(await self._require(person_id))

    async def create_person(self, payload: Mapping[str, Any]) -> Person:
        data = self._raise_for_errors(self._validator.validate(EntityKind.PERSON, payload))
        await self._duplicates.ensure_person_name_free(
            data["firstName"], data["middleName"], data["lastName"], data=data
        )
        tag_ids = await self._resolve_tags(data)

        person = self._build(data, tag_ids, **self._new_timestamps())
        doc = await self._guard(self._collection.insert(person.to_document()), data=data)
        logger.info("Created person %s", person.id)
        return Person.model_validate(doc)

    async def update_person(self, person_id: str, payload: Mapping[str, Any]) -> Person:
        data = self._raise_for_errors(self._validator.validate(EntityKind.PERSON, payload))
        existing = Person.model_validate(await self._require(person_id))
        await self._duplicates.ensure_person_name_free(
            data["firstName"], data["middleName"], data["lastName"], data=data, exclude_id=person_id
        )
        tag_ids = await self._resolve_tags(data)

        person = self._build(
            data,
            tag_ids,
            id=existing.id,
            createdAt=existing.created_at,
            updatedAt=utc_now(),
        )
        await self._integrity.ensure_person_updatable(
            person_id, identity_changed=person.identity != existing.identity
        )

        doc = await self._guard(self._collection.update_by_id(person_id, person.to_document()), data=data)
        if doc is None:
            raise self._not_found(person_id)
        logger.info("Updated person %s", person_id)
        return Person.model_validate(doc)

    async def delete_person(self, person_id: str) -> Person:
        await self._require(person_id)
        await self._integrity.ensure_deletable(EntityKind.PERSON, person_id)

        doc = await self._guard(self._collection.delete_by_id(person_id), data=person_id)
        if doc is None:
            raise self._not_found(person_id)
        logger.info("Deleted person %s", person_id)
        return Person.model_validate(doc)

    async def _resolve_tags(self, data: dict[str, Any]) -> list[str]:
        tags, invalid = await self._taxonomy.resolve_many(data["tags"], Role.PERSON)
        if invalid:
            raise InvalidReferenceError(f"Invalid tag(s): {', '.join(map(str, invalid))}.", data=data)
        tag_ids = [tag.id for tag in tags]
        if contains_duplicates(tag_ids):
            raise InvalidReferenceError("Duplicate tags are not allowed.", data=data)
        return tag_ids

    @staticmethod
    def _build(data: dict[str, Any], tag_ids: list[str], **server_fields: Any) -> Person:
        fields = {field: data[field] for field in PERSON_FIELDS if data.get(field) is not None}
        return Person.model_validate({**fields, "tags": tag_ids, **server_fields})
