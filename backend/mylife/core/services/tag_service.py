from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mylife.core.models.base import EntityKind
from mylife.core.models.tag import Role, Tag
from mylife.utils.dates import utc_now
from mylife.utils.logging import get_logger

from .base import CollectionService

if TYPE_CHECKING:
    from collections.abc import Mapping

    from mylife.core.repositories.document_store import DocumentStore
    from mylife.core.validation.validator import FieldValidator

    from .duplicates import DuplicateDetector
    from .integrity import ReferentialIntegrityChecker

logger = get_logger(__name__)

TAG_FIELDS = ("name", "description", *(role.value for role in Role))


class TagService(CollectionService):
    kind = EntityKind.TAG

    def __init__(
        self,
        store: DocumentStore,
        validator: FieldValidator,
        duplicates: DuplicateDetector,
        integrity: ReferentialIntegrityChecker,
    ) -> None:
        super().__init__(store.tags)
        self._validator = validator
        self._duplicates = duplicates
        self._integrity = integrity

    async def list_tags(self, role: Role | None = None) -> list[Tag]:
        filter = {role.value: True} if role is not None else None
        docs = await self._guard(self._collection.find(filter, order_by=[("name", False)]), data=None)
        return [Tag.model_validate(d) for d in docs]

    async def count_tags(self) -> int:
        return await self._guard(self._collection.count(), data=None)

    async def get_tag(self, tag_id: str) -> Tag:
        return Tag.model_validate(await self._require(tag_id))

    async def create_tag(self, payload: Mapping[str, Any]) -> Tag:
        data = self._raise_for_errors(self._validator.validate(EntityKind.TAG, payload))
        await self._duplicates.ensure_tag_name_free(data["name"], data=data)

        tag = Tag.model_validate({**{field: data[field] for field in TAG_FIELDS}, **self._new_timestamps()})
        doc = await self._guard(self._collection.insert(tag.to_document()), data=data)
        logger.info("Created tag %s", tag.id, extra={"tag_name": tag.name})
        return Tag.model_validate(doc)

    async def update_tag(self, tag_id: str, payload: Mapping[str, Any]) -> Tag:
        data = self._raise_for_errors(self._validator.validate(EntityKind.TAG, payload))
        existing = Tag.model_validate(await self._require(tag_id))
        await self._duplicates.ensure_tag_name_free(data["name"], data=data, exclude_id=tag_id)

        tag = Tag.model_validate(
            {
                **{field: data[field] for field in TAG_FIELDS},
                "id": existing.id,
                "createdAt": existing.created_at,
                "updatedAt": utc_now(),
            }
        )
        await self._integrity.ensure_tag_updatable(tag_id, tag.roles)

        doc = await self._guard(self._collection.update_by_id(tag_id, tag.to_document()), data=data)
        if doc is None:
            raise self._not_found(tag_id)
        logger.info("Updated tag %s", tag_id, extra={"tag_name": tag.name})
        return Tag.model_validate(doc)

    async def delete_tag(self, tag_id: str) -> Tag:
        await self._require(tag_id)
        await self._integrity.ensure_deletable(EntityKind.TAG, tag_id)

        doc = await self._guard(self._collection.delete_by_id(tag_id), data=tag_id)
        if doc is None:
            raise self._not_found(tag_id)
        logger.info("Deleted tag %s", tag_id)
        return Tag.model_validate(doc)
