from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mylife.core.errors import InternalError, NotFoundError, ShapeError, StoreError
from mylife.utils.dates import utc_now
from mylife.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from mylife.core.models.base import EntityKind
    from mylife.core.repositories.document_store import CollectionRepository
    from mylife.core.validation.rules import ValidationResult

logger = get_logger(__name__)


class CollectionService:
    """Shared plumbing for the tag, person and note services."""

    kind: EntityKind

    def __init__(self, collection: CollectionRepository) -> None:
        self._collection = collection

    async def _require(self, entity_id: str) -> dict[str, Any]:
        doc = await self._guard(self._collection.find_by_id(entity_id), data=entity_id)
        if doc is None:
            raise self._not_found(entity_id)
        return doc

    def _not_found(self, entity_id: str) -> NotFoundError:
        return NotFoundError(self.kind.value, entity_id)

    @staticmethod
    def _new_timestamps() -> dict[str, Any]:
        now = utc_now()
        return {"createdAt": now, "updatedAt": now}

    async def _guard(self, operation: Awaitable[Any], *, data: Any) -> Any:
        """Await a store operation, reporting store failures as internal errors."""
        try:
            return await operation
        except StoreError:
            logger.exception("Store operation on %s failed", self._collection.name)
            raise InternalError(f"The {self.kind.value} could not be saved or loaded.", data=data) from None

    @staticmethod
    def _raise_for_errors(result: ValidationResult) -> dict[str, Any]:
        if result.errors:
            raise ShapeError(result.errors, data=result.normalized)
        return result.normalized
