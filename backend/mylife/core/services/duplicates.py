from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mylife.core.errors import DuplicateError
from mylife.core.repositories.document_store import NOTES, PEOPLE, TAGS
from mylife.utils.arrays import contains_duplicates
from mylife.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from mylife.core.repositories.document_store import DocumentStore

logger = get_logger(__name__)


class DuplicateDetector:
    """Finds records that clash with a candidate on its identifying key.

    The checks read the persisted state at call time and are not atomic with
    the write that follows; the unique indexes of the store are the backstop.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def find_sibling_duplicate(
        self,
        collection: str,
        key: Mapping[str, Any],
        *,
        exclude_id: str | None = None,
    ) -> str | None:
        """Return the id of another record sharing ``key``, if any."""
        for doc in await self._store.collection(collection).find(dict(key)):
            if doc["id"] != exclude_id:
                return doc["id"]
        return None

    @staticmethod
    def find_array_duplicates(items: Sequence[Any]) -> bool:
        return contains_duplicates(items)

    async def ensure_tag_name_free(self, name: str, *, data: Any, exclude_id: str | None = None) -> None:
        await self._ensure_free(
            TAGS,
            {"name": name},
            f"A tag called '{name}' already exists.",
            data=data,
            exclude_id=exclude_id,
        )

    async def ensure_person_name_free(
        self,
        first_name: str,
        middle_name: str,
        last_name: str,
        *,
        data: Any,
        exclude_id: str | None = None,
    ) -> None:
        await self._ensure_free(
            PEOPLE,
            {"firstName": first_name, "middleName": middle_name, "lastName": last_name},
            "A person with the following first, middle and last names already exists: "
            f"'{first_name}', '{middle_name}', '{last_name}'.",
            data=data,
            exclude_id=exclude_id,
        )

    async def ensure_note_slot_free(
        self, date: str, title: str, *, data: Any, exclude_id: str | None = None
    ) -> None:
        await self._ensure_free(
            NOTES,
            {"date": date, "title": title},
            f"A note with the following date and title already exists: '{date}', '{title}'.",
            data=data,
            exclude_id=exclude_id,
        )

    async def _ensure_free(
        self,
        collection: str,
        key: Mapping[str, Any],
        message: str,
        *,
        data: Any,
        exclude_id: str | None,
    ) -> None:
        existing_id = await self.find_sibling_duplicate(collection, key, exclude_id=exclude_id)
        if existing_id is not None:
            logger.info(
                "Rejected duplicate %s",
                collection,
                extra={"key": dict(key), "existing_id": existing_id},
            )
            raise DuplicateError(message, data=data, existing_id=existing_id)
