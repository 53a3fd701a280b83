from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from mylife.core.errors import StoreConflictError, StoreError
from mylife.core.repositories.document_store import (
    NOTES,
    PEOPLE,
    TAGS,
    CollectionRepository,
    Contains,
    DocumentStore,
    In,
)
from mylife.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from mylife.core.repositories.document_store import Filter, OrderBy

logger = get_logger(__name__)


def matches(doc: Mapping[str, Any], filter: Filter | None) -> bool:
    for field, expected in (filter or {}).items():
        actual = doc.get(field)
        if isinstance(expected, In):
            if actual not in expected.values:
                return False
        elif isinstance(expected, Contains):
            if not isinstance(actual, list) or expected.value not in actual:
                return False
        elif actual != expected:
            return False
    return True


def _sort_key(value: Any) -> tuple[int, Any]:
    # Missing values sort first, like nulls in an ascending index.
    return (0, "") if value is None else (1, value)


class InMemoryCollection(CollectionRepository):
    """Dict-backed collection.

    Documents are deep-copied on the way in and out so callers can never
    mutate stored state. ``unique`` lists field groups that no two documents
    may share, mimicking a unique index in a real store.
    """

    def __init__(self, name: str, unique: Sequence[tuple[str, ...]] = ()) -> None:
        self.name = name
        self._docs: dict[str, dict[str, Any]] = {}
        self._unique = list(unique)

    async def insert(self, doc: Mapping[str, Any]) -> dict[str, Any]:
        doc_id = doc.get("id")
        if not doc_id:
            raise StoreError(f"Cannot insert a document without an id into '{self.name}'")
        if doc_id in self._docs:
            raise StoreConflictError(f"Document '{doc_id}' already exists in '{self.name}'")
        self._check_unique(doc, exclude_id=None)
        self._docs[doc_id] = copy.deepcopy(dict(doc))
        return copy.deepcopy(self._docs[doc_id])

    async def find(
        self,
        filter: Filter | None = None,
        *,
        order_by: Sequence[OrderBy] = (),
    ) -> list[dict[str, Any]]:
        results = [d for d in self._docs.values() if matches(d, filter)]
        # Stable sorts applied from the least to the most significant key.
        for field, descending in reversed(list(order_by)):
            results.sort(key=lambda d, f=field: _sort_key(d.get(f)), reverse=descending)
        return copy.deepcopy(results)

    async def find_by_id(self, doc_id: str) -> dict[str, Any] | None:
        doc = self._docs.get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    async def count(self, filter: Filter | None = None) -> int:
        return sum(1 for d in self._docs.values() if matches(d, filter))

    async def update_by_id(self, doc_id: str, doc: Mapping[str, Any]) -> dict[str, Any] | None:
        if doc_id not in self._docs:
            return None
        self._check_unique(doc, exclude_id=doc_id)
        replacement = copy.deepcopy(dict(doc))
        replacement["id"] = doc_id
        self._docs[doc_id] = replacement
        return copy.deepcopy(replacement)

    async def delete_by_id(self, doc_id: str) -> dict[str, Any] | None:
        return self._docs.pop(doc_id, None)

    def _check_unique(self, doc: Mapping[str, Any], exclude_id: str | None) -> None:
        for fields in self._unique:
            key = {f: doc.get(f) for f in fields}
            for other_id, other in self._docs.items():
                if other_id != exclude_id and matches(other, key):
                    raise StoreConflictError(
                        f"Unique key {tuple(fields)} violated in '{self.name}' by document '{doc.get('id')}'"
                    )


class InMemoryDocumentStore(DocumentStore):
    """Process-local store used for tests and ``MYLIFE_STORE_BACKEND=memory``."""

    def __init__(self, *, enforce_unique: bool = True) -> None:
        unique = enforce_unique
        self.tags = InMemoryCollection(TAGS, unique=[("name",)] if unique else ())
        self.people = InMemoryCollection(
            PEOPLE, unique=[("firstName", "middleName", "lastName")] if unique else ()
        )
        self.notes = InMemoryCollection(NOTES, unique=[("date", "title")] if unique else ())
        logger.debug("Initialized in-memory document store", extra={"enforce_unique": enforce_unique})

    async def ping(self) -> None:
        return None

    async def close(self) -> None:
        logger.debug("Closing in-memory document store")
