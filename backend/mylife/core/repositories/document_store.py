from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

TAGS = "tags"
PEOPLE = "people"
NOTES = "notes"

COLLECTIONS = (TAGS, PEOPLE, NOTES)


@dataclass(frozen=True)
class In:
    """Filter value matching documents whose field equals any of ``values``."""

    values: tuple[Any, ...]

    def __init__(self, values: Sequence[Any]) -> None:
        object.__setattr__(self, "values", tuple(values))


@dataclass(frozen=True)
class Contains:
    """Filter value matching documents whose array field contains ``value``."""

    value: Any


# field -> plain value (equality), In(...) or Contains(...)
Filter = dict[str, Any]

# (field, descending)
OrderBy = tuple[str, bool]


class CollectionRepository(ABC):
    """Abstract repository over one collection of JSON documents.

    Documents are plain dicts keyed by their wire field names and always carry
    a string ``id``. Implementations perform I/O and therefore expose async
    methods. None of the operations are transactional with each other.
    """

    name: str

    @abstractmethod
    async def insert(self, doc: Mapping[str, Any]) -> dict[str, Any]:  # pragma: no cover - interface only
        """Persist a new document and return the stored copy."""

    @abstractmethod
    async def find(
        self,
        filter: Filter | None = None,
        *,
        order_by: Sequence[OrderBy] = (),
    ) -> list[dict[str, Any]]:  # pragma: no cover
        """Return all documents matching ``filter``."""

    @abstractmethod
    async def find_by_id(self, doc_id: str) -> dict[str, Any] | None:  # pragma: no cover
        """Fetch a document by id or return None if not found."""

    @abstractmethod
    async def count(self, filter: Filter | None = None) -> int:  # pragma: no cover
        """Count documents matching ``filter``."""

    @abstractmethod
    async def update_by_id(self, doc_id: str, doc: Mapping[str, Any]) -> dict[str, Any] | None:  # pragma: no cover
        """Replace a document and return the stored copy, or None if missing."""

    @abstractmethod
    async def delete_by_id(self, doc_id: str) -> dict[str, Any] | None:  # pragma: no cover
        """Delete a document and return it, or None if missing."""


class DocumentStore(ABC):
    """The set of collections the service persists to.

    A store is constructed once at startup, handed to request handlers
    explicitly, and closed at shutdown.
    """

    tags: CollectionRepository
    people: CollectionRepository
    notes: CollectionRepository

    def collection(self, name: str) -> CollectionRepository:
        if name not in COLLECTIONS:
            raise KeyError(f"Unknown collection '{name}'")
        return getattr(self, name)

    @abstractmethod
    async def ping(self) -> None:  # pragma: no cover
        """Raise if the backing store is unreachable."""

    @abstractmethod
    async def close(self) -> None:  # pragma: no cover
        """Release any resources held by the store."""
