"""Referential integrity for tags and people.

The store has no foreign keys, so before a tag or person is changed or
removed every field that can point at it is counted. A probe is one such
field; a nonzero count is a blocking reference.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mylife.core.errors import ReferentialIntegrityError
from mylife.core.models.base import EntityKind
from mylife.core.models.tag import Role
from mylife.core.repositories.document_store import NOTES, PEOPLE, Contains
from mylife.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Collection

    from mylife.core.repositories.document_store import DocumentStore, Filter

logger = get_logger(__name__)


@dataclass(frozen=True)
class Probe:
    collection: str
    field: str
    array: bool = False
    # Role the referencing field requires of a tag.
    role: Role | None = None

    def filter_for(self, entity_id: str) -> Filter:
        return {self.field: Contains(entity_id) if self.array else entity_id}


@dataclass(frozen=True)
class BlockingReference:
    collection: str
    field: str
    count: int
    role: Role | None = None

    def describe(self) -> str:
        return f"{self.count} {self.collection}.{self.field}"


PROBES: dict[EntityKind, tuple[Probe, ...]] = {
    EntityKind.TAG: (
        Probe(NOTES, "type", role=Role.TYPE),
        Probe(NOTES, "tags", array=True, role=Role.TAG),
        Probe(NOTES, "workout", role=Role.WORKOUT),
        Probe(PEOPLE, "tags", array=True, role=Role.PERSON),
    ),
    EntityKind.PERSON: (Probe(NOTES, "people", array=True),),
}


class ReferentialIntegrityChecker:
    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def check_blocking(self, kind: EntityKind, entity_id: str) -> list[BlockingReference]:
        """Count references to an entity, returning only the nonzero probes."""
        probes = PROBES.get(kind, ())
        counts = await asyncio.gather(
            *(self._store.collection(p.collection).count(p.filter_for(entity_id)) for p in probes)
        )
        return [
            BlockingReference(p.collection, p.field, count, p.role)
            for p, count in zip(probes, counts)
            if count > 0
        ]

    async def ensure_deletable(self, kind: EntityKind, entity_id: str) -> None:
        blocking = await self.check_blocking(kind, entity_id)
        if blocking:
            self._reject("delete", kind, entity_id, blocking)

    async def ensure_tag_updatable(self, tag_id: str, roles: Collection[Role]) -> None:
        """Reject an update that removes a role some reference relies on."""
        blocking = await self.check_blocking(EntityKind.TAG, tag_id)
        if any(ref.role not in roles for ref in blocking):
            self._reject("update", EntityKind.TAG, tag_id, blocking)

    async def ensure_person_updatable(self, person_id: str, *, identity_changed: bool) -> None:
        """Reject a rename of a person that notes refer to."""
        if not identity_changed:
            return
        blocking = await self.check_blocking(EntityKind.PERSON, person_id)
        if blocking:
            self._reject("update", EntityKind.PERSON, person_id, blocking)

    @staticmethod
    def _reject(
        action: str,
        kind: EntityKind,
        entity_id: str,
        blocking: list[BlockingReference],
    ) -> None:
        message = (
            f"Cannot {action} {kind.value} with ID '{entity_id}' without breaking referential integrity.  "
            f"The {kind.value} is referenced in: {', '.join(ref.describe() for ref in blocking)} field(s)."
        )
        logger.info(
            "Blocked %s of %s %s",
            action,
            kind.value,
            entity_id,
            extra={"references": [ref.describe() for ref in blocking]},
        )
        raise ReferentialIntegrityError(message, data=entity_id, references=blocking)
