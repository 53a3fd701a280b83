from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mylife.core.errors import ReferenceNotFoundError, RoleMismatchError
from mylife.core.models.base import is_id
from mylife.core.models.person import Person
from mylife.core.models.tag import Role, Tag, has_role
from mylife.core.repositories.document_store import In
from mylife.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mylife.core.repositories.document_store import DocumentStore

logger = get_logger(__name__)


class TaxonomyGraph:
    """Queryable view of tags and people as reference targets.

    References may be given as ids or, as a convenience at the API boundary,
    by name (tag name, or a person's lookup name such as ``Janet M. Doe``).
    Resolution always returns the canonical records so callers persist ids.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def tags_with_role(self, role: Role) -> list[Tag]:
        docs = await self._store.tags.find({role.value: True}, order_by=[("name", False)])
        return [Tag.model_validate(d) for d in docs]

    async def find_tag(self, identifier: Any) -> Tag | None:
        if not isinstance(identifier, str) or not identifier:
            return None
        if is_id(identifier):
            doc = await self._store.tags.find_by_id(identifier)
        else:
            docs = await self._store.tags.find({"name": identifier})
            doc = docs[0] if docs else None
        return Tag.model_validate(doc) if doc is not None else None

    async def resolve_tag(self, identifier: Any, role: Role) -> Tag:
        """Resolve a single tag reference that must carry ``role``."""
        tag = await self.find_tag(identifier)
        if tag is None:
            raise ReferenceNotFoundError(identifier, role.label)
        if not has_role(tag, role):
            raise RoleMismatchError(identifier, role.label)
        return tag

    async def resolve_many(self, identifiers: Sequence[Any], role: Role) -> tuple[list[Tag], list[Any]]:
        """Resolve tag references in one batch.

        Returns the resolved tags in input order and the identifiers that are
        unknown or lack ``role``.
        """
        ids = [i for i in identifiers if is_id(i)]
        names = [i for i in identifiers if isinstance(i, str) and not is_id(i)]

        by_id: dict[str, Tag] = {}
        by_name: dict[str, Tag] = {}
        if ids:
            by_id = {d["id"]: Tag.model_validate(d) for d in await self._store.tags.find({"id": In(ids)})}
        if names:
            by_name = {d["name"]: Tag.model_validate(d) for d in await self._store.tags.find({"name": In(names)})}

        resolved: list[Tag] = []
        invalid: list[Any] = []
        for identifier in identifiers:
            tag = None
            if is_id(identifier):
                tag = by_id.get(identifier)
            elif isinstance(identifier, str):
                tag = by_name.get(identifier)
            if tag is not None and has_role(tag, role):
                resolved.append(tag)
            else:
                invalid.append(identifier)
        if invalid:
            logger.debug("Unresolved tag references", extra={"role": role.value, "invalid": invalid})
        return resolved, invalid

    async def resolve_people(self, identifiers: Sequence[Any]) -> tuple[list[Person], list[Any]]:
        """Resolve person references by id or lookup name, in input order."""
        ids = [i for i in identifiers if is_id(i)]
        by_id: dict[str, Person] = {}
        if ids:
            by_id = {d["id"]: Person.model_validate(d) for d in await self._store.people.find({"id": In(ids)})}

        by_name: dict[str, Person] = {}
        if any(isinstance(i, str) and not is_id(i) for i in identifiers):
            for doc in await self._store.people.find():
                person = Person.model_validate(doc)
                by_name.setdefault(person.lookup_name, person)

        resolved: list[Person] = []
        invalid: list[Any] = []
        for identifier in identifiers:
            if is_id(identifier):
                person = by_id.get(identifier)
            elif isinstance(identifier, str):
                person = by_name.get(identifier)
            else:
                person = None
            if person is None:
                invalid.append(identifier)
            else:
                resolved.append(person)
        return resolved, invalid
