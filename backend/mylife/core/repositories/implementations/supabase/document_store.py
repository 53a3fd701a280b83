from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from postgrest.exceptions import APIError

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

logger = get_logger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from supabase import Client

    from mylife.core.repositories.document_store import Filter, OrderBy

UNIQUE_VIOLATION = "23505"


class SupabaseCollection(CollectionRepository):
    """Supabase implementation of a document collection.

    Uses Supabase's PostgREST client. Assumes a table per collection whose
    columns are named exactly like the document's wire fields (see
    ``backend/sql/schema.sql``). Columns that do not apply to a document, such
    as book fields on a hike note, come back as NULL and are dropped so the
    document round-trips unchanged.
    """

    def __init__(self, client: Client, table_name: str) -> None:
        self._client: Client = client
        self.name = table_name

    async def insert(self, doc: Mapping[str, Any]) -> dict[str, Any]:
        resp = await self._run(
            lambda: self._client.table(self.name)
            .insert(dict(doc))
            .execute()
        )
        return self._row_to_doc(self._first(resp.data))

    async def find(
        self,
        filter: Filter | None = None,
        *,
        order_by: Sequence[OrderBy] = (),
    ) -> list[dict[str, Any]]:
        def _query():
            q = self._apply_filter(self._client.table(self.name).select("*"), filter)
            for field, descending in order_by:
                q = q.order(field, desc=descending)
            return q.execute()

        resp = await self._run(_query)
        return [self._row_to_doc(r) for r in resp.data or []]

    async def find_by_id(self, doc_id: str) -> dict[str, Any] | None:
        resp = await self._run(
            lambda: self._client.table(self.name)
            .select("*")
            .eq("id", doc_id)
            .limit(1)
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_doc(items[0])

    async def count(self, filter: Filter | None = None) -> int:
        resp = await self._run(
            lambda: self._apply_filter(
                self._client.table(self.name).select("id", count="exact"), filter
            ).execute()
        )
        return int(resp.count or 0)

    async def update_by_id(self, doc_id: str, doc: Mapping[str, Any]) -> dict[str, Any] | None:
        # Replace semantics: columns absent from the document are reset to NULL.
        row = {column: None for column in await self._columns(doc_id)}
        row.update({k: v for k, v in doc.items() if k != "id"})
        resp = await self._run(
            lambda: self._client.table(self.name)
            .update(row)
            .eq("id", doc_id)
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_doc(items[0])

    async def delete_by_id(self, doc_id: str) -> dict[str, Any] | None:
        resp = await self._run(
            lambda: self._client.table(self.name)
            .delete()
            .eq("id", doc_id)
            .execute()
        )
        items = resp.data or []
        if not items:
            return None
        return self._row_to_doc(items[0])

    async def _columns(self, doc_id: str) -> list[str]:
        current = await self._run(
            lambda: self._client.table(self.name).select("*").eq("id", doc_id).limit(1).execute()
        )
        items = current.data or []
        return [c for c in (items[0] if items else {}) if c != "id"]

    @staticmethod
    def _apply_filter(query: Any, filter: Filter | None) -> Any:
        for field, expected in (filter or {}).items():
            if isinstance(expected, In):
                query = query.in_(field, list(expected.values))
            elif isinstance(expected, Contains):
                query = query.contains(field, [expected.value])
            elif expected is None:
                query = query.is_(field, "null")
            else:
                query = query.eq(field, expected)
        return query

    async def _run(self, func: Callable[[], Any]) -> Any:
        try:
            return await asyncio.to_thread(func)
        except APIError as err:
            if getattr(err, "code", None) == UNIQUE_VIOLATION:
                raise StoreConflictError(f"Unique key violated in '{self.name}': {err.message}") from err
            logger.error("Supabase request on '%s' failed: %s", self.name, err)
            raise StoreError(f"Supabase request on '{self.name}' failed") from err

    @staticmethod
    def _first(data: Any) -> dict[str, Any]:
        if isinstance(data, list) and data:
            return data[0]
        if isinstance(data, dict):
            return data
        return {}

    @staticmethod
    def _row_to_doc(row: dict[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in row.items() if v is not None}


class SupabaseDocumentStore(DocumentStore):
    def __init__(self, client: Client) -> None:
        self._client = client
        self.tags = SupabaseCollection(client, TAGS)
        self.people = SupabaseCollection(client, PEOPLE)
        self.notes = SupabaseCollection(client, NOTES)

    async def ping(self) -> None:
        await self.tags.count()

    async def close(self) -> None:
        logger.info("Closing Supabase document store")
        session = getattr(self._client.postgrest, "session", None)
        if session is not None:
            await asyncio.to_thread(session.close)
