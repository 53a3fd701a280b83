from __future__ import annotations

from typing import TYPE_CHECKING

from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from mylife.core.repositories.implementations.memory.document_store import InMemoryDocumentStore
from mylife.core.repositories.implementations.supabase.document_store import SupabaseDocumentStore
from mylife.utils.logging import get_logger

if TYPE_CHECKING:
    from mylife.config import Settings
    from mylife.core.repositories.document_store import DocumentStore

logger = get_logger(__name__)


def create_supabase_client(settings: Settings) -> Client:
    """Create the Supabase client owned by the document store.

    Called once per process at startup; the resulting store is closed at
    shutdown.
    """
    logger.debug("Creating Supabase client")
    if not settings.supabase_url:
        raise RuntimeError("supabase_url is required for the supabase store backend")
    if not settings.supabase_key:
        raise RuntimeError("supabase_key is required for the supabase store backend")
    return create_client(
        settings.supabase_url,
        settings.supabase_key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )


def build_document_store(settings: Settings) -> DocumentStore:
    """Construct the document store selected by ``settings.store_backend``."""
    if settings.store_backend == "memory":
        logger.warning("Using the in-memory document store; data will not survive a restart")
        return InMemoryDocumentStore()
    return SupabaseDocumentStore(create_supabase_client(settings))
