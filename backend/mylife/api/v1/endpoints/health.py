from __future__ import annotations

from fastapi import APIRouter, Depends, status

from mylife.api.v1.schemas.envelope import error_response, ok_response
from mylife.config import settings
from mylife.core.repositories.document_store import DocumentStore
from mylife.dependencies import get_store
from mylife.utils.logging import get_logger

router = APIRouter()

logger = get_logger(__name__)


@router.get("/")
async def health_check():
    """Health check endpoint."""
    return ok_response(
        {"service": "mylife-records-api", "version": "0.1.0"},
        messages=["healthy"],
    )


@router.get("/ready")
async def readiness_check(store: DocumentStore = Depends(get_store)):
    """Readiness check endpoint; reports 503 when the store is unreachable."""
    try:
        await store.ping()
    except Exception as e:
        logger.warning("Readiness probe failed", extra={"error_type": type(e).__name__})
        return error_response(
            ["The document store is unavailable."],
            {"database": f"error: {e}", "storeBackend": settings.store_backend},
            status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    return ok_response(
        {"database": "connected", "storeBackend": settings.store_backend, "apiPrefix": settings.api_prefix},
        messages=["ready"],
    )
