from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import status
from fastapi.exceptions import RequestValidationError

from mylife.api.v1.schemas.envelope import error_response
from mylife.core.errors import MyLifeError, StoreError
from mylife.utils.logging import get_logger

if TYPE_CHECKING:
    from fastapi import FastAPI, Request
    from fastapi.responses import JSONResponse

logger = get_logger(__name__)


async def mylife_error_handler(request: Request, exc: MyLifeError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.info(
            "%s %s rejected",
            request.method,
            request.url.path,
            extra={"error_kind": exc.kind, "status_code": exc.status_code},
        )
    return error_response(exc.messages, exc.data, exc.status_code)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("%s %s sent a malformed body", request.method, request.url.path)
    return error_response(
        ["Request body must be a JSON object."],
        None,
        422,
    )


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.exception("Store failure while handling %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(
        ["The request could not be completed because the data store failed."],
        None,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error while handling %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(
        ["An unexpected error occurred."],
        None,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MyLifeError, mylife_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
