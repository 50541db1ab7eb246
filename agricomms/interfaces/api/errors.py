"""Exception handlers shared by every router."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from agricomms.infrastructure.storage import StorageWriteError

logger = logging.getLogger(__name__)


async def storage_write_error_handler(request: Request, exc: StorageWriteError) -> JSONResponse:
    logger.error("Storage write failed on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Le stockage est temporairement indisponible"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Translate infrastructure failures into HTTP responses."""

    app.add_exception_handler(StorageWriteError, storage_write_error_handler)


__all__ = ["register_exception_handlers", "storage_write_error_handler"]
