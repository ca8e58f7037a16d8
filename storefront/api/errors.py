# storefront/api/errors.py
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storefront.db.errors import StorageError

logger = logging.getLogger(__name__)

STORAGE_FAILURE_DETAIL = "Storage backend unavailable"


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    # full cause goes to the log only
    logger.exception("storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": STORAGE_FAILURE_DETAIL})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorageError, storage_error_handler)
