# marketplace/api/errors.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from marketplace.domain.errors import (
    CapacityExceededError,
    ConcurrencyConflict,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
)
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)

_STATUS_CODES = {
    NotFoundError: 404,
    ForbiddenError: 403,
    InvalidStateError: 400,
    CapacityExceededError: 400,
    ConcurrencyConflict: 409,
}


def _handler(status_code: int):
    async def handle(request: Request, exc: Exception) -> JSONResponse:
        logger.info(f"{request.method} {request.url.path} -> {status_code}: {exc}")
        return JSONResponse(status_code=status_code, content={"success": False, "message": str(exc)})

    return handle


def register_error_handlers(app: FastAPI) -> None:
    for exc_class, status_code in _STATUS_CODES.items():
        app.add_exception_handler(exc_class, _handler(status_code))
