"""Maps business errors to HTTP responses."""

from datetime import UTC, datetime

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidDataError, ValidationError

from commerce.api.schemas import ErrorResponse
from commerce.errors import (
    CommerceError,
    Forbidden,
    InsufficientStock,
    InvalidState,
    NotFound,
    Unauthenticated,
)

logger = structlog.get_logger(__name__)

_STATUS_CODES = {
    NotFound: 404,
    Forbidden: 403,
    Unauthenticated: 401,
    InvalidState: 409,
    InsufficientStock: 409,
}


def _error_response(status_code: int, message: str, errors: dict) -> JSONResponse:
    body = ErrorResponse(
        status=status_code,
        message=message,
        errors=errors,
        timestamp=datetime.now(UTC),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def commerce_error_handler(request: Request, exc: CommerceError) -> JSONResponse:
    status_code = next(
        (code for error_type, code in _STATUS_CODES.items() if isinstance(exc, error_type)),
        400,
    )
    logger.info("request_rejected", path=request.url.path, status=status_code, error=exc.message)
    return _error_response(status_code, exc.message, exc.details)


async def validation_error_handler(request: Request, exc: ValidationError | InvalidDataError) -> JSONResponse:
    return _error_response(400, "Validation failed", exc.messages)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CommerceError, commerce_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(InvalidDataError, validation_error_handler)
