from collections.abc import Mapping, Sequence
from typing import Any
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_500_INTERNAL_SERVER_ERROR,
)
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError

from library_store.core.logging import get_logger

REQUIRED_FIELDS: frozenset[str] = frozenset({"title", "author"})
REQUIRED_FIELDS_MESSAGE = "Title and author are required"
DUPLICATE_ISBN_MESSAGE = "ISBN already exists"


class ErrorBody(BaseModel):
    """Error body returned by every failing endpoint."""
    error: str


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content=ErrorBody(error=message).model_dump()
    )


def _describe_validation_errors(errors: Sequence[Mapping[Any, Any]]) -> str:
    """Collapse pydantic errors into a single message."""

    for error in errors:
        loc = error.get("loc") or ()
        if loc and loc[-1] in REQUIRED_FIELDS:
            return REQUIRED_FIELDS_MESSAGE

    parts: list[str] = []
    for error in errors:
        loc = [str(p) for p in (error.get("loc") or ()) if p != "body"]
        field = ".".join(loc) or "body"
        parts.append(f"{field}: {error.get('msg', 'invalid value')}")
    return "Invalid request payload: " + "; ".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    """Register centralized exception."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.warning("HTTP error", extra={"status_code": exc.status_code})
        message = str(exc.detail) if exc.detail else "HTTP error"
        return error_response(exc.status_code, message)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.warning("Validation error")
        return error_response(
            HTTP_400_BAD_REQUEST, _describe_validation_errors(exc.errors())
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.warning("Database integrity error", extra={"error": str(exc)})

        error_message = str(exc.orig) if exc.orig else str(exc)

        if "unique constraint" in error_message.lower():
            message = DUPLICATE_ISBN_MESSAGE
        elif "not null constraint" in error_message.lower():
            message = REQUIRED_FIELDS_MESSAGE
        else:
            message = "Data integrity violation"
        return error_response(HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger = get_logger(__name__, request)
        logger.exception("Unhandled server error", exc_info=exc)
        response = error_response(HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or "Internal Server Error")
        corr_id = getattr(request.state, "correlation_id", None)
        if corr_id:
            response.headers["X-Request-ID"] = corr_id
        return response
