"""
Error mapping and response envelope for the catalog API.

Catalog errors are translated to HTTP status codes and returned in the
same ``{status, message, data, error_code}`` envelope that wraps every
successful JSON response.
"""

import json
from http import HTTPStatus
from typing import Any, Callable, Optional

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from ..core.exceptions import (
    CatalogError,
    ConflictError,
    DataIntegrityError,
    InvalidRelationshipError,
    ResourceNotFoundError,
    StoreError,
    ValidationError,
)
from ..core.logging import get_logger
from .schemas import ApiResponse

logger = get_logger(__name__)

SKIP_HEADERS = ("x-envelope-skip", "x-envelope-disable")
UNWRAPPED_PATHS = ("/docs", "/redoc", "/openapi.json")

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (ResourceNotFoundError, 404),
    (ConflictError, 409),
    (InvalidRelationshipError, 409),
    (DataIntegrityError, 500),
    (StoreError, 503),
)


def status_for(error: CatalogError) -> int:
    """HTTP status code for a catalog error."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return 500


def reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Unknown"


def envelope(
    status_code: int,
    data: Any = None,
    message: Optional[str] = None,
    error_code: Optional[str] = None,
) -> dict:
    return ApiResponse(
        status=status_code,
        message=message or reason_phrase(status_code),
        data=data,
        error_code=error_code,
    ).model_dump()


def is_enveloped(body: Any) -> bool:
    return isinstance(body, dict) and {"status", "message", "data"} <= body.keys()


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    status_code = status_for(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Catalog error",
        path=request.url.path,
        method=request.method,
        status_code=status_code,
        error_type=type(exc).__name__,
        error_code=exc.error_code,
        error=exc.message,
        details=exc.details,
    )
    return JSONResponse(
        status_code=status_code,
        content=envelope(status_code, message=exc.message, error_code=exc.error_code),
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid request: {field} {first.get('msg', '')}".strip()
    logger.warning("Request validation failed", path=request.url.path, error=message)
    return JSONResponse(
        status_code=400,
        content=envelope(400, message=message, error_code="VALIDATION_ERROR"),
    )


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=envelope(exc.status_code, message=str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unexpected error occurred",
        error_type=type(exc).__name__,
        error_message=str(exc),
        path=request.url.path,
        method=request.method,
    )
    return JSONResponse(
        status_code=500,
        content=envelope(500, message="Internal server error", error_code="INTERNAL_ERROR"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the catalog error handlers on an application."""
    app.add_exception_handler(CatalogError, catalog_error_handler)  # type: ignore
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore
    app.add_exception_handler(StarletteHTTPException, http_error_handler)  # type: ignore
    app.add_exception_handler(Exception, unexpected_error_handler)


class EnvelopeMiddleware(BaseHTTPMiddleware):
    """Wrap successful JSON responses in the API envelope."""

    def _skip(self, request: Request) -> bool:
        if request.url.path.startswith(UNWRAPPED_PATHS):
            return True
        return any(
            request.headers.get(name, "").lower() == "true" for name in SKIP_HEADERS
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response: Response = await call_next(request)

        if self._skip(request) or not 200 <= response.status_code < 300:
            return response
        if response.status_code == 204:
            return response
        if not response.headers.get("content-type", "").startswith("application/json"):
            return response

        raw = b"".join([chunk async for chunk in response.body_iterator])  # type: ignore
        headers = {
            k: v for k, v in response.headers.items() if k.lower() != "content-length"
        }
        try:
            body = json.loads(raw) if raw else None
        except ValueError:
            return Response(
                content=raw,
                status_code=response.status_code,
                headers=headers,
                media_type=response.media_type,
            )

        if is_enveloped(body):
            content = body
        else:
            content = envelope(response.status_code, data=body)
        return JSONResponse(status_code=response.status_code, content=content, headers=headers)
