"""
Response Envelope

Every endpoint answers with ``{code, message, data}`` where ``code`` mirrors
the HTTP status. Paginated payloads use ``{total, page, size, list}``.

Also registers the exception handlers that render errors in the same
envelope and the JSON content-type guard used on body-carrying routes.
"""

import logging
from typing import Generic, TypeVar

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

DataT = TypeVar("DataT")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class ApiResponse(BaseModel, Generic[DataT]):
    """Standard response envelope."""

    code: int = 200
    message: str = "success"
    data: DataT | None = None


class Page(BaseModel, Generic[DataT]):
    """One page of results plus the total matching count."""

    total: int
    page: int
    size: int
    items: list[DataT] = Field(default_factory=list, alias="list")

    model_config = ConfigDict(populate_by_name=True)


def normalize_pagination(page: int, size: int) -> tuple[int, int]:
    """Floor page at 1 and clamp size into [1, MAX_PAGE_SIZE]."""
    page = max(page, 1)
    if size < 1:
        size = DEFAULT_PAGE_SIZE
    return page, min(size, MAX_PAGE_SIZE)


def _error_body(status_code: int, message: str, error: str | None = None, data=None) -> dict:
    body: dict = {"code": status_code, "message": message, "data": data}
    if error:
        body["error"] = error
    return body


async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, dict):
        message = str(detail.get("message", ""))
        error = detail.get("error")
    else:
        message = str(detail)
        error = None
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.status_code, message, error),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", "Invalid value"),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(
            status.HTTP_400_BAD_REQUEST,
            "Invalid request parameters",
            "VALIDATION_ERROR",
            errors,
        ),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "An unexpected error occurred.",
            "INTERNAL_ERROR",
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


async def require_json(request: Request) -> None:
    """
    Dependency rejecting request bodies that are not declared as JSON.

    Raises:
        HTTPException 400: If Content-Type is not application/json
    """
    content_type = request.headers.get("content-type", "")
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type != "application/json":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "INVALID_CONTENT_TYPE",
                "message": "Content-Type must be application/json.",
            },
        )
