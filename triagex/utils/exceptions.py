import logging
from typing import Any, Optional

from fastapi import Request, status
from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from triagex.middleware.tracing import TRACE_HEADER, TRACE_ID_CTX_VAR

logger = logging.getLogger("triagex")


class TriageError(Exception):
    """Base class for errors surfaced to API callers with a fixed status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidInput(TriageError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(TriageError):
    status_code = status.HTTP_404_NOT_FOUND


class StorageError(TriageError):
    """The record store failed. The message shown to callers stays generic."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def status_to_code(status_code: int) -> str:
    mapping = {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        409: "CONFLICT",
        422: "UNPROCESSABLE_ENTITY",
        429: "TOO_MANY_REQUESTS",
        500: "INTERNAL_SERVER_ERROR",
    }
    return mapping.get(status_code, f"HTTP_{status_code}")


def error_body(status_code: int, message: str, details: Any = None) -> dict:
    body = {
        "success": False,
        "code": status_to_code(status_code),
        "message": message,
        "trace_id": TRACE_ID_CTX_VAR.get(),
    }
    if details is not None:
        body["details"] = details
    return body


async def handle_triage_error(request: Request, exc: TriageError):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, exc.message, exc.details),
    )


async def handle_http_exception(request: Request, exc: HTTPException):
    detail: Any = exc.detail
    message = detail if isinstance(detail, str) else "HTTP error"
    details = None if isinstance(detail, str) else detail
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, message, details),
        headers=getattr(exc, "headers", None),
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    code = status.HTTP_422_UNPROCESSABLE_ENTITY
    return JSONResponse(
        status_code=code,
        content=error_body(code, "Request validation failed", jsonable_encoder(exc.errors())),
    )


async def handle_unhandled_exception(request: Request, exc: Exception):
    logger.exception({"function": "handle_unhandled_exception", "path": str(request.url.path)})
    code = status.HTTP_500_INTERNAL_SERVER_ERROR
    # Runs outside the tracing middleware, so the header is set here
    trace_id = TRACE_ID_CTX_VAR.get()
    return JSONResponse(
        status_code=code,
        content=error_body(code, "An unexpected error occurred"),
        headers={TRACE_HEADER: trace_id} if trace_id else None,
    )
