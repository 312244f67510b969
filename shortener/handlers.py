"""Error translation for the slug shortener.

Every failure leaves the service as ``{"message": ..., "stack": ...}`` with the
status carried by its error kind. ``stack`` is the formatted traceback, or
null when the service runs in production.

Translation Table
=================
::
    ShortenerError subclass   → exc.status_code
    RequestValidationError    → ValidationError (400)
    Starlette 404 or 405      → NotFoundError "Not Found - <path>"
    Starlette other           → its own status and detail
    anything else             → 500, logged with traceback
"""

import logging
import traceback
from typing import Callable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from shortener.exceptions import NotFoundError, ShortenerError, ValidationError
from shortener.schemas import ErrorResponse

__all__ = ["UnhandledErrorMiddleware", "error_response", "register_exception_handlers"]

logger = logging.getLogger("shortener.errors")

# A path that exists for another method is still an unmatched route.
UNMATCHED_ROUTE_STATUSES = (404, 405)


def _show_stack(request: Request) -> bool:
    return not request.app.state.context.settings.is_production


def error_response(request: Request, exc: BaseException, status_code: int, message: str) -> JSONResponse:
    stack = "".join(traceback.format_exception(exc)) if _show_stack(request) else None
    body = ErrorResponse(message=message, stack=stack)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        msg = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
        parts.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request body"


async def shortener_error_handler(request: Request, exc: ShortenerError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc)
    return error_response(request, exc, exc.status_code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError(_format_validation_errors(exc))
    return error_response(request, exc, error.status_code, error.message)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code in UNMATCHED_ROUTE_STATUSES:
        error = NotFoundError(f"Not Found - {request.url.path}")
        return error_response(request, exc, error.status_code, error.message)
    response = error_response(request, exc, exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Turn exceptions no handler claimed into a 500 JSON error."""

    async def dispatch(self, request: Request, call_next: Callable):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception(f"Unhandled error on {request.method} {request.url.path}")
            return error_response(request, exc, 500, "Internal Server Error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ShortenerError, shortener_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
