"""
Error handling and sanitization

- Domain errors -> their declared status with a {"message"} body
- HTTPException -> same {"message"} body shape as the rest of the API
- Request validation errors -> 400 with the first problem as the message
- Unhandled exceptions -> logged with traceback, sanitized 500
"""
import logging
import traceback
from typing import Union

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from gaia.core.config import settings
from gaia.core.exceptions import GaiaBaseError

logger = logging.getLogger(__name__)

# Patterns that indicate internal/sensitive error information
SENSITIVE_PATTERNS = [
    "password",
    "secret",
    "token",
    "sqlalchemy",
    "aiosqlite",
    "sqlite",
    "traceback",
    "file \"",
    "/gaia/",
    "\\gaia\\",
]

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def is_sensitive_error(message: str) -> bool:
    """Check if error message contains sensitive information."""
    message_lower = message.lower()
    return any(pattern in message_lower for pattern in SENSITIVE_PATTERNS)


def sanitize_error_message(error: Union[str, Exception]) -> str:
    """
    Sanitize an error message for safe client exposure.

    In debug mode the full message is returned.
    """
    message = error if isinstance(error, str) else str(error)

    if settings.DEBUG:
        return message

    if is_sensitive_error(message):
        return GENERIC_ERROR_MESSAGE

    if len(message) > 200:
        return message[:200] + "..."

    return message


class ErrorSanitizationMiddleware(BaseHTTPMiddleware):
    """Catch unhandled exceptions and return a sanitized 500 response."""

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            error_id = f"{request.client.host if request.client else 'unknown'}-{id(e)}"
            logger.error(
                f"Unhandled exception [{error_id}]: {type(e).__name__}: {str(e)}\n"
                f"Path: {request.url.path}\n"
                f"Method: {request.method}\n"
                f"Traceback:\n{traceback.format_exc()}"
            )
            content = {
                "message": str(e) if settings.DEBUG else GENERIC_ERROR_MESSAGE,
                "error_id": error_id,
            }
            return JSONResponse(status_code=500, content=content)


async def gaia_error_handler(request: Request, exc: GaiaBaseError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}", extra={"error": exc.to_dict()})
        message = sanitize_error_message(exc.message)
    else:
        message = exc.message
    return JSONResponse(status_code=exc.status_code, content={"message": message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": message},
        headers=getattr(exc, "headers", None),
    )


def _describe_validation_error(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
    return f"{location}: {error.get('msg')}" if location else error.get("msg", "Invalid request")


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = _describe_validation_error(errors[0]) if errors else "Invalid request"
    return JSONResponse(
        status_code=400,
        content={
            "message": message,
            "errors": [_describe_validation_error(error) for error in errors],
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GaiaBaseError, gaia_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
