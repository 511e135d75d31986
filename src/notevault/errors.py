"""Error taxonomy shared by services, the request gate, and the API.

Services raise these; `register_error_handlers` turns them into a JSON
body `{"error": message}` with the matching status code. Messages are
shown to clients, so they never carry secrets or hint at whether an
owned resource exists.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = structlog.get_logger()


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    default_message = "internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or missing input."""

    status_code = 400
    default_message = "invalid input"


class AuthError(AppError):
    """Missing, invalid, or expired credentials or session."""

    status_code = 401
    default_message = "unauthorized"


class ForbiddenError(AppError):
    """Authenticated, but not allowed."""

    status_code = 403
    default_message = "admin only"


class NotFoundError(AppError):
    """Absent, or not visible to the caller. The two are never told apart."""

    status_code = 404
    default_message = "not found"


class ConflictError(AppError):
    """Uniqueness violation, e.g. an email that is already registered."""

    status_code = 409
    default_message = "already exists"


class InternalError(AppError):
    """Store or crypto failure. Callers may retry; nothing here does."""

    status_code = 500
    default_message = "internal error"


class ConfigurationError(Exception):
    """Fatal misconfiguration detected at startup. Never sent to a client."""


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    return error_response(exc.status_code, exc.message)


async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Bad JSON or bad path params are plain 400s, like any other ValidationError."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = ValidationError.default_message
    return error_response(ValidationError.status_code, message)


async def store_error_handler(_: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("store.error", error_type=type(exc).__name__)
    return error_response(InternalError.status_code, InternalError.default_message)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
