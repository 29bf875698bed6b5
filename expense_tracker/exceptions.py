"""Error taxonomy and the handlers that turn errors into JSON envelopes."""
import re
from typing import Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import ValidationError
from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from expense_tracker.config import settings


class AppError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors


class ValidationFailed(AppError):
    """Field-level validation failure."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, errors: Dict[str, str], message: str = "Validation failed"):
        super().__init__(message, errors)


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT


class DuplicateError(ConflictError):
    """A unique name or email is already taken."""

    def __init__(self, field: str, message: str):
        super().__init__(message, {field: message})
        self.field = field


# =========================
# Helpers
# =========================
def error_body(message: str, errors=None) -> dict:
    body = {"status": False, "message": message}
    if errors is not None:
        body["errors"] = errors
    return body


def field_errors(errors) -> Dict[str, str]:
    """Collapse pydantic error entries into ``{field: message}``."""
    result: Dict[str, str] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "request"
        message = error.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        result.setdefault(field, message)
    return result


_UNIQUE_PATTERNS = (
    re.compile(r"UNIQUE constraint failed: \w+\.(\w+)"),  # sqlite
    re.compile(r"Key \((\w+)\)="),  # postgres
)


def duplicate_field(exc: IntegrityError) -> str:
    text = str(exc.orig) if exc.orig is not None else str(exc)
    for pattern in _UNIQUE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return "record"


# =========================
# Handlers
# =========================
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.errors))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = field_errors(exc.errors())
    logger.debug(f"Request validation failed on {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body("Validation failed", errors),
    )


async def pydantic_validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body("Validation failed", field_errors(exc.errors())),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail
    if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
        message = "Route not found"
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(error_body(message)),
        headers=getattr(exc, "headers", None),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError):
    field = duplicate_field(exc)
    logger.warning(f"Integrity error on {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(f"{field} already exists", {field: f"{field} already exists"}),
    )


async def data_error_handler(request: Request, exc: DataError):
    logger.warning(f"Data error on {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Invalid data format"),
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Database error on {request.url.path}")
    errors = {"database": str(exc)} if settings.is_development else None
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Database error occurred", errors),
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    body = error_body("Internal server error")
    if settings.is_development:
        body["errors"] = {"server": str(exc)}
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, pydantic_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(DataError, data_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
