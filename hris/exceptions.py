import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    detail: str | None = None
    status_code: int


class AppError(Exception):
    """Base application exception."""

    kind = "InternalError"

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        *,
        kind: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        if kind is not None:
            self.kind = kind
        self.extra = extra or {}
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed input or a violated business rule."""

    kind = "ValidationError"

    def __init__(self, message: str, *, kind: str | None = None, extra: dict[str, Any] | None = None) -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST, kind=kind, extra=extra)


class AuthenticationError(AppError):
    """Missing, invalid or expired credentials."""

    kind = "AuthenticationError"

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, status.HTTP_401_UNAUTHORIZED)


class AuthorizationError(AppError):
    """Caller is authenticated but not allowed to act on the resource."""

    kind = "Forbidden"

    def __init__(self, message: str = "Insufficient permissions") -> None:
        super().__init__(message, status.HTTP_403_FORBIDDEN)


class NotFoundError(AppError):
    """Referenced entity does not exist."""

    kind = "NotFound"

    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class DependencyError(AppError):
    """The external data store failed."""

    kind = "DependencyError"

    def __init__(self, message: str = "Data store unavailable") -> None:
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


class InvalidReferenceError(ValidationError):
    kind = "InvalidReference"


class InvalidDateRangeError(ValidationError):
    kind = "InvalidDateRange"


class EmptyRequestError(ValidationError):
    kind = "EmptyRequest"


class OverlappingRequestError(ValidationError):
    kind = "OverlappingRequest"


class InvalidStateError(ValidationError):
    kind = "InvalidState"


class InvalidInputError(ValidationError):
    kind = "InvalidInput"


class InsufficientBalanceError(ValidationError):
    """Annual Leave request exceeds the stored balance."""

    kind = "InsufficientBalance"

    def __init__(self, available: float, requested: int) -> None:
        super().__init__(
            f"Insufficient leave balance. Available: {available} days, Requested: {requested} days",
            extra={"available": available, "requested": requested},
        )


def _render(exc: AppError) -> JSONResponse:
    content = ErrorResponse(
        error=exc.kind,
        detail=exc.message,
        status_code=exc.status_code,
    ).model_dump()
    content.update(exc.extra)
    return JSONResponse(status_code=exc.status_code, content=content)


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s rejected (%s): %s", request.method, request.url.path, exc.kind, exc.message)
    return _render(exc)


async def _database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("%s %s: data store error", request.method, request.url.path)
    return _render(DependencyError())


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("%s %s: invalid payload", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(
            error="ValidationError",
            detail=str(exc.errors()),
            status_code=status.HTTP_400_BAD_REQUEST,
        ).model_dump(),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppError, _app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _database_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
