# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized error taxonomy for the API. Core services raise these typed
# errors; the handlers below turn them into JSON responses.
#
#   NotFoundError      404  target id/resource absent
#   UnauthorizedError  403  caller lacks ownership or role for the action
#   ForbiddenError     403  a role-tier rule blocks this actor/target pair
#   ConflictError      409  uniqueness violation (username, email)
#   InvalidStateError  409  entity is not in a state that allows the action
#   InvalidInputError  400  malformed request payload
#
# Anything else collapses to a generic INTERNAL_ERROR at the boundary.
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


class ModelHubException(ApplicationError):
    """
    An error with a fixed HTTP status, raised by core services.

    The response body is {"detail", "code"} plus "suggestion" and
    "details" when they are set.
    """

    def __init__(
        self,
        message: str,
        code: str = "MODELHUB_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"detail": self.message, "code": self.code}
        optional = {"suggestion": self.suggestion, "details": self.details}
        body.update({key: value for key, value in optional.items() if value})
        return body


# =============================================================================
# Error Kinds
# =============================================================================

class NotFoundError(ModelHubException):
    """Raised when a target id does not resolve."""

    def __init__(self, resource: str, resource_id: Any):
        super().__init__(
            message=f"{resource.capitalize()} not found: {resource_id}",
            code=f"{resource.upper()}_NOT_FOUND",
            status_code=404,
            suggestion=f"Check that the {resource} id is correct",
            details={f"{resource}_id": str(resource_id)},
        )


class UnauthorizedError(ModelHubException):
    """Raised when the caller lacks ownership or the role for an action."""

    def __init__(self, message: str, suggestion: str | None = None):
        super().__init__(
            message=message,
            code="UNAUTHORIZED",
            status_code=403,
            suggestion=suggestion,
        )


class ForbiddenError(ModelHubException):
    """Raised when a role-tier rule blocks this actor/target pair."""

    def __init__(self, message: str, suggestion: str | None = None):
        super().__init__(
            message=message,
            code="FORBIDDEN",
            status_code=403,
            suggestion=suggestion,
        )


class ConflictError(ModelHubException):
    """Raised on a uniqueness violation."""

    def __init__(self, field: str, value: str):
        super().__init__(
            message=f"{field.capitalize()} already taken: {value}",
            code=f"{field.upper()}_CONFLICT",
            status_code=409,
            suggestion=f"Choose a different {field}",
            details={"field": field},
        )


class InvalidStateError(ModelHubException):
    """Raised when an entity is not in a state that allows the action."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="INVALID_STATE",
            status_code=409,
            details=details,
        )


class InvalidInputError(ModelHubException):
    """Raised when a request payload is malformed."""

    def __init__(
        self,
        message: str,
        code: str = "INVALID_INPUT",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            code=code,
            status_code=400,
            suggestion=suggestion,
            details=details,
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidFileTypeError(InvalidInputError):
    """The upload's extension is not in the allowed list for its kind."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            message=f"File type not accepted: {filename or '(no name)'}",
            code="INVALID_FILE_TYPE",
            suggestion=f"Accepted extensions: {', '.join(allowed)}",
            details={"filename": filename, "allowed_types": allowed},
        )


class FileTooLargeError(InvalidInputError):
    def __init__(self, size_mb: float, max_mb: float):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb:g}MB)",
            code="FILE_TOO_LARGE",
            details={"size_mb": round(size_mb, 2), "max_mb": max_mb},
        )


class StorageUploadError(ModelHubException):
    """The storage bucket refused the upload; the cause is only logged."""

    def __init__(self, error: str):
        super().__init__(
            message="Upload could not be stored",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Retry the upload",
        )
        self.error = error


# =============================================================================
# Exception Handlers
# =============================================================================

async def modelhub_exception_handler(request: Request, exc: ModelHubException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    422 with one entry per invalid field.

    Example:
        {
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": [{"field": "body.email", "message": "value is not a valid email address"}]
        }
    """
    errors = [
        {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content={"detail": "Validation error", "code": "VALIDATION_ERROR", "errors": errors},
    )
