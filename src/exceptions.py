"""Application exception hierarchy.

API exceptions carry an HTTP status and a stable error code and are turned
into JSON error responses by the handlers in ``src.middleware.error_handler``.
``UpstreamError`` never reaches a handler: services catch it and degrade to a
fallback value.
"""

from typing import Any, Optional


class BaseAPIException(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code: int = 500
    error_code: str = "INTERNAL_SERVER_ERROR"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        details: Optional[dict[str, Any]] = None,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code


class UnauthorizedError(BaseAPIException):
    """Bearer token missing or not matching the configured secret."""

    status_code = 401
    error_code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message=message)


class MissingFieldsError(BaseAPIException):
    """Required lead fields absent from an ingestion request."""

    status_code = 400
    error_code = "MISSING_FIELDS"

    def __init__(self, fields: list[str]):
        self.fields = list(fields)
        super().__init__(
            message=f"Missing required fields: {', '.join(self.fields)}",
            details={"missing_fields": self.fields},
        )


class ResourceNotFoundError(BaseAPIException):
    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: str):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(
            message=f"{resource} not found",
            details={"resource": resource, "id": resource_id},
        )


class DatabaseError(BaseAPIException):
    status_code = 500
    error_code = "DATABASE_ERROR"

    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message=message)


class UpstreamError(Exception):
    """A third-party API was unreachable, answered non-2xx, or sent a bad payload."""

    def __init__(self, step: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"{step}: {message}")
        self.step = step
        self.message = message
        self.status_code = status_code
