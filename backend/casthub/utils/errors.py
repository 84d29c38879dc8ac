"""
Error taxonomy shared by services and routes.

Rejection is a value, not an exception: authorization and ownership checks
return one instead of raising, and routes turn it straight into the JSON error
envelope. Exceptions are reserved for failures that must propagate
(upstream calls, cascade steps).
"""

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Optional

from casthub.utils.responses import error_response, internal_error


@dataclass(frozen=True)
class Rejection:
    """A refused request, mapped 1:1 onto an error response."""

    status: int
    code: str
    message: str
    details: Optional[Any] = None

    @classmethod
    def unauthenticated(cls, message: str = "Authentication required") -> 'Rejection':
        return cls(HTTPStatus.UNAUTHORIZED, 'UNAUTHORIZED', message)

    @classmethod
    def forbidden(cls, message: str = "Access denied", details: Optional[Any] = None) -> 'Rejection':
        return cls(HTTPStatus.FORBIDDEN, 'FORBIDDEN', message, details)

    @classmethod
    def not_found(cls, resource: str = "Resource") -> 'Rejection':
        return cls(HTTPStatus.NOT_FOUND, 'NOT_FOUND', f"{resource} not found")

    @classmethod
    def conflict(cls, message: str, details: Optional[Any] = None) -> 'Rejection':
        return cls(HTTPStatus.CONFLICT, 'CONFLICT', message, details)

    @classmethod
    def validation_failed(cls, details: Any, message: str = "Validation failed") -> 'Rejection':
        return cls(HTTPStatus.BAD_REQUEST, 'BAD_REQUEST', message, details)

    @classmethod
    def internal(cls, message: str = "Internal server error", details: Optional[Any] = None) -> 'Rejection':
        return cls(HTTPStatus.INTERNAL_SERVER_ERROR, 'INTERNAL_ERROR', message, details)

    def to_response(self):
        if self.status == HTTPStatus.INTERNAL_SERVER_ERROR:
            return internal_error(self.message, self.details)
        return error_response(self.code, self.message, self.details, self.status)


class CastHubError(Exception):
    """Base class for errors that propagate out of services."""


class UpstreamError(CastHubError):
    """A call to an external provider (payments) failed."""

    def __init__(self, provider: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.status_code = status_code


class CascadeStepError(CastHubError):
    """A step of the account deletion sequence failed; later steps did not run."""

    def __init__(self, step: str, cause: Exception):
        super().__init__(f"Failed to delete {step}: {cause}")
        self.step = step
        self.cause = cause
