"""
Domain errors raised by the kernel and the verification engine.

Each error carries the HTTP status and machine-readable code it is rendered
with, so callers can tell "does not exist" apart from "not allowed to see".
"""

from typing import Optional

from fastapi import status


class DomainError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "error"
    retryable: bool = False

    def __init__(self, detail: str, field: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.field = field

    def to_dict(self) -> dict:
        content = {"detail": self.detail, "code": self.code}
        if self.field:
            content["field"] = self.field
        if self.retryable:
            content["retryable"] = True
        return content


class Unauthenticated(DomainError):
    """No resolvable actor."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"


class Forbidden(DomainError):
    """Actor resolved but lacks authority for the scope, kind or owner."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"


class ValidationError(DomainError):
    """Malformed status, missing rejection feedback, unknown kind, ..."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"


class NotFound(DomainError):
    """The record id does not exist for the given kind."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class StoreFailure(DomainError):
    """The backing store failed; nothing was applied and the call may be retried."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "store_failure"
    retryable = True
