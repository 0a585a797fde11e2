"""Domain exceptions raised by the service layer.

Services stay HTTP-agnostic; the handlers in ``rideback.middleware.error_handler``
translate these into JSON responses.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldIssue:
    """A single field-level validation problem."""

    field: str
    message: str


class DomainError(Exception):
    """Base class for all domain exceptions."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(DomainError):
    """Input failed shape or range constraints."""

    status_code = 400

    def __init__(self, message: str, issues: list[FieldIssue] | None = None) -> None:
        super().__init__(message)
        self.issues = issues or []

    @classmethod
    def for_field(cls, field: str, message: str) -> ValidationError:
        return cls(message, [FieldIssue(field, message)])


class AuthenticationError(DomainError):
    """Caller is not authenticated."""

    status_code = 401


class AuthorizationError(DomainError):
    """Caller lacks privilege for the requested operation."""

    status_code = 403


class NotFoundError(DomainError):
    """Entity does not exist or does not belong to the caller.

    Ownership failures are reported with this same error and message.
    """

    status_code = 404


class ConflictError(DomainError):
    """Operation conflicts with the current state of the data."""

    status_code = 409
