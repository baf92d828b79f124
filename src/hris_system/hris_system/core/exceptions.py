from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid.

    ``field`` names the offending field; ``context`` locates it (a CSV row
    number, an ISO date) so the caller can point the user at the bad input.
    """

    def __init__(self, message: str, *, field: Optional[str] = None, context: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.context = context


class NotFoundError(DomainError):
    """Raised when a referenced employee, record, run or payslip does not exist."""


class BusinessRuleViolation(DomainError):
    """Raised when a request is well formed but breaks a business rule."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class PartialBatchFailure(DomainError):
    """Raised when every item of a bulk operation failed.

    Mixed outcomes are not exceptional; they come back as a ``BatchResult``.
    """

    def __init__(self, result):
        super().__init__(f"All {result.failed} item(s) failed")
        self.result = result
