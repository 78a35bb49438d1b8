class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced scan, employee or record does not exist."""


class ConcurrencyConflict(DomainError):
    """Raised when the store could not serialize a write on an employee-day row.

    Callers retry a bounded number of times before giving up.
    """


class InvariantViolation(DomainError):
    """Stored summary fields disagree with the stored times."""
