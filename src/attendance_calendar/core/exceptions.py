class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a calendar or one of its days does not exist."""


class ConflictError(DomainError):
    """Raised when creating a calendar for a year-month that already exists."""
