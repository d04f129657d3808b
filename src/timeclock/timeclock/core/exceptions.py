class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when a request violates domain rules (e.g. illegal transition)."""


class NotFoundError(DomainError):
    """Raised when a time entry does not exist."""


class ConcurrentUpdateError(DomainError):
    """Raised when a time entry changed between load and save."""


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""


class AlreadyClockedInError(ValidationError):
    """Raised when a user already has an open time entry."""
