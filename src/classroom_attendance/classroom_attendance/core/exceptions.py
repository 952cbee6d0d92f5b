class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced lecture, student, teacher, subject or record does not exist."""


class InvalidOperationError(DomainError):
    """Raised when an operation breaks a business rule (e.g. marking a future lecture)."""


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""


class StorageError(DomainError):
    """Raised when the storage layer keeps failing after retries."""
