class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class DuplicateError(ValidationError):
    """Raised when a unique student identifier is already taken."""


class NotFoundError(DomainError):
    """Raised when an id does not reference an existing record."""


class StorageError(DomainError):
    """Raised when the storage backend rejects a write."""
