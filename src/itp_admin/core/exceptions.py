class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class StorageError(DomainError):
    """Raised when a bucket operation (upload, download, remove) fails."""


class DuplicateKeyError(ValidationError):
    """Raised by repositories when an insert or update collides on a unique key."""

    def __init__(self, message: str = "A record with this value already exists"):
        super().__init__(message)
