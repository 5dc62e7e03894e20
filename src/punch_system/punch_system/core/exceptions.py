class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a worker or department cannot be resolved."""


class ConflictError(DomainError):
    """Raised when a concurrent write changed the history we read."""


class TransientStoreError(DomainError):
    """Raised by stores on I/O failures that are worth retrying."""


class InternalError(DomainError):
    """Raised when retries are exhausted on transient store failures."""
