class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data or settings are invalid."""


class NotFoundError(DomainError):
    """Raised when an entity or archive entry does not exist."""


class CollaboratorUnavailableError(DomainError):
    """Raised when the clinic REST backend cannot be reached or answers with an error."""
