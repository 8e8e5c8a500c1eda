class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a task, submission or user does not resolve in the workspace."""


class InvalidStateError(DomainError):
    """Raised when an operation conflicts with the current state of an entity."""


class AuthenticationError(DomainError):
    """Raised when the request carries no usable identity."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
