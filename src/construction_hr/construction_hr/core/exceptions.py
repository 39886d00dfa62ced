class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when credentials or tokens are missing, invalid or expired."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class ConflictError(DomainError):
    """Raised when a unique value (e.g. username) is already taken."""

    status_code = 409


class DataIntegrityError(DomainError):
    """Raised when stored data cannot support the requested computation."""

    status_code = 422


class UploadError(ValidationError):
    """Raised for rejected file uploads (type or size)."""
