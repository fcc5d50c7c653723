"""Exceptions raised by services and client components."""


class HanziTypeError(Exception):
    """Base class for all application errors."""
    status_code: int = 500


class ValidationError(HanziTypeError, ValueError):
    """Request is missing data or carries invalid data."""
    status_code = 400


class ConflictError(ValidationError):
    """Record already exists."""
    status_code = 409


class UnauthorizedError(HanziTypeError):
    """Operation requires an authenticated user."""
    status_code = 401


class AuthError(HanziTypeError):
    """Credentials were rejected."""
    status_code = 400


class CollaboratorError(HanziTypeError):
    """Backend call failed for a transient reason (database, network)."""
    status_code = 500


class EmptyWordListError(ValidationError):
    """A game cannot start without saved words."""

    def __init__(self, message: str = "Please add some words first!"):
        super().__init__(message)
