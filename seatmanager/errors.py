"""Exceptions raised by seatmanager components.

Each class carries the HTTP status the API layer answers with.
"""


class SeatManagerError(Exception):
    """Base exception for all seatmanager errors."""
    status_code = 500


class ConfigurationError(SeatManagerError):
    """Required configuration (webhook secret, token key) is missing or invalid.

    Raised at startup, never per request.
    """
    pass


class VerificationError(SeatManagerError):
    """Webhook signature or session token could not be verified."""
    status_code = 400


class DecodeError(SeatManagerError):
    """Webhook payload is malformed or lacks required fields."""
    status_code = 400


class ValidationError(SeatManagerError):
    """User data failed a business rule (e.g. empty email or name)."""
    status_code = 400


class NotFoundError(SeatManagerError):
    """Referenced user does not exist (or is soft-deleted)."""
    status_code = 404


class ConflictError(SeatManagerError):
    """A uniqueness constraint was violated."""
    status_code = 409


class DuplicateExternalIDError(ConflictError):
    """An active user already has this external user ID."""
    pass


class DuplicateEmailError(ConflictError):
    """An active user already has this email address."""
    pass
