# core/errors.py
# Tagged error kinds shared by every service. Routers never build HTTP errors
# themselves; main.py maps ErrorKind -> status code in one exception handler.

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "VALIDATION"
    CONFLICT = "CONFLICT"
    AUTH = "AUTH"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    STORAGE = "STORAGE"


class AppError(Exception):
    """Base application error: a kind the caller can branch on plus a human-readable message."""

    kind: ErrorKind = ErrorKind.STORAGE

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message, "kind": self.kind.value}


class ValidationError(AppError):
    """Malformed input; the caller can fix it and try again."""
    kind = ErrorKind.VALIDATION


class ConflictError(AppError):
    """Uniqueness violation (username, email)."""
    kind = ErrorKind.CONFLICT


class AuthError(AppError):
    """Bad credentials, or an unknown / revoked session token."""
    kind = ErrorKind.AUTH


class ForbiddenError(AppError):
    """Valid session, insufficient role."""
    kind = ErrorKind.FORBIDDEN


class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND


class StorageError(AppError):
    """Persistence failure or an unrecoverable internal state; not retried."""
    kind = ErrorKind.STORAGE
