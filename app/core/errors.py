"""Typed failures raised by the services. The kind, not the message, is the contract."""

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    INVALID_CREDENTIAL = "invalid_credential"
    FORBIDDEN = "forbidden"
    UNAUTHENTICATED = "unauthenticated"


class ServiceError(Exception):
    """Base class for every failure a service surfaces to its caller."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidInputError(ServiceError):
    """Malformed or missing data; the caller must fix the request."""

    kind = ErrorKind.INVALID_INPUT


class ConflictError(ServiceError):
    """Uniqueness or version conflict (e.g. duplicate username)."""

    kind = ErrorKind.CONFLICT


class NotFoundError(ServiceError):
    kind = ErrorKind.NOT_FOUND


class InvalidCredentialError(ServiceError):
    """Authentication or current-password check failed.

    Login raises this for unknown usernames too, so account existence is not observable.
    """

    kind = ErrorKind.INVALID_CREDENTIAL


class ForbiddenError(ServiceError):
    kind = ErrorKind.FORBIDDEN


class UnauthenticatedError(ServiceError):
    """No valid token: missing, malformed, expired or revoked."""

    kind = ErrorKind.UNAUTHENTICATED
