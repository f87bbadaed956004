"""Exceptions for provider registry operations.

Every failure carries a stable ``kind`` and the HTTP status an outer
layer should answer with.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Stable error kinds surfaced to callers."""

    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN_REMOTE = "forbidden_remote"
    UNAVAILABLE = "unavailable"
    INVALID_ARGUMENT = "invalid_argument"
    INTERNAL = "internal"


class RegistryError(Exception):
    """Base exception for provider registry errors."""

    kind: ErrorKind = ErrorKind.INTERNAL
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str | int]:
        """Serialize for tool responses."""
        return {
            "error": self.message,
            "kind": self.kind.value,
            "status_code": self.status_code,
        }


class ForbiddenError(RegistryError):
    """Caller lacks administrator rights."""

    kind = ErrorKind.FORBIDDEN
    status_code = 403


class NotFoundError(RegistryError):
    """Catalog entry or remote model does not exist."""

    kind = ErrorKind.NOT_FOUND
    status_code = 404


class AlreadyExistsError(RegistryError):
    """An active entry with the same natural key and kind already exists."""

    kind = ErrorKind.ALREADY_EXISTS
    status_code = 400


class UnauthorizedError(RegistryError):
    """Remote provider rejected the credential."""

    kind = ErrorKind.UNAUTHORIZED
    status_code = 401


class RemoteForbiddenError(RegistryError):
    """Remote provider refused access with the given credential."""

    kind = ErrorKind.FORBIDDEN_REMOTE
    status_code = 403


class UnavailableError(RegistryError):
    """Remote endpoint or store was unreachable or failed in an unmapped way."""

    kind = ErrorKind.UNAVAILABLE
    status_code = 500


class InvalidArgumentError(RegistryError):
    """Malformed input or unsupported provider type."""

    kind = ErrorKind.INVALID_ARGUMENT
    status_code = 400


class InternalError(RegistryError):
    """Unexpected failure inside the registry."""

    pass
