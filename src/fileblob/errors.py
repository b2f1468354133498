"""fileblob error types.

Every failure surfaced by the bucket is an ObjectStorageError subclass that
carries an ErrorKind, so callers can branch on existence or support without
parsing messages. Filesystem errors are wrapped, never swallowed.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Classification of storage failures for the generic storage layer."""

    UNKNOWN = "unknown"
    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    NOT_IMPLEMENTED = "not_implemented"
    CANCELLED = "cancelled"
    DEADLINE_EXCEEDED = "deadline_exceeded"


class ObjectStorageError(Exception):
    """Base exception for bucket operations.

    Attributes:
        message: Human-readable error message.
        key: Object key associated with the operation (if applicable).
        kind: Error classification.
    """

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.key = key

    def __str__(self) -> str:
        if self.key is None:
            return f"fileblob: {self.message}"
        return f"fileblob: {self.message} key={self.key!r}"


class InvalidKeyError(ObjectStorageError, ValueError):
    """Raised when a key fails validation or targets the reserved sidecar suffix.

    Raised before the payload file is touched.
    """

    kind = ErrorKind.INVALID_ARGUMENT

    def __init__(
        self,
        message: str = "Invalid key",
        *,
        key: str | None = None,
        reason: str | None = None,
    ) -> None:
        super().__init__(message, key=key)
        self.reason = reason


class InvalidArgumentError(ObjectStorageError, ValueError):
    """Raised when an option value is out of range (e.g. negative page size)."""

    kind = ErrorKind.INVALID_ARGUMENT


class ObjectNotFoundError(ObjectStorageError):
    """Raised when the payload file for a key does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        message: str = "Object not found",
        *,
        key: str | None = None,
        relpath: str | None = None,
    ) -> None:
        super().__init__(message, key=key)
        self.relpath = relpath


class StorageBackendError(ObjectStorageError):
    """Raised when the filesystem cannot complete an operation.

    Covers permission errors, disk errors, directory creation failures and
    unreadable sidecar files. The original exception is kept in ``cause``.
    """

    def __init__(
        self,
        message: str = "Storage backend error",
        *,
        key: str | None = None,
        operation: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, key=key)
        self.operation = operation
        self.cause = cause


class NotImplementedByBackendError(ObjectStorageError):
    """Raised for operations with no local-filesystem equivalent."""

    kind = ErrorKind.NOT_IMPLEMENTED


class OperationCancelledError(ObjectStorageError):
    """Raised by a writer whose context was cancelled before close."""

    kind = ErrorKind.CANCELLED

    def __init__(self, message: str = "context canceled", *, key: str | None = None) -> None:
        super().__init__(message, key=key)


class DeadlineExceededError(OperationCancelledError):
    """Raised by a writer whose context deadline passed before close."""

    kind = ErrorKind.DEADLINE_EXCEEDED

    def __init__(
        self, message: str = "context deadline exceeded", *, key: str | None = None
    ) -> None:
        super().__init__(message, key=key)


def error_kind(exc: BaseException) -> ErrorKind:
    """Return the ErrorKind of an exception, UNKNOWN for foreign exceptions."""
    if isinstance(exc, ObjectStorageError):
        return exc.kind
    return ErrorKind.UNKNOWN
