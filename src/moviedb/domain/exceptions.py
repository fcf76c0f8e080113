"""Error taxonomy for the movie database core."""

from __future__ import annotations


class MovieDbError(Exception):
    """Base class for all movie database errors."""

    retryable: bool = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RemoteError(MovieDbError):
    """Base class for errors raised while talking to the metadata API."""


class TransportError(RemoteError):
    """Network unreachable, timeout or TLS failure."""

    retryable = True


class DeserializationError(RemoteError):
    """Response body did not match the expected shape."""


class NotFoundError(RemoteError):
    """The requested entity does not exist (HTTP 404)."""


class HttpStatusError(RemoteError):
    """Any other non-2xx response."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.retryable = status_code >= 500


class StorageError(MovieDbError):
    """Local cache or settings I/O failed."""
