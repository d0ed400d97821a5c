"""Exceptions raised by the directory client and everything built on it."""


class DirectoryError(Exception):
    """Base class for directory errors."""


class CallerError(DirectoryError, ValueError):
    """Raised for invalid input, before any network call is made."""


class NotFoundError(DirectoryError):
    """Raised when the directory reports that a resource does not exist."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = 404,
        body: str = "",
    ):
        super().__init__(message)
        self.url: str | None = url
        self.status_code: int | None = status_code
        self.body: str = body


class TransportError(DirectoryError):
    """Raised when a round trip fails for good.

    Either the status was not retryable, or every attempt failed with a
    transient condition.
    """

    def __init__(
        self,
        message: str,
        method: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
        body: str = "",
        attempts: int = 1,
    ):
        super().__init__(message)
        self.method: str | None = method
        self.url: str | None = url
        self.status_code: int | None = status_code
        self.body: str = body
        self.attempts: int = attempts


class TransientTransportError(TransportError):
    """A retryable failure of a single attempt (429, 5xx, network error)."""

    def __init__(
        self,
        message: str,
        method: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
        body: str = "",
        attempts: int = 1,
        retry_after: float | None = None,
    ):
        super().__init__(
            message,
            method=method,
            url=url,
            status_code=status_code,
            body=body,
            attempts=attempts,
        )
        self.retry_after: float | None = retry_after


class TransportTimeoutError(TransportError):
    """Raised when a request does not complete within the configured timeout."""
