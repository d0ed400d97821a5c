"""Directory HTTP API client."""

from .client import DirectoryClient, parse_retry_after, quote_path_segment
from .connection import (
    close_directory_client,
    get_directory_client,
    reset_directory_client,
)
from .errors import (
    CallerError,
    DirectoryError,
    NotFoundError,
    TransientTransportError,
    TransportError,
    TransportTimeoutError,
)

__all__ = [
    "DirectoryClient",
    "parse_retry_after",
    "quote_path_segment",
    "get_directory_client",
    "close_directory_client",
    "reset_directory_client",
    "DirectoryError",
    "CallerError",
    "NotFoundError",
    "TransportError",
    "TransientTransportError",
    "TransportTimeoutError",
]
