"""Directory client connection management.

This module provides a process-wide DirectoryClient for the HTTP surface.
Library callers construct and inject their own clients instead.
"""

from orgwalk.core.settings import get_settings

from .client import DirectoryClient

_client: DirectoryClient | None = None


async def get_directory_client() -> DirectoryClient:
    """Get the directory client singleton, connecting it on first use."""
    global _client
    if _client is None:
        settings = get_settings()
        _client = DirectoryClient(
            base_url=settings.directory_base_url,
            data_token=settings.directory_data_token,
            media_token=settings.directory_media_token,
            timeout_seconds=settings.directory_timeout_seconds,
            max_attempts=settings.directory_max_attempts,
            backoff_base_seconds=settings.directory_backoff_base_seconds,
            backoff_jitter_seconds=settings.directory_backoff_jitter_seconds,
        )
    if not _client.is_connected:
        await _client.connect()

    return _client


async def close_directory_client() -> None:
    """Close the directory client."""
    global _client
    if _client:
        await _client.disconnect()
        _client = None


async def reset_directory_client() -> None:
    """Reset the directory client for testing purposes."""
    global _client
    if _client:
        await _client.disconnect()
    _client = None
