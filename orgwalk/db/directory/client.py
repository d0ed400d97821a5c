"""Directory HTTP client implementation.

Performs authenticated JSON round trips against the organizational directory
API with a bounded timeout and a small retry/backoff policy for transient
failures (429, 5xx and network errors).
"""

import asyncio
import logging
import random
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any
from urllib.parse import quote

import httpx

from .errors import (
    CallerError,
    NotFoundError,
    TransientTransportError,
    TransportError,
    TransportTimeoutError,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.justsift.com/v1"


def quote_path_segment(value: str) -> str:
    """Percent-encode a value for use as a single URL path segment."""
    return quote(value, safe="")


def parse_retry_after(value: str | None) -> float | None:
    """Parse a Retry-After header into a number of seconds.

    Accepts both the delta-seconds and the HTTP-date forms. Returns None when
    the header is missing or unparseable.
    """
    if value is None or not value.strip():
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        pass
    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)
    return max(0.0, (retry_at - datetime.now(timezone.utc)).total_seconds())


class DirectoryClient:
    """Connection manager for the directory HTTP API.

    The data token authenticates every JSON request through the Authorization
    header. The media token belongs to a different trust domain: it is only
    ever embedded in media URLs and never sent as a header.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        data_token: str = "",
        media_token: str | None = None,
        timeout_seconds: float = 15.0,
        max_attempts: int = 3,
        backoff_base_seconds: float = 0.25,
        backoff_jitter_seconds: float = 0.1,
        http_client: httpx.AsyncClient | None = None,
    ):
        if not data_token:
            raise CallerError("DirectoryClient: data_token is required")

        self.base_url: str = base_url.rstrip("/")
        self.data_token: str = data_token
        self.media_token: str | None = media_token
        self.timeout_seconds: float = timeout_seconds
        self.max_attempts: int = max(1, max_attempts)
        self.backoff_base_seconds: float = backoff_base_seconds
        self.backoff_jitter_seconds: float = backoff_jitter_seconds
        self._client: httpx.AsyncClient | None = http_client
        self._owns_client: bool = http_client is None
        # Total attempts issued by this client, retries included
        self.attempts: int = 0

    @property
    def is_connected(self) -> bool:
        """Whether an open HTTP client is available."""
        return self._client is not None and not self._client.is_closed

    async def connect(self) -> None:
        """Open the underlying HTTP client."""
        if self.is_connected:
            return
        self._client = httpx.AsyncClient(
            timeout=self.timeout_seconds,
            headers={"Accept": "application/json"},
        )
        self._owns_client = True
        logger.info("Directory client ready for %s", self.base_url)

    async def disconnect(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            logger.info("Directory client closed")
        self._client = None

    async def __aenter__(self) -> "DirectoryClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.disconnect()

    def build_url(self, path_or_url: str) -> str:
        """Resolve a relative API path; absolute URLs are returned verbatim."""
        if path_or_url.startswith(("http://", "https://")):
            return path_or_url
        return f"{self.base_url}/{path_or_url.lstrip('/')}"

    def _headers(self, with_body: bool) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.data_token}",
            "Accept": "application/json",
        }
        if with_body:
            headers["Content-Type"] = "application/json"
        return headers

    async def request_json(
        self, method: str, path_or_url: str, json: Any | None = None
    ) -> Any:
        """Perform one logical request and return the decoded JSON body.

        Args:
            method: "GET" or "POST"
            path_or_url: API path relative to the base URL, or an absolute URL
                         (for example a pagination link returned by the server)
            json: Optional request body; POST always sends a JSON object

        Returns:
            The decoded JSON payload, or None for 204 / empty responses.

        Raises:
            NotFoundError: The server answered 404
            TransportTimeoutError: The call did not finish within the timeout
            TransportError: Non-retryable status, or retries exhausted
        """
        if not self.is_connected:
            await self.connect()

        method = method.upper()
        url = self.build_url(path_or_url)
        if method != "GET" and json is None:
            json = {}

        try:
            async with asyncio.timeout(self.timeout_seconds):
                return await self._send_with_retry(method, url, json)
        except TimeoutError as e:
            raise TransportTimeoutError(
                f"Directory {method} {url} timed out after {self.timeout_seconds}s",
                method=method,
                url=url,
            ) from e

    async def _send_with_retry(self, method: str, url: str, json: Any | None) -> Any:
        attempt = 0
        while True:
            attempt += 1
            try:
                return await self._send_once(method, url, json, attempt)
            except TransientTransportError as e:
                if attempt >= self.max_attempts:
                    raise TransportError(
                        f"Directory {method} {url} failed after "
                        f"{self.max_attempts} attempts: {e}",
                        method=method,
                        url=url,
                        status_code=e.status_code,
                        body=e.body,
                        attempts=self.max_attempts,
                    ) from e
                delay = self.backoff_delay(attempt, e.retry_after)
                logger.warning(
                    "Directory %s %s failed (%s), retry %d/%d in %.2fs",
                    method,
                    url,
                    e.status_code or "network error",
                    attempt,
                    self.max_attempts - 1,
                    delay,
                )
                await asyncio.sleep(delay)

    async def _send_once(
        self, method: str, url: str, json: Any | None, attempt: int
    ) -> Any:
        if self._client is None:
            raise RuntimeError("Not connected to the directory service")
        self.attempts += 1
        logger.debug("Directory %s %s (attempt %d)", method, url, attempt)

        try:
            response = await self._client.request(
                method,
                url,
                headers=self._headers(with_body=json is not None),
                json=json,
            )
        except httpx.TimeoutException as e:
            raise TransportTimeoutError(
                f"Directory {method} {url} timed out: {e!r}",
                method=method,
                url=url,
                attempts=attempt,
            ) from e
        except httpx.TransportError as e:
            raise TransientTransportError(
                f"Directory {method} {url} network error: {e!r}",
                method=method,
                url=url,
                attempts=attempt,
            ) from e

        return self._handle_response(method, url, response, attempt)

    def _handle_response(
        self, method: str, url: str, response: httpx.Response, attempt: int
    ) -> Any:
        status = response.status_code
        if status == 204:
            return None

        if status == 429 or status >= 500:
            raise TransientTransportError(
                f"{status} {response.reason_phrase}",
                method=method,
                url=url,
                status_code=status,
                body=response.text,
                attempts=attempt,
                retry_after=parse_retry_after(response.headers.get("Retry-After")),
            )

        if status == 404:
            raise NotFoundError(
                f"Directory {method} {url} not found: {response.text}",
                url=url,
                body=response.text,
            )

        if not response.is_success:
            raise TransportError(
                f"Directory {method} {url} failed: {status} "
                f"{response.reason_phrase} {response.text}",
                method=method,
                url=url,
                status_code=status,
                body=response.text,
                attempts=attempt,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"Directory {method} {url} returned a non-JSON body",
                method=method,
                url=url,
                status_code=status,
                body=response.text,
                attempts=attempt,
            ) from e

    def backoff_delay(self, attempt: int, retry_after: float | None = None) -> float:
        """Seconds to wait before the attempt following `attempt`."""
        if retry_after is not None:
            return retry_after
        return self.backoff_base_seconds * 2**attempt + random.uniform(
            0, self.backoff_jitter_seconds
        )
