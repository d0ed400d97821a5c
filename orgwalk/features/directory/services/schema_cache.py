"""Time-boxed cache for the organization's field schema."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence

from orgwalk.features.directory.models import FieldDescriptor, Schema

logger = logging.getLogger(__name__)

SchemaLoader = Callable[[], Awaitable[Sequence[FieldDescriptor]]]

DEFAULT_TTL_SECONDS = 10 * 60


class SchemaCache:
    """Holds one Schema snapshot and refreshes it once it is older than the TTL.

    The snapshot is replaced by a single assignment of a new frozen Schema, so
    readers always see a complete value. Readers of a fresh snapshot never
    wait; stale readers share a single refresh.
    """

    def __init__(
        self,
        loader: SchemaLoader,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            loader: Coroutine fetching the field descriptors from the service
            ttl_seconds: Maximum age of a snapshot served without refreshing
            clock: Monotonic clock in seconds, injectable for tests
        """
        self.loader: SchemaLoader = loader
        self.ttl_seconds: float = ttl_seconds
        self.clock: Callable[[], float] = clock
        self._snapshot: Schema | None = None
        self._refresh_lock: asyncio.Lock = asyncio.Lock()

    @property
    def snapshot(self) -> Schema | None:
        """The current snapshot, fresh or not."""
        return self._snapshot

    def age(self) -> float | None:
        """Seconds since the snapshot was fetched, or None when empty."""
        if self._snapshot is None:
            return None
        return self.clock() - self._snapshot.fetched_at

    def is_fresh(self) -> bool:
        age = self.age()
        return age is not None and age < self.ttl_seconds

    def invalidate(self) -> None:
        """Drop the snapshot so the next read fetches."""
        self._snapshot = None

    async def get(self, force_refresh: bool = False) -> Schema:
        """Return the cached schema, fetching it when stale or forced."""
        snapshot = self._snapshot
        if not force_refresh and snapshot is not None and self.is_fresh():
            return snapshot

        async with self._refresh_lock:
            # Another reader may have refreshed while this one waited
            if not force_refresh and self._snapshot is not None and self.is_fresh():
                return self._snapshot
            return await self._refresh()

    async def _refresh(self) -> Schema:
        started = self.clock()
        fields = await self.loader()
        schema = Schema(fields=tuple(fields), fetched_at=started)
        self._snapshot = schema
        logger.debug("Schema refreshed with %d fields", len(schema.fields))
        return schema
