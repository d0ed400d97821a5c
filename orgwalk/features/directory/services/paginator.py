"""Cursor-following pagination over directory search results.

The directory returns an opaque, absolute `next` link with every page that has
a successor. The paginator follows those links verbatim until none is left and
hands back the items in page-arrival order. Deduplication is left to the
caller because the service may repeat an item across pages when membership
changes mid-traversal.
"""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable

from orgwalk.features.directory.models import Entity, SearchPage

logger = logging.getLogger(__name__)

FetchNext = Callable[[str], Awaitable[SearchPage]]


def dedupe_by_id(items: Iterable[Entity]) -> list[Entity]:
    """Keep the first occurrence of every identifier, preserving order."""
    seen: set[str] = set()
    unique: list[Entity] = []
    for item in items:
        if item.id in seen:
            continue
        seen.add(item.id)
        unique.append(item)
    return unique


class Paginator:
    """Follows `links.next` references until the server stops providing one."""

    def __init__(self, fetch_next: FetchNext, max_pages: int | None = None):
        """Initialize the paginator.

        Args:
            fetch_next: Coroutine fetching the page behind a `next` link
            max_pages: Optional cap on the number of pages read, first page
                       included. None reads until the cursor is exhausted.
        """
        self.fetch_next: FetchNext = fetch_next
        self.max_pages: int | None = max_pages

    async def iter_pages(self, first_page: SearchPage) -> AsyncIterator[SearchPage]:
        """Yield the first page and every page reachable from it."""
        page = first_page
        followed: set[str] = set()
        count = 1
        yield page

        while page.next_link:
            next_link = page.next_link
            if next_link in followed:
                logger.warning(
                    "Pagination cursor loops back to %s, stopping", next_link
                )
                return
            if self.max_pages is not None and count >= self.max_pages:
                logger.warning(
                    "Stopping pagination after %d pages, more results remain",
                    count,
                )
                return

            followed.add(next_link)
            logger.debug("Following pagination link %s", next_link)
            page = await self.fetch_next(next_link)
            count += 1
            yield page

    async def collect(self, first_page: SearchPage) -> list[Entity]:
        """Accumulate every page's items in arrival order, duplicates included."""
        items: list[Entity] = []
        async for page in self.iter_pages(first_page):
            items.extend(page.data)
        return items
