"""Protocol definition for directory repository operations."""

from typing import Protocol

from orgwalk.features.directory.models import (
    Entity,
    Schema,
    SearchPage,
    SearchParams,
    SearchQuery,
)


class DirectoryRepository(Protocol):
    """Protocol for read access to an organizational directory."""

    async def get_entity(self, key: str) -> Entity:
        """Fetch one entity by identifier or email."""
        ...

    async def get_schema(self, force_refresh: bool = False) -> Schema:
        """Return the organization's field schema."""
        ...

    async def search_entities(
        self, params: SearchParams, validate_fields: bool = False
    ) -> SearchPage:
        """Run a simple search and return its first page."""
        ...

    async def search_entities_structured(
        self, query: SearchQuery, validate_fields: bool = False
    ) -> SearchPage:
        """Run a structured search and return its first page."""
        ...

    async def follow_next(self, next_link: str) -> SearchPage:
        """Fetch the page behind a `next` link."""
        ...

    async def get_direct_subordinates(
        self, entity_id: str, page_size: int = 100
    ) -> list[Entity]:
        """Fetch every direct subordinate of an entity (one hop)."""
        ...
