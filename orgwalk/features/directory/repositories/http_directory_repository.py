"""HTTP implementation of the DirectoryRepository protocol.

This module resolves single records, runs searches in both request shapes and
collects one hop of direct subordinates across every result page.
"""

import logging
from typing import Any
from urllib.parse import urlencode

from pydantic import ValidationError
from typing_extensions import override

from orgwalk.db.directory import (
    CallerError,
    DirectoryClient,
    NotFoundError,
    TransportError,
    quote_path_segment,
)
from orgwalk.features.directory.models import (
    Comparison,
    Condition,
    Entity,
    FieldDescriptor,
    Schema,
    SearchPage,
    SearchParams,
    SearchQuery,
    clamp_page_size,
)
from orgwalk.features.directory.repositories.protocols import DirectoryRepository
from orgwalk.features.directory.services.media_url import (
    ImageFit,
    MediaKind,
    PhotoVariant,
    build_media_url,
)
from orgwalk.features.directory.services.paginator import Paginator, dedupe_by_id
from orgwalk.features.directory.services.schema_cache import (
    DEFAULT_TTL_SECONDS,
    SchemaCache,
)
from orgwalk.features.directory.services.search_filters import (
    validate_search_params,
    validate_search_query,
)

logger = logging.getLogger(__name__)

PEOPLE_PATH = "/people"
FIELDS_PATH = "/fields/person"
SEARCH_PATH = "/search/people"


def _require_key(value: str | None, message: str) -> str:
    if value is None or not value.strip():
        raise CallerError(message)
    return value.strip()


class HttpDirectoryRepository(DirectoryRepository):
    """Repository reading people and field metadata over the directory API."""

    def __init__(
        self,
        client: DirectoryClient,
        schema_cache: SchemaCache | None = None,
        superior_field: str = "teamLeaderId",
        schema_ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_pages: int | None = None,
    ):
        """Initialize the repository.

        Args:
            client: Transport used for every round trip
            schema_cache: Optional shared schema cache. When omitted the
                          repository owns one backed by its own client.
            superior_field: Field holding the superior identifier, used to
                            select direct subordinates
            schema_ttl_seconds: TTL of the owned schema cache
            max_pages: Optional cap on pages read per paginated search
        """
        self.client: DirectoryClient = client
        self.superior_field: str = superior_field
        self.schema_cache: SchemaCache = schema_cache or SchemaCache(
            self._load_fields, ttl_seconds=schema_ttl_seconds
        )
        self.paginator: Paginator = Paginator(self.follow_next, max_pages=max_pages)

    @override
    async def get_entity(self, key: str) -> Entity:
        """Fetch one entity by identifier or email.

        Raises:
            CallerError: If the key is empty
            NotFoundError: If the directory has no such entity
            TransportError: If the round trip fails after retries
        """
        key = _require_key(key, "get_entity: key is required")
        path = f"{PEOPLE_PATH}/{quote_path_segment(key)}"
        payload = await self.client.request_json("GET", path)

        data = payload.get("data") if isinstance(payload, dict) else None
        if not data:
            raise NotFoundError(
                f"Entity '{key}' not found", url=self.client.build_url(path)
            )
        return self._parse(Entity, data, path)

    @override
    async def get_schema(self, force_refresh: bool = False) -> Schema:
        return await self.schema_cache.get(force_refresh=force_refresh)

    async def _load_fields(self) -> list[FieldDescriptor]:
        payload = await self.client.request_json("GET", FIELDS_PATH)
        raw = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(raw, list):
            return []

        fields: list[FieldDescriptor] = []
        for item in raw:
            try:
                fields.append(FieldDescriptor.model_validate(item))
            except ValidationError:
                logger.debug("Skipping malformed field descriptor: %r", item)
        return fields

    @override
    async def search_entities(
        self, params: SearchParams, validate_fields: bool = False
    ) -> SearchPage:
        """Run a simple search (exact-match filters) and return its first page."""
        if validate_fields:
            validate_search_params(await self.get_schema(), params)

        query = params.to_query_params()
        path = f"{SEARCH_PATH}?{urlencode(query)}" if query else SEARCH_PATH
        payload = await self.client.request_json("GET", path)
        return self._parse_page(payload, path)

    @override
    async def search_entities_structured(
        self, query: SearchQuery, validate_fields: bool = False
    ) -> SearchPage:
        """Run a structured search (boolean filters) and return its first page.

        Args:
            query: Structured search body
            validate_fields: Check filter and sort fields against the cached
                             schema before calling the service
        """
        if validate_fields:
            validate_search_query(await self.get_schema(), query)

        payload = await self.client.request_json(
            "POST", SEARCH_PATH, json=query.to_body()
        )
        return self._parse_page(payload, SEARCH_PATH)

    @override
    async def follow_next(self, next_link: str) -> SearchPage:
        next_link = _require_key(next_link, "follow_next: next_link is required")
        payload = await self.client.request_json("GET", next_link)
        return self._parse_page(payload, next_link)

    @override
    async def get_direct_subordinates(
        self, entity_id: str, page_size: int = 100
    ) -> list[Entity]:
        """Fetch every direct subordinate of an entity across all pages.

        Duplicates returned by the service on different pages are dropped;
        the first occurrence wins.
        """
        entity_id = _require_key(
            entity_id, "get_direct_subordinates: entity_id is required"
        )
        query = SearchQuery(
            page=1,
            page_size=clamp_page_size(page_size),
            filter=Condition(
                field=self.superior_field, comparison=Comparison.EQ, value=entity_id
            ),
        )
        first_page = await self.search_entities_structured(query)
        subordinates = dedupe_by_id(await self.paginator.collect(first_page))
        logger.debug("%s has %d direct subordinates", entity_id, len(subordinates))
        return subordinates

    async def search_all(
        self,
        query: SearchQuery,
        max_results: int | None = None,
        validate_fields: bool = False,
    ) -> list[Entity]:
        """Run a structured search and gather every page, deduplicated.

        Args:
            query: Structured search body; its page size is clamped
            max_results: Stop once this many unique entities are gathered
            validate_fields: Check fields against the schema first
        """
        if max_results is not None and max_results <= 0:
            return []
        if query.page_size is None:
            query = query.model_copy(update={"page_size": clamp_page_size(None)})
        first_page = await self.search_entities_structured(
            query, validate_fields=validate_fields
        )

        seen: set[str] = set()
        results: list[Entity] = []
        async for page in self.paginator.iter_pages(first_page):
            for entity in page.data:
                if entity.id in seen:
                    continue
                seen.add(entity.id)
                results.append(entity)
                if max_results is not None and len(results) >= max_results:
                    return results
        return results

    def make_media_url(
        self,
        key: str,
        kind: MediaKind | str = MediaKind.PROFILE_PHOTO,
        preferred_type: PhotoVariant | str | None = None,
        height: int | None = None,
        width: int | None = None,
        fit: ImageFit | str | None = None,
        token_in_query: bool = False,
    ) -> str:
        """Build a media URL with this client's base URL and media token."""
        return build_media_url(
            self.client.base_url,
            key,
            kind=kind,
            preferred_type=preferred_type,
            height=height,
            width=width,
            fit=fit,
            media_token=self.client.media_token,
            token_in_query=token_in_query,
        )

    def _parse_page(self, payload: Any, path: str) -> SearchPage:
        if payload is None:
            return SearchPage()
        return self._parse(SearchPage, payload, path)

    def _parse(self, model: type[Any], payload: Any, path: str) -> Any:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise TransportError(
                f"Malformed {model.__name__} payload from {path}: {e}",
                url=self.client.build_url(path),
                body=repr(payload)[:500],
            ) from e
