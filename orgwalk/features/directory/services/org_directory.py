"""Facade exposing the directory engine to its collaborators.

Presentation and routing layers talk to this object only: record lookups,
schema access, both search shapes, one-hop subordinates, subtree walks,
reporting chains and media URL construction.
"""

from typing import Any

from orgwalk.core.settings import Settings
from orgwalk.db.directory import DirectoryClient
from orgwalk.features.directory.dtos import SubtreeResult
from orgwalk.features.directory.models import (
    Entity,
    Schema,
    SearchPage,
    SearchParams,
    SearchQuery,
)
from orgwalk.features.directory.repositories import HttpDirectoryRepository
from orgwalk.features.directory.services.media_url import (
    ImageFit,
    MediaKind,
    PhotoVariant,
)
from orgwalk.features.directory.usecases import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_NODES,
    GetChainUseCaseImpl,
    GetSubtreeUseCaseImpl,
)


class OrgDirectory:
    """Entry point bundling the repository and the traversal use cases."""

    def __init__(self, repository: HttpDirectoryRepository):
        self.repository: HttpDirectoryRepository = repository
        self.subtree_use_case: GetSubtreeUseCaseImpl = GetSubtreeUseCaseImpl(repository)
        self.chain_use_case: GetChainUseCaseImpl = GetChainUseCaseImpl(repository)

    @classmethod
    def from_settings(cls, settings: Settings) -> "OrgDirectory":
        """Build a directory engine from application settings."""
        client = DirectoryClient(
            base_url=settings.directory_base_url,
            data_token=settings.directory_data_token,
            media_token=settings.directory_media_token,
            timeout_seconds=settings.directory_timeout_seconds,
            max_attempts=settings.directory_max_attempts,
            backoff_base_seconds=settings.directory_backoff_base_seconds,
            backoff_jitter_seconds=settings.directory_backoff_jitter_seconds,
        )
        repository = HttpDirectoryRepository(
            client,
            superior_field=settings.superior_field,
            schema_ttl_seconds=settings.schema_cache_ttl_seconds,
        )
        return cls(repository)

    async def __aenter__(self) -> "OrgDirectory":
        await self.repository.client.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self.repository.client.disconnect()

    async def get_entity(self, key: str) -> Entity:
        return await self.repository.get_entity(key)

    async def get_schema(self, force_refresh: bool = False) -> Schema:
        return await self.repository.get_schema(force_refresh=force_refresh)

    async def search_entities(
        self, params: SearchParams, validate_fields: bool = False
    ) -> SearchPage:
        return await self.repository.search_entities(
            params, validate_fields=validate_fields
        )

    async def search_entities_structured(
        self, query: SearchQuery, validate_fields: bool = False
    ) -> SearchPage:
        return await self.repository.search_entities_structured(
            query, validate_fields=validate_fields
        )

    async def search_all(
        self, query: SearchQuery, max_results: int | None = None
    ) -> list[Entity]:
        return await self.repository.search_all(query, max_results=max_results)

    async def get_direct_subordinates(
        self, entity_id: str, page_size: int = 100
    ) -> list[Entity]:
        return await self.repository.get_direct_subordinates(entity_id, page_size)

    async def get_subtree(
        self,
        root_key: str,
        include_manager: bool = False,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_nodes: int = DEFAULT_MAX_NODES,
        page_size: int = 100,
    ) -> SubtreeResult:
        return await self.subtree_use_case.execute(
            root_key,
            include_manager=include_manager,
            max_depth=max_depth,
            max_nodes=max_nodes,
            page_size=page_size,
        )

    async def get_chain(self, key: str, include_self: bool = False) -> list[Entity]:
        return await self.chain_use_case.execute(key, include_self=include_self)

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
        return self.repository.make_media_url(
            key,
            kind=kind,
            preferred_type=preferred_type,
            height=height,
            width=width,
            fit=fit,
            token_in_query=token_in_query,
        )
