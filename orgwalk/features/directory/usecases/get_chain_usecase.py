"""Use case for resolving the chain of superiors above an entity."""

import asyncio
import logging

from orgwalk.features.directory.models import Entity
from orgwalk.features.directory.repositories.protocols import DirectoryRepository

logger = logging.getLogger(__name__)


class GetChainUseCaseImpl:
    """Implementation of the reporting-chain lookup.

    The chain is read from the entity's reporting path, so no traversal is
    needed: every superior is fetched concurrently and the results are put
    back into path order.
    """

    def __init__(self, repository: DirectoryRepository):
        self.repository: DirectoryRepository = repository

    async def execute(self, key: str, include_self: bool = False) -> list[Entity]:
        """Return the superiors of an entity, root first.

        Args:
            key: Identifier or email of the entity
            include_self: Append the entity itself after its immediate superior

        Raises:
            CallerError: If the key is empty
            NotFoundError: If the entity or any superior does not exist
            TransportError: If any fetch fails after retries
        """
        entity = await self.repository.get_entity(key)
        path = list(dict.fromkeys(entity.reporting_path))

        fetched = await asyncio.gather(
            *(self.repository.get_entity(superior_id) for superior_id in path)
        )
        by_id = dict(zip(path, fetched, strict=True))
        chain = [by_id[superior_id] for superior_id in path]

        logger.debug("Chain of %s has %d superiors", entity.id, len(chain))
        if include_self:
            chain.append(entity)
        return chain
