"""Use case for walking the management subtree below an entity.

The walk is breadth-first over a FIFO worklist of (identifier, depth) pairs.
Every expansion costs one paginated search, so leaves that report no direct
subordinates are never expanded. Two safety caps bound the walk: `max_depth`
stops expansion below a level, and `max_nodes` stops the whole walk as soon as
the node set reaches the cap, returning a partial result flagged as truncated.
"""

from __future__ import annotations

import logging
from collections import deque

from orgwalk.db.directory import NotFoundError, TransportError
from orgwalk.features.directory.dtos import SubtreeEdge, SubtreeResult, TraversalStats
from orgwalk.features.directory.models import Entity, clamp_page_size
from orgwalk.features.directory.repositories.protocols import DirectoryRepository

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 6
DEFAULT_MAX_NODES = 1000


class NodeAccumulator:
    """Insertion-ordered, capacity-bounded set of entities keyed by id."""

    def __init__(self, capacity: int):
        self.capacity: int = max(1, capacity)
        self._nodes: dict[str, Entity] = {}

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def full(self) -> bool:
        return len(self._nodes) >= self.capacity

    def add(self, entity: Entity) -> bool:
        """Insert an entity; returns False if its id was already present."""
        if entity.id in self._nodes:
            return False
        self._nodes[entity.id] = entity
        return True

    def values(self) -> list[Entity]:
        return list(self._nodes.values())


class GetSubtreeUseCaseImpl:
    """Implementation of the bounded breadth-first subtree walk."""

    def __init__(self, repository: DirectoryRepository):
        """Initialize the use case with dependencies.

        Args:
            repository: Repository used to resolve the root and fetch direct
                        subordinates
        """
        self.repository: DirectoryRepository = repository

    async def execute(
        self,
        root_key: str,
        include_manager: bool = False,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_nodes: int = DEFAULT_MAX_NODES,
        page_size: int = 100,
    ) -> SubtreeResult:
        """Collect the descendants of an entity and the edges between them.

        Args:
            root_key: Identifier or email of the root entity. When the root
                      cannot be resolved the key itself is used as identifier.
            include_manager: Seed the node set with the root entity
            max_depth: Nodes at this depth are kept but not expanded
            max_nodes: Node-count cap; reaching it stops the walk immediately
            page_size: Page size of each direct-subordinate search

        Returns:
            SubtreeResult with nodes in discovery order, the observed edges and
            traversal statistics. `stats.truncated` is set when the node cap
            stopped the walk.

        Raises:
            CallerError: If the root key is empty
            TransportError: If any expansion fails after retries
        """
        manager = await self._resolve_root(root_key)
        root_id = manager.id if manager is not None else root_key.strip()
        page_size = clamp_page_size(page_size)

        nodes = NodeAccumulator(max_nodes)
        edges: list[SubtreeEdge] = []
        stats = TraversalStats()

        if include_manager and manager is not None:
            nodes.add(manager)
            if nodes.full:
                stats.truncated = True
                return self._result(manager, nodes, edges, stats)

        worklist: deque[tuple[str, int]] = deque([(root_id, 0)])
        stats.enqueued = 1
        expanded_ids: set[str] = set()

        while worklist:
            entity_id, depth = worklist.popleft()
            if depth >= max_depth:
                stats.depth_reached = max(stats.depth_reached, depth)
                continue
            if entity_id in expanded_ids:
                continue
            expanded_ids.add(entity_id)

            stats.api_calls += 1
            subordinates = await self.repository.get_direct_subordinates(
                entity_id, page_size
            )
            stats.expanded += 1
            stats.depth_reached = max(stats.depth_reached, depth + 1)

            for index, subordinate in enumerate(subordinates):
                edges.append(
                    SubtreeEdge(
                        leader_id=subordinate.team_leader_id, person_id=subordinate.id
                    )
                )
                if not nodes.add(subordinate):
                    continue
                if nodes.full and _work_remains(
                    nodes, subordinates[index + 1 :], subordinate, worklist
                ):
                    stats.truncated = True
                    logger.info(
                        "Subtree of %s truncated at %d nodes", root_id, len(nodes)
                    )
                    return self._result(manager, nodes, edges, stats)
                if subordinate.has_direct_reports:
                    worklist.append((subordinate.id, depth + 1))
                    stats.enqueued += 1

        logger.info(
            "Subtree of %s: %d nodes, %d edges, %d calls, depth %d",
            root_id,
            len(nodes),
            len(edges),
            stats.api_calls,
            stats.depth_reached,
        )
        return self._result(manager, nodes, edges, stats)

    async def _resolve_root(self, root_key: str) -> Entity | None:
        """Best-effort root lookup; CallerError for an empty key propagates."""
        try:
            return await self.repository.get_entity(root_key)
        except (NotFoundError, TransportError) as e:
            logger.warning(
                "Could not resolve subtree root %r, using it as identifier: %s",
                root_key,
                e,
            )
            return None

    @staticmethod
    def _result(
        manager: Entity | None,
        nodes: NodeAccumulator,
        edges: list[SubtreeEdge],
        stats: TraversalStats,
    ) -> SubtreeResult:
        return SubtreeResult(
            manager=manager, nodes=nodes.values(), edges=edges, stats=stats
        )


def _work_remains(
    nodes: NodeAccumulator,
    rest_of_batch: list[Entity],
    last_added: Entity,
    worklist: deque[tuple[str, int]],
) -> bool:
    """Whether stopping at the cap leaves anything unvisited."""
    if worklist or last_added.has_direct_reports:
        return True
    return any(entity.id not in nodes for entity in rest_of_batch)
