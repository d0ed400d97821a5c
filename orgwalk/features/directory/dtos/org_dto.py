"""Organization traversal DTOs.

This module defines the result objects returned by the subtree walker and the
small response wrappers used by the HTTP surface.
"""

from pydantic import BaseModel, Field

from orgwalk.features.directory.models import Entity


class SubtreeEdge(BaseModel):
    """A (superior, subordinate) pair observed during a traversal."""

    leader_id: str | None = Field(
        ..., description="Superior identifier declared by the subordinate"
    )
    person_id: str = Field(..., description="Subordinate identifier")


class TraversalStats(BaseModel):
    """Counters describing how a subtree walk went."""

    expanded: int = Field(
        default=0, description="Nodes whose subordinates were fetched"
    )
    enqueued: int = Field(default=0, description="Worklist insertions, root included")
    api_calls: int = Field(default=0, description="Direct-subordinate lookups issued")
    depth_reached: int = Field(default=0, description="Deepest level touched")
    truncated: bool = Field(
        default=False, description="Whether the node cap stopped the walk"
    )


class SubtreeResult(BaseModel):
    """Bounded management subtree below a root entity."""

    manager: Entity | None = Field(
        default=None, description="Root entity, when it could be resolved"
    )
    nodes: list[Entity] = Field(
        default_factory=list, description="Unique entities in discovery order"
    )
    edges: list[SubtreeEdge] = Field(default_factory=list)
    stats: TraversalStats = Field(default_factory=TraversalStats)

    @property
    def truncated(self) -> bool:
        return self.stats.truncated

    def node_ids(self) -> list[str]:
        return [node.id for node in self.nodes]


class MediaUrlResponse(BaseModel):
    """Response wrapper for a constructed media URL."""

    url: str = Field(..., description="Media asset URL, not fetched")
