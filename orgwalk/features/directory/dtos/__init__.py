"""Directory DTOs."""

from .org_dto import MediaUrlResponse, SubtreeEdge, SubtreeResult, TraversalStats

__all__ = ["MediaUrlResponse", "SubtreeEdge", "SubtreeResult", "TraversalStats"]
