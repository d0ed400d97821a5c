"""Use cases for the directory feature."""

from .get_chain_usecase import GetChainUseCaseImpl
from .get_subtree_usecase import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_NODES,
    GetSubtreeUseCaseImpl,
    NodeAccumulator,
)

__all__ = [
    "GetChainUseCaseImpl",
    "GetSubtreeUseCaseImpl",
    "NodeAccumulator",
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_MAX_NODES",
]
