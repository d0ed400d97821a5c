"""Directory models."""

from .entity_model import Entity
from .field_model import FieldDescriptor, Schema
from .search_model import (
    MAX_PAGE_SIZE,
    BoolGroup,
    Comparison,
    Condition,
    Filter,
    PageLinks,
    PageMeta,
    SearchPage,
    SearchParams,
    SearchQuery,
    SortDirection,
    all_of,
    any_of,
    clamp_page_size,
    negate,
)

__all__ = [
    "Entity",
    "FieldDescriptor",
    "Schema",
    "MAX_PAGE_SIZE",
    "BoolGroup",
    "Comparison",
    "Condition",
    "Filter",
    "PageLinks",
    "PageMeta",
    "SearchPage",
    "SearchParams",
    "SearchQuery",
    "SortDirection",
    "all_of",
    "any_of",
    "clamp_page_size",
    "negate",
]
