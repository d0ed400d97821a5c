"""Search request and response models.

Two request shapes are supported by the directory search endpoint: a simple
query-string form (exact-match filters only) and a structured body with
boolean composition of conditions.
"""

from __future__ import annotations

import enum
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .entity_model import Entity

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def clamp_page_size(value: int | None, maximum: int = MAX_PAGE_SIZE) -> int:
    """Clamp a requested page size into [1, maximum]; None means maximum."""
    if value is None:
        return maximum
    return min(max(1, int(value)), maximum)


class SortDirection(str, enum.Enum):
    """Sort order of search results."""

    ASC = "asc"
    DESC = "desc"


class Comparison(str, enum.Enum):
    """Comparators accepted in a structured filter condition."""

    EQ = "eq"
    NEQ = "neq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    IN = "in"
    NIN = "nin"
    EXISTS = "exists"
    NOT_EXISTS = "notExists"
    CONTAINS = "contains"


_VALUELESS = {Comparison.EXISTS, Comparison.NOT_EXISTS}
_SET_MEMBERSHIP = {Comparison.IN, Comparison.NIN}


class Condition(BaseModel):
    """A single `{field, comparison, value}` filter condition."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(..., min_length=1, description="Field objectKey")
    comparison: Comparison = Field(default=Comparison.EQ)
    value: Any = Field(default=None, description="Omitted for exists/notExists")

    @model_validator(mode="after")
    def check_value(self) -> Condition:
        if self.comparison in _VALUELESS and self.value is not None:
            raise ValueError(f"'{self.comparison.value}' does not take a value")
        if self.comparison in _SET_MEMBERSHIP and not isinstance(
            self.value, (list, tuple)
        ):
            raise ValueError(f"'{self.comparison.value}' requires a list value")
        return self

    def field_keys(self) -> set[str]:
        return {self.field}


class BoolGroup(BaseModel):
    """Boolean composition of conditions (and / or / not)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    and_: list[Condition | BoolGroup] | None = Field(default=None, alias="and")
    or_: list[Condition | BoolGroup] | None = Field(default=None, alias="or")
    not_: Condition | BoolGroup | None = Field(default=None, alias="not")

    @model_validator(mode="after")
    def check_not_empty(self) -> BoolGroup:
        if self.and_ is None and self.or_ is None and self.not_ is None:
            raise ValueError("A boolean group needs at least one of and/or/not")
        return self

    def field_keys(self) -> set[str]:
        """Every field key referenced anywhere in the group."""
        found: set[str] = set()
        for child in (self.and_ or []) + (self.or_ or []):
            found |= child.field_keys()
        if self.not_ is not None:
            found |= self.not_.field_keys()
        return found


BoolGroup.model_rebuild()


Filter = Condition | BoolGroup


def all_of(*conditions: Filter) -> Filter:
    """AND of the given conditions (a single one is returned unwrapped)."""
    if len(conditions) == 1:
        return conditions[0]
    return BoolGroup(and_=list(conditions))


def any_of(*conditions: Filter) -> Filter:
    """OR of the given conditions (a single one is returned unwrapped)."""
    if len(conditions) == 1:
        return conditions[0]
    return BoolGroup(or_=list(conditions))


def negate(condition: Filter) -> BoolGroup:
    return BoolGroup(not_=condition)


class SearchQuery(BaseModel):
    """Structured search body (POST form)."""

    model_config = ConfigDict(populate_by_name=True)

    q: str | None = Field(default=None, description="Free-text query")
    page: int | None = Field(default=None, ge=1)
    page_size: int | None = Field(default=None, alias="pageSize")
    sort_by: str | None = Field(default=None, alias="sortBy")
    sort_direction: SortDirection | None = Field(default=None, alias="sortDirection")
    filter: Filter | None = Field(default=None)

    @field_validator("page_size", mode="after")
    @classmethod
    def clamp(cls, v: int | None) -> int | None:
        return None if v is None else clamp_page_size(v)

    def to_body(self) -> dict[str, Any]:
        """Serialize into the wire body, omitting unset members."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SearchParams(BaseModel):
    """Simple search parameters (GET form) with exact-match filters."""

    model_config = ConfigDict(populate_by_name=True)

    q: str | None = Field(default=None)
    page: int | None = Field(default=None, ge=1)
    page_size: int | None = Field(default=None, alias="pageSize")
    sort_by: str | None = Field(default=None, alias="sortBy")
    sort_direction: SortDirection | None = Field(default=None, alias="sortDirection")
    or_query: bool | None = Field(default=None, alias="orQuery")
    filters: dict[str, str | int | float | bool] = Field(
        default_factory=dict, description="Exact-match filters, e.g. department"
    )

    @field_validator("page_size", mode="after")
    @classmethod
    def clamp(cls, v: int | None) -> int | None:
        return None if v is None else clamp_page_size(v)

    def to_query_params(self) -> dict[str, str]:
        """Flatten into query-string parameters."""
        params: dict[str, str] = {}
        for key, value in self.filters.items():
            params[key] = _query_value(value)
        named = self.model_dump(
            mode="json", by_alias=True, exclude_none=True, exclude={"filters"}
        )
        for key, value in named.items():
            params[key] = _query_value(value)
        return params


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class PageLinks(BaseModel):
    """Pagination links of a search page; `next` is followed verbatim."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    self_: str | None = Field(default=None, alias="self")
    next: str | None = None
    prev: str | None = None
    first: str | None = None
    last: str | None = None


class PageMeta(BaseModel):
    """Counts reported alongside a search page."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    page: int | None = None
    pages: int | None = None
    page_size: int | None = Field(default=None, alias="pageSize")
    length: int | None = None
    total_length: int | None = Field(default=None, alias="totalLength")


class SearchPage(BaseModel):
    """One page of search results."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    data: list[Entity] = Field(default_factory=list)
    links: PageLinks | None = None
    meta: PageMeta | None = None

    @field_validator("data", mode="before")
    @classmethod
    def drop_unidentified(cls, v: Any) -> Any:
        """Items without an identifier cannot be deduplicated or traversed."""
        if v is None:
            return []
        if not isinstance(v, list):
            logger.debug("Ignoring malformed search data of type %s", type(v))
            return []
        kept = [item for item in v if not isinstance(item, dict) or _has_id(item)]
        if len(kept) != len(v):
            logger.debug("Dropped %d search items without id", len(v) - len(kept))
        return kept

    @property
    def next_link(self) -> str | None:
        return self.links.next if self.links else None


def _has_id(item: dict[str, Any]) -> bool:
    value = item.get("id")
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and bool(value.strip())
