"""Schema-aware checks for search requests."""

from orgwalk.db.directory import CallerError
from orgwalk.features.directory.models import Schema, SearchParams, SearchQuery


def validate_search_query(schema: Schema, query: SearchQuery) -> None:
    """Reject a structured query that uses fields the schema cannot filter on.

    Raises:
        CallerError: If a filter references an unknown or non-filterable field,
                     or the sort key is not declared by the schema
    """
    if query.filter is not None:
        _check_filterable(schema, query.filter.field_keys())
    if query.sort_by is not None and schema.get(query.sort_by) is None:
        raise CallerError(f"Unknown sort field '{query.sort_by}'")


def validate_search_params(schema: Schema, params: SearchParams) -> None:
    """Same checks as validate_search_query, for the simple GET form."""
    _check_filterable(schema, set(params.filters))
    if params.sort_by is not None and schema.get(params.sort_by) is None:
        raise CallerError(f"Unknown sort field '{params.sort_by}'")


def _check_filterable(schema: Schema, keys: set[str]) -> None:
    unknown = sorted(k for k in keys if schema.get(k) is None)
    if unknown:
        raise CallerError(f"Unknown filter field(s): {', '.join(unknown)}")
    blocked = sorted(keys - schema.filterable_keys())
    if blocked:
        raise CallerError(f"Field(s) not filterable: {', '.join(blocked)}")
