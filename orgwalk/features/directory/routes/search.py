"""Search and field metadata route handlers."""

from fastapi import APIRouter, Depends, Query, Request

from orgwalk.features.directory.dependencies import get_org_directory
from orgwalk.features.directory.models import (
    Schema,
    SearchPage,
    SearchParams,
    SearchQuery,
    SortDirection,
)
from orgwalk.features.directory.routes.errors import directory_errors
from orgwalk.features.directory.services.org_directory import OrgDirectory

router = APIRouter()

# Query parameters of GET /search that are not attribute filters
_SEARCH_OPTIONS = frozenset(
    {
        "q",
        "page",
        "page_size",
        "sort_by",
        "sort_direction",
        "or_query",
        "validate_fields",
    }
)


@router.get("/fields", response_model=Schema)
async def get_fields(
    force_refresh: bool = False,
    directory: OrgDirectory = Depends(get_org_directory),
) -> Schema:
    """Return the organization's field schema (cached)."""
    with directory_errors():
        return await directory.get_schema(force_refresh=force_refresh)


@router.get("/search", response_model=SearchPage)
async def search_people(
    request: Request,
    q: str | None = None,
    page: int | None = Query(default=None, ge=1),
    page_size: int | None = None,
    sort_by: str | None = None,
    sort_direction: SortDirection | None = None,
    or_query: bool | None = None,
    validate_fields: bool = False,
    directory: OrgDirectory = Depends(get_org_directory),
) -> SearchPage:
    """Run a simple search and return the first page.

    Any query parameter besides the search options is sent as an exact-match
    attribute filter, e.g. `?q=pat&department=Sales`.
    """
    filters = {
        key: value
        for key, value in request.query_params.items()
        if key not in _SEARCH_OPTIONS
    }
    params = SearchParams(
        q=q,
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        sort_direction=sort_direction,
        or_query=or_query,
        filters=filters,
    )
    with directory_errors():
        return await directory.search_entities(params, validate_fields=validate_fields)


@router.post("/search", response_model=SearchPage)
async def search_people_structured(
    query: SearchQuery,
    validate_fields: bool = False,
    directory: OrgDirectory = Depends(get_org_directory),
) -> SearchPage:
    """Run a structured search (boolean filters) and return the first page."""
    with directory_errors():
        return await directory.search_entities_structured(
            query, validate_fields=validate_fields
        )
