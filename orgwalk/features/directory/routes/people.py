"""People and org-structure route handlers."""

from fastapi import APIRouter, Depends, Query

from orgwalk.core.settings import get_settings
from orgwalk.features.directory.dependencies import get_org_directory
from orgwalk.features.directory.dtos import MediaUrlResponse, SubtreeResult
from orgwalk.features.directory.models import MAX_PAGE_SIZE, Entity
from orgwalk.features.directory.routes.errors import directory_errors
from orgwalk.features.directory.services.media_url import (
    ImageFit,
    MediaKind,
    PhotoVariant,
)
from orgwalk.features.directory.services.org_directory import OrgDirectory

router = APIRouter(prefix="/people")


@router.get("/{key}", response_model=Entity)
async def get_person(
    key: str,
    directory: OrgDirectory = Depends(get_org_directory),
) -> Entity:
    """Retrieve one person by identifier or email."""
    with directory_errors():
        return await directory.get_entity(key)


@router.get("/{key}/direct-reports", response_model=list[Entity])
async def get_direct_reports(
    key: str,
    page_size: int | None = Query(default=None, ge=1, le=MAX_PAGE_SIZE),
    directory: OrgDirectory = Depends(get_org_directory),
) -> list[Entity]:
    """List the people reporting directly to the given identifier."""
    if page_size is None:
        page_size = get_settings().search_page_size
    with directory_errors():
        return await directory.get_direct_subordinates(key, page_size)


@router.get("/{key}/chain", response_model=list[Entity])
async def get_reporting_chain(
    key: str,
    include_self: bool = False,
    directory: OrgDirectory = Depends(get_org_directory),
) -> list[Entity]:
    """List a person's superiors from the top of the organization down."""
    with directory_errors():
        return await directory.get_chain(key, include_self=include_self)


@router.get("/{key}/subtree", response_model=SubtreeResult)
async def get_subtree(
    key: str,
    include_manager: bool = False,
    max_depth: int | None = Query(default=None, ge=0),
    max_nodes: int | None = Query(default=None, ge=1),
    page_size: int | None = Query(default=None, ge=1, le=MAX_PAGE_SIZE),
    directory: OrgDirectory = Depends(get_org_directory),
) -> SubtreeResult:
    """Walk the management subtree below a person.

    Args:
        key: Identifier or email of the root person
        include_manager: Include the root person in the node list
        max_depth: Depth cap, defaults to the configured value
        max_nodes: Node-count cap, defaults to the configured value
        page_size: Page size of each direct-report search
    """
    settings = get_settings()
    with directory_errors():
        return await directory.get_subtree(
            key,
            include_manager=include_manager,
            max_depth=settings.subtree_max_depth if max_depth is None else max_depth,
            max_nodes=settings.subtree_max_nodes if max_nodes is None else max_nodes,
            page_size=settings.search_page_size if page_size is None else page_size,
        )


@router.get("/{key}/media-url", response_model=MediaUrlResponse)
async def get_media_url(
    key: str,
    kind: MediaKind = MediaKind.PROFILE_PHOTO,
    preferred_type: PhotoVariant | None = None,
    height: int | None = Query(default=None, ge=1),
    width: int | None = Query(default=None, ge=1),
    fit: ImageFit | None = None,
    token_in_query: bool = False,
    directory: OrgDirectory = Depends(get_org_directory),
) -> MediaUrlResponse:
    """Build (without fetching) the URL of a person's photo."""
    with directory_errors():
        url = directory.make_media_url(
            key,
            kind=kind,
            preferred_type=preferred_type,
            height=height,
            width=width,
            fit=fit,
            token_in_query=token_in_query,
        )
    return MediaUrlResponse(url=url)
