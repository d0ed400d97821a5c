"""FastAPI dependencies for the directory feature."""

from orgwalk.core.settings import get_settings
from orgwalk.db.directory import get_directory_client
from orgwalk.features.directory.repositories import HttpDirectoryRepository
from orgwalk.features.directory.services.org_directory import OrgDirectory

# Shared so the schema cache survives across requests
_org_directory: OrgDirectory | None = None


async def get_org_directory() -> OrgDirectory:
    """Get the directory engine bound to the shared client."""
    global _org_directory
    client = await get_directory_client()
    if _org_directory is None or _org_directory.repository.client is not client:
        settings = get_settings()
        repository = HttpDirectoryRepository(
            client,
            superior_field=settings.superior_field,
            schema_ttl_seconds=settings.schema_cache_ttl_seconds,
        )
        _org_directory = OrgDirectory(repository)

    return _org_directory


def reset_org_directory() -> None:
    """Forget the shared engine (testing and shutdown)."""
    global _org_directory
    _org_directory = None
