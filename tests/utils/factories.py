"""Builders for directory payloads used across the test suite."""

from typing import Any

from orgwalk.features.directory.models import Entity

BASE_URL = "https://directory.test/v1"
DATA_TOKEN = "data-token"
MEDIA_TOKEN = "media-token"


def make_entity(
    entity_id: str,
    leader_id: str | None = None,
    direct_reports: int = 0,
    reporting_path: list[str] | None = None,
    **extra: Any,
) -> Entity:
    """Build an Entity from wire-shaped keys."""
    payload: dict[str, Any] = {
        "id": entity_id,
        "displayName": f"Person {entity_id}",
        "primaryEmail": f"{entity_id.lower()}@example.com",
        "teamLeaderId": leader_id,
        "directReportCount": direct_reports,
        "reportingPath": reporting_path or [],
    }
    payload.update(extra)
    return Entity.model_validate(payload)


def page_payload(
    entities: list[Entity], next_link: str | None = None
) -> dict[str, Any]:
    """Wrap entities into a search page body as the directory returns it."""
    return {
        "data": [entity.to_wire() for entity in entities],
        "links": {"next": next_link},
        "meta": {"length": len(entities)},
    }
