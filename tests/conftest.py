"""Pytest configuration and shared fixtures for all tests.

This module provides function-scoped fixtures for:
- Entity construction with the directory service's wire shape
- Wire-level directory clients backed by httpx.MockTransport
- A small in-memory org chart used by the traversal tests
"""

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from orgwalk.db.directory import DirectoryClient
from orgwalk.features.directory.models import Entity
from tests.utils.factories import BASE_URL, DATA_TOKEN, MEDIA_TOKEN, make_entity

Handler = Callable[[httpx.Request], Any]


@pytest.fixture
def org_chart() -> dict[str, list[Entity]]:
    """Direct reports keyed by superior id.

    ROOT manages A and B; A manages A1 and A2; B manages nobody.
    """
    return {
        "ROOT": [
            make_entity("A", leader_id="ROOT", direct_reports=2),
            make_entity("B", leader_id="ROOT", direct_reports=0),
        ],
        "A": [
            make_entity("A1", leader_id="A"),
            make_entity("A2", leader_id="A"),
        ],
    }


@pytest.fixture
def root_entity() -> Entity:
    """Root manager of the org chart fixture."""
    return make_entity("ROOT", direct_reports=2)


@pytest.fixture
def make_client() -> Callable[..., DirectoryClient]:
    """Factory for DirectoryClient instances served by a MockTransport handler."""

    def factory(handler: Handler, **kwargs: Any) -> DirectoryClient:
        options: dict[str, Any] = {
            "base_url": BASE_URL,
            "data_token": DATA_TOKEN,
            "media_token": MEDIA_TOKEN,
            "timeout_seconds": 5.0,
            "backoff_base_seconds": 0.0,
            "backoff_jitter_seconds": 0.0,
        }
        options.update(kwargs)
        return DirectoryClient(
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            **options,
        )

    return factory

