"""Tests for HttpDirectoryRepository against a mocked directory service.

Each test wires a DirectoryClient to an httpx.MockTransport router that
answers the directory endpoints, so request shapes and response parsing are
covered end to end without a network.
"""

import json
from collections.abc import Callable

import httpx
import pytest

from orgwalk.db.directory import CallerError, NotFoundError, TransportError
from orgwalk.features.directory.models import (
    Condition,
    SearchParams,
    SearchQuery,
)
from orgwalk.features.directory.repositories import HttpDirectoryRepository
from tests.utils.factories import BASE_URL, MEDIA_TOKEN, make_entity, page_payload

FIELDS = {
    "data": [
        {"objectKey": "department", "name": "Department", "filterable": True},
        {"objectKey": "teamLeaderId", "name": "Manager", "filterable": True},
        {"objectKey": "bio", "name": "Bio", "searchable": True},
        {"name": "no key"},
    ]
}


@pytest.fixture
def requests_seen() -> list[httpx.Request]:
    return []


@pytest.fixture
def make_repository(make_client, requests_seen):
    """Factory binding a repository to a handler that records its requests."""

    def factory(
        handler: Callable[[httpx.Request], httpx.Response], **kwargs
    ) -> HttpDirectoryRepository:
        def recording(request: httpx.Request) -> httpx.Response:
            requests_seen.append(request)
            return handler(request)

        return HttpDirectoryRepository(make_client(recording), **kwargs)

    return factory


class TestGetEntity:
    """Tests for HttpDirectoryRepository.get_entity."""

    @pytest.mark.asyncio
    async def test_reads_the_data_envelope(self, make_repository, requests_seen):
        person = make_entity("p1", leader_id="m1", department="Sales")
        repository = make_repository(
            lambda request: httpx.Response(200, json={"data": person.to_wire()})
        )

        entity = await repository.get_entity("p1")

        assert entity == person
        assert entity.get("department") == "Sales"
        assert requests_seen[0].url.path == "/v1/people/p1"

    @pytest.mark.asyncio
    async def test_email_key_is_path_encoded(self, make_repository, requests_seen):
        repository = make_repository(
            lambda request: httpx.Response(200, json={"data": {"id": "p1"}})
        )

        await repository.get_entity("pat doe@example.com")

        assert requests_seen[0].url.raw_path == b"/v1/people/pat%20doe%40example.com"

    @pytest.mark.asyncio
    async def test_missing_data_raises_not_found(self, make_repository):
        repository = make_repository(
            lambda request: httpx.Response(200, json={"data": None})
        )

        with pytest.raises(NotFoundError):
            await repository.get_entity("p1")

    @pytest.mark.asyncio
    async def test_empty_key_fails_before_any_request(
        self, make_repository, requests_seen
    ):
        repository = make_repository(lambda request: httpx.Response(500))

        with pytest.raises(CallerError):
            await repository.get_entity("  ")
        assert requests_seen == []

    @pytest.mark.asyncio
    async def test_malformed_record_raises_transport_error(self, make_repository):
        repository = make_repository(
            lambda request: httpx.Response(200, json={"data": {"displayName": "x"}})
        )

        with pytest.raises(TransportError):
            await repository.get_entity("p1")


class TestGetDirectSubordinates:
    """Tests for HttpDirectoryRepository.get_direct_subordinates."""

    @pytest.mark.asyncio
    async def test_collects_every_page_without_duplicates(
        self, make_repository, requests_seen
    ):
        next_link = f"{BASE_URL}/search/people?cursor=page2"

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                return httpx.Response(
                    200,
                    json=page_payload(
                        [make_entity("a", "m1"), make_entity("b", "m1")], next_link
                    ),
                )
            return httpx.Response(
                200, json=page_payload([make_entity("b", "m1"), make_entity("c", "m1")])
            )

        repository = make_repository(handler)

        subordinates = await repository.get_direct_subordinates("m1", page_size=500)

        assert [entity.id for entity in subordinates] == ["a", "b", "c"]
        body = json.loads(requests_seen[0].content)
        assert body == {
            "page": 1,
            "pageSize": 100,
            "filter": {"field": "teamLeaderId", "comparison": "eq", "value": "m1"},
        }
        assert str(requests_seen[1].url) == next_link

    @pytest.mark.asyncio
    async def test_superior_field_is_configurable(self, make_repository, requests_seen):
        repository = make_repository(
            lambda request: httpx.Response(200, json=page_payload([])),
            superior_field="managerId",
        )

        assert await repository.get_direct_subordinates("m1") == []
        body = json.loads(requests_seen[0].content)
        assert body["filter"]["field"] == "managerId"

    @pytest.mark.asyncio
    async def test_page_failure_propagates(self, make_repository):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                return httpx.Response(
                    200,
                    json=page_payload([make_entity("a")], f"{BASE_URL}/next"),
                )
            return httpx.Response(400, text="expired cursor")

        repository = make_repository(handler)

        with pytest.raises(TransportError):
            await repository.get_direct_subordinates("m1")


class TestSearch:
    """Tests for the search operations."""

    @pytest.mark.asyncio
    async def test_simple_search_uses_query_string(
        self, make_repository, requests_seen
    ):
        repository = make_repository(
            lambda request: httpx.Response(
                200, json=page_payload([make_entity("p1")], f"{BASE_URL}/n")
            )
        )

        result = await repository.search_entities(
            SearchParams(q="pat", page_size=10, filters={"department": "Sales"})
        )

        assert [entity.id for entity in result.data] == ["p1"]
        assert result.next_link == f"{BASE_URL}/n"
        request = requests_seen[0]
        assert request.method == "GET"
        assert request.url.path == "/v1/search/people"
        assert dict(request.url.params) == {
            "q": "pat",
            "pageSize": "10",
            "department": "Sales",
        }

    @pytest.mark.asyncio
    async def test_structured_search_posts_the_body(
        self, make_repository, requests_seen
    ):
        repository = make_repository(
            lambda request: httpx.Response(200, json=page_payload([]))
        )
        query = SearchQuery(q="eng", filter=Condition(field="department", value="R&D"))

        result = await repository.search_entities_structured(query)

        assert result.data == []
        assert json.loads(requests_seen[0].content) == query.to_body()

    @pytest.mark.asyncio
    async def test_validate_fields_rejects_before_searching(
        self, make_repository, requests_seen
    ):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/fields/person"):
                return httpx.Response(200, json=FIELDS)
            return httpx.Response(200, json=page_payload([]))

        repository = make_repository(handler)
        query = SearchQuery(filter=Condition(field="bio", value="x"))

        with pytest.raises(CallerError):
            await repository.search_entities_structured(query, validate_fields=True)

        assert [r.url.path for r in requests_seen] == ["/v1/fields/person"]

    @pytest.mark.asyncio
    async def test_search_all_stops_at_max_results(self, make_repository):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                return httpx.Response(
                    200,
                    json=page_payload(
                        [make_entity("a"), make_entity("b")], f"{BASE_URL}/p2"
                    ),
                )
            return httpx.Response(
                200, json=page_payload([make_entity("b"), make_entity("c")])
            )

        repository = make_repository(handler)

        everything = await repository.search_all(SearchQuery(q="x"))
        capped = await repository.search_all(SearchQuery(q="x"), max_results=1)

        assert [entity.id for entity in everything] == ["a", "b", "c"]
        assert [entity.id for entity in capped] == ["a"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, -1])
    async def test_search_all_with_non_positive_limit_returns_nothing(
        self, make_repository, requests_seen, limit
    ):
        repository = make_repository(
            lambda request: httpx.Response(
                200, json=page_payload([make_entity("a"), make_entity("b")])
            )
        )

        result = await repository.search_all(SearchQuery(q="x"), max_results=limit)

        assert result == []
        assert requests_seen == []


class TestSchemaAndMedia:
    """Tests for schema loading and media URLs."""

    @pytest.mark.asyncio
    async def test_schema_skips_malformed_descriptors_and_is_cached(
        self, make_repository, requests_seen
    ):
        repository = make_repository(lambda request: httpx.Response(200, json=FIELDS))

        schema = await repository.get_schema()
        again = await repository.get_schema()

        assert schema.keys() == ["department", "teamLeaderId", "bio"]
        assert again is schema
        assert len(requests_seen) == 1

    def test_media_url_uses_client_base_and_token(self, make_repository):
        repository = make_repository(lambda request: httpx.Response(500))

        url = repository.make_media_url("p1", token_in_query=True)

        assert url == f"{BASE_URL}/media/people/p1/profile-photo?token={MEDIA_TOKEN}"
