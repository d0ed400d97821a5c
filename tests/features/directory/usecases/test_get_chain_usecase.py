"""Tests for GetChainUseCaseImpl."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from orgwalk.db.directory import NotFoundError
from orgwalk.features.directory.models import Entity
from orgwalk.features.directory.repositories import HttpDirectoryRepository
from orgwalk.features.directory.usecases import GetChainUseCaseImpl
from tests.utils.factories import make_entity

# Superiors resolve in reverse path order to exercise the reordering
FETCH_DELAYS = {"L1": 0.03, "L2": 0.0, "L3": 0.01}


@pytest.fixture
def people() -> dict[str, Entity]:
    return {
        "P": make_entity("P", leader_id="L3", reporting_path=["L1", "L2", "L3"]),
        "L1": make_entity("L1", direct_reports=1),
        "L2": make_entity("L2", leader_id="L1", reporting_path=["L1"]),
        "L3": make_entity("L3", leader_id="L2", reporting_path=["L1", "L2"]),
    }


@pytest.fixture
def mock_repository(people) -> AsyncMock:
    """Repository mock whose lookups complete out of order."""
    repository = AsyncMock(spec=HttpDirectoryRepository)
    completed: list[str] = []

    async def get_entity(key: str) -> Entity:
        await asyncio.sleep(FETCH_DELAYS.get(key, 0.0))
        if key not in people:
            raise NotFoundError(f"Entity '{key}' not found")
        completed.append(key)
        return people[key]

    repository.get_entity.side_effect = get_entity
    repository.completed = completed
    return repository


@pytest.fixture
def use_case(mock_repository) -> GetChainUseCaseImpl:
    return GetChainUseCaseImpl(repository=mock_repository)


class TestGetChainUseCase:
    """Tests for the concurrent reporting-chain lookup."""

    @pytest.mark.asyncio
    async def test_chain_follows_path_order_not_completion_order(
        self, use_case, mock_repository
    ):
        chain = await use_case.execute("P")

        assert [entity.id for entity in chain] == ["L1", "L2", "L3"]
        assert mock_repository.completed[1:] == ["L2", "L3", "L1"]

    @pytest.mark.asyncio
    async def test_include_self_appends_the_entity(self, use_case):
        without_self = await use_case.execute("P")
        with_self = await use_case.execute("P", include_self=True)

        assert with_self[-1].id == "P"
        assert with_self[:-1] == without_self
        assert len(with_self) == len(without_self) + 1

    @pytest.mark.asyncio
    async def test_top_of_organization_has_empty_chain(self, use_case):
        assert await use_case.execute("L1") == []
        assert [e.id for e in await use_case.execute("L1", include_self=True)] == [
            "L1"
        ]

    @pytest.mark.asyncio
    async def test_duplicate_path_entries_are_fetched_once(
        self, mock_repository, people
    ):
        people["Q"] = make_entity("Q", reporting_path=["L1", "L2", "L1"])
        use_case = GetChainUseCaseImpl(repository=mock_repository)

        chain = await use_case.execute("Q")

        assert [entity.id for entity in chain] == ["L1", "L2"]
        assert mock_repository.get_entity.await_count == 3

    @pytest.mark.asyncio
    async def test_any_failed_superior_fails_the_call(self, mock_repository, people):
        people["R"] = make_entity("R", reporting_path=["L1", "GONE"])
        use_case = GetChainUseCaseImpl(repository=mock_repository)

        with pytest.raises(NotFoundError):
            await use_case.execute("R")
