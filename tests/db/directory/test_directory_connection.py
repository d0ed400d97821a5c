"""Tests for the process-wide directory client helpers."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio

from orgwalk.core.settings import get_settings
from orgwalk.db.directory import (
    close_directory_client,
    get_directory_client,
    reset_directory_client,
)
from tests.utils.factories import BASE_URL, DATA_TOKEN


@pytest_asyncio.fixture
async def directory_env(monkeypatch) -> AsyncGenerator[None, None]:
    """Point the settings at a test directory and clean up the singleton."""
    monkeypatch.setenv("DIRECTORY_BASE_URL", BASE_URL)
    monkeypatch.setenv("DIRECTORY_DATA_TOKEN", DATA_TOKEN)
    get_settings.cache_clear()
    yield
    await close_directory_client()
    get_settings.cache_clear()


class TestDirectoryConnection:
    """Tests for the directory client singleton."""

    @pytest.mark.asyncio
    async def test_client_is_shared_and_connected(self, directory_env):
        first = await get_directory_client()
        second = await get_directory_client()

        assert first is second
        assert first.is_connected
        assert first.base_url == BASE_URL

    @pytest.mark.asyncio
    async def test_reset_closes_the_previous_client(self, directory_env):
        client = await get_directory_client()

        await reset_directory_client()

        assert not client.is_connected
        replacement = await get_directory_client()
        assert replacement is not client
        assert replacement.is_connected

    @pytest.mark.asyncio
    async def test_close_disconnects(self, directory_env):
        client = await get_directory_client()

        await close_directory_client()

        assert not client.is_connected
