"""Tests for external integration connectivity helpers."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest
import pytest_mock
from openai import OpenAIError

from wardrobe.config.settings import WardrobeSettings, get_settings
from wardrobe.integrations.checks import check_storage, check_styling_service, run_all_checks
from wardrobe.storage import STORAGE_KEY, Category, Item, JsonFileKeyValueStore, serialize_items


@pytest.fixture(autouse=True)
def _setup_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STYLING_API_KEY", "test-styling")
    monkeypatch.setenv("STYLING_BASE_URL", "https://styling.test/v1")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.mark.asyncio
async def test_check_styling_service_success(mocker: pytest_mock.MockerFixture) -> None:
    client_mock = mocker.patch("wardrobe.integrations.checks.StylingClient", autospec=True)
    instance = client_mock.return_value
    instance.ping = mocker.AsyncMock(return_value=True)
    instance.close = mocker.AsyncMock(return_value=None)

    result = await check_styling_service()

    assert result.success
    instance.ping.assert_awaited_once()
    instance.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_check_styling_service_failure(mocker: pytest_mock.MockerFixture) -> None:
    client_mock = mocker.patch("wardrobe.integrations.checks.StylingClient", autospec=True)
    instance = client_mock.return_value
    instance.ping = mocker.AsyncMock(return_value=False)
    instance.close = mocker.AsyncMock(return_value=None)

    result = await check_styling_service()

    assert not result.success
    assert "non-success" in result.message.lower()


@pytest.mark.asyncio
async def test_check_without_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STYLING_API_KEY", "")
    get_settings.cache_clear()

    result = await check_styling_service()

    assert not result.success
    assert "STYLING_API_KEY" in result.message


@pytest.mark.asyncio
async def test_ping_error_is_reported_and_client_closed(mocker: pytest_mock.MockerFixture) -> None:
    client_mock = mocker.patch("wardrobe.integrations.checks.StylingClient", autospec=True)
    instance = client_mock.return_value
    instance.ping = mocker.AsyncMock(side_effect=OpenAIError("connection refused"))
    instance.close = mocker.AsyncMock(return_value=None)

    result = await check_styling_service()

    assert not result.success
    assert "connection refused" in result.message
    instance.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_storage_check_counts_indexed_items(settings: WardrobeSettings) -> None:
    kv = JsonFileKeyValueStore(Path(settings.kv_path))
    item = Item(id="a", stored_location="/tmp/a.jpg", name="Tee", category=Category.UPPER_WEAR, timestamp=1)
    await kv.set_item(STORAGE_KEY, serialize_items([item]))

    result = await check_storage(settings)

    assert result.success
    assert result.message == "1 item(s) indexed."
    assert Path(settings.documents_root).is_dir()


@pytest.mark.asyncio
async def test_storage_check_reports_corrupt_index(settings: WardrobeSettings) -> None:
    Path(settings.kv_path).write_text("{not json", encoding="utf-8")

    result = await check_storage(settings)

    assert not result.success
    assert "unreadable" in result.message


@pytest.mark.asyncio
async def test_run_all_checks_covers_service_and_storage(settings: WardrobeSettings) -> None:
    results = await run_all_checks(replace(settings, styling_api_key=""))

    assert [result.name for result in results] == ["Styling service", "Wardrobe storage"]
    assert [result.success for result in results] == [False, True]
