"""Shared fixtures for wardrobe tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from wardrobe.config.settings import WardrobeSettings
from wardrobe.storage import ItemStore, JsonFileKeyValueStore


@pytest.fixture
def settings(tmp_path: Path) -> WardrobeSettings:
    return WardrobeSettings(
        bot_token="test-token",
        styling_api_key="test-key",
        styling_base_url="https://styling.test/v1",
        documents_root=str(tmp_path / "documents"),
        kv_path=str(tmp_path / "kv.json"),
        incoming_root=str(tmp_path / "incoming"),
    )


@pytest.fixture
def kv(tmp_path: Path) -> JsonFileKeyValueStore:
    return JsonFileKeyValueStore(tmp_path / "kv.json")


@pytest.fixture
def store(kv: JsonFileKeyValueStore, tmp_path: Path) -> ItemStore:
    return ItemStore(kv, tmp_path / "documents")


@pytest.fixture
def make_image(tmp_path: Path):
    picked = tmp_path / "picked"
    picked.mkdir()

    def _make(name: str = "photo.jpg", data: bytes = b"\xff\xd8fake-jpeg") -> Path:
        path = picked / name
        path.write_bytes(data)
        return path

    return _make
