"""Tests for the item store and its persistence."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest
import pytest_mock

from wardrobe.storage import (
    STORAGE_KEY,
    Category,
    Item,
    ItemCandidate,
    ItemIngestionError,
    ItemStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    deserialize_items,
    serialize_items,
)


def _candidate(source: Path | str, name: str = "Nike Dunk", category: Category = Category.SHOE) -> ItemCandidate:
    return ItemCandidate(source_location=str(source), name=name, category=category)


@pytest.mark.asyncio
async def test_initialize_without_data_starts_empty(store: ItemStore) -> None:
    assert store.is_loading

    items = await store.initialize()

    assert items == []
    assert store.list_items() == []
    assert not store.is_loading


@pytest.mark.asyncio
async def test_add_item_stores_single_item(store: ItemStore, make_image) -> None:
    await store.initialize()

    item = await store.add_item(_candidate(make_image()))

    items = store.list_items()
    assert items == [item]
    assert item.name == "Nike Dunk"
    assert item.category is Category.SHOE
    assert item.id
    assert item.timestamp > 0


@pytest.mark.asyncio
async def test_add_item_copies_image_into_store_directory(store: ItemStore, make_image) -> None:
    source = make_image("dunk.png", b"png-bytes")

    item = await store.add_item(_candidate(source))
    source.unlink()

    stored = Path(item.stored_location)
    assert stored.parent == store.directory.resolve()
    assert stored.name == f"{item.id}.png"
    assert stored.read_bytes() == b"png-bytes"


@pytest.mark.asyncio
async def test_add_item_defaults_extension_and_accepts_file_uri(store: ItemStore, make_image) -> None:
    source = make_image("no_extension")

    item = await store.add_item(_candidate(source.as_uri()))

    assert Path(item.stored_location).suffix == ".jpg"


@pytest.mark.asyncio
async def test_items_are_unique_and_newest_first(store: ItemStore, make_image) -> None:
    await store.initialize()
    added = []
    for index in range(5):
        added.append(await store.add_item(_candidate(make_image(f"{index}.jpg"), name=f"item {index}")))

    items = store.list_items()
    assert [item.id for item in items] == [item.id for item in reversed(added)]
    assert len({item.id for item in items}) == 5
    timestamps = [item.timestamp for item in items]
    assert timestamps == sorted(timestamps, reverse=True)


@pytest.mark.asyncio
async def test_items_survive_restart(kv: JsonFileKeyValueStore, tmp_path: Path, make_image) -> None:
    first = ItemStore(kv, tmp_path / "documents")
    await first.initialize()
    await first.add_item(_candidate(make_image("a.jpg"), name="Shirt", category=Category.UPPER_WEAR))
    await first.add_item(_candidate(make_image("b.jpg"), name="Jeans", category=Category.BOTTOM_WEAR))

    second = ItemStore(JsonFileKeyValueStore(kv.path), tmp_path / "documents")
    items = await second.initialize()

    assert items == first.list_items()
    assert [item.name for item in items] == ["Jeans", "Shirt"]


@pytest.mark.asyncio
async def test_persisted_layout(store: ItemStore, kv: JsonFileKeyValueStore, make_image) -> None:
    item = await store.add_item(_candidate(make_image()))

    raw = await kv.get_item(STORAGE_KEY)
    payload = json.loads(raw)

    assert payload == [
        {
            "id": item.id,
            "uri": item.stored_location,
            "name": "Nike Dunk",
            "category": "Shoe",
            "timestamp": item.timestamp,
        },
    ]


@pytest.mark.asyncio
async def test_failed_copy_leaves_items_unchanged(
    store: ItemStore,
    make_image,
    mocker: pytest_mock.MockerFixture,
) -> None:
    existing = await store.add_item(_candidate(make_image("first.jpg")))
    mocker.patch("wardrobe.storage.repository.shutil.copyfile", side_effect=OSError("disk full"))

    with pytest.raises(ItemIngestionError, match="disk full"):
        await store.add_item(_candidate(make_image("second.jpg"), name="Boots"))

    assert store.list_items() == [existing]


@pytest.mark.asyncio
async def test_missing_source_is_reported(store: ItemStore, tmp_path: Path) -> None:
    with pytest.raises(ItemIngestionError):
        await store.add_item(_candidate(tmp_path / "gone.jpg"))

    assert store.list_items() == []


@pytest.mark.asyncio
async def test_failed_persist_leaves_items_unchanged(
    store: ItemStore,
    kv: JsonFileKeyValueStore,
    make_image,
    mocker: pytest_mock.MockerFixture,
) -> None:
    mocker.patch.object(kv, "set_item", side_effect=OSError("read-only"))

    with pytest.raises(ItemIngestionError):
        await store.add_item(_candidate(make_image()))

    assert store.list_items() == []


@pytest.mark.asyncio
async def test_corrupt_state_loads_empty(kv: JsonFileKeyValueStore, tmp_path: Path) -> None:
    await kv.set_item(STORAGE_KEY, "{not json")
    store = ItemStore(kv, tmp_path / "documents")

    assert await store.initialize() == []
    assert not store.is_loading


@pytest.mark.asyncio
async def test_corrupt_kv_file_loads_empty_and_accepts_new_items(tmp_path: Path, make_image) -> None:
    kv_path = tmp_path / "kv.json"
    kv_path.write_text("garbage", encoding="utf-8")
    store = ItemStore(JsonFileKeyValueStore(kv_path), tmp_path / "documents")

    assert await store.initialize() == []
    item = await store.add_item(_candidate(make_image()))

    assert store.list_items() == [item]


@pytest.mark.asyncio
async def test_initialize_loads_only_once(
    store: ItemStore,
    kv: JsonFileKeyValueStore,
    make_image,
) -> None:
    await store.initialize()
    item = await store.add_item(_candidate(make_image()))
    await kv.set_item(STORAGE_KEY, "[]")

    assert await store.initialize() == [item]


@pytest.mark.asyncio
async def test_concurrent_adds_are_all_persisted(kv: JsonFileKeyValueStore, tmp_path: Path, make_image) -> None:
    store = ItemStore(kv, tmp_path / "documents")
    await store.initialize()

    await asyncio.gather(
        *(store.add_item(_candidate(make_image(f"{index}.jpg"), name=f"item {index}")) for index in range(4)),
    )

    reloaded = ItemStore(JsonFileKeyValueStore(kv.path), tmp_path / "documents")
    items = await reloaded.initialize()
    assert len(items) == 4
    assert items == store.list_items()


@pytest.mark.asyncio
async def test_timestamps_never_go_backwards(kv: JsonFileKeyValueStore, tmp_path: Path, make_image) -> None:
    ticks = iter([2_000, 1_000])
    store = ItemStore(kv, tmp_path / "documents", clock=lambda: next(ticks))

    first = await store.add_item(_candidate(make_image("a.jpg")))
    second = await store.add_item(_candidate(make_image("b.jpg")))

    assert second.timestamp >= first.timestamp


def test_serialization_round_trip() -> None:
    items = [
        Item(id="b", stored_location="/data/b.png", name="Loafers", category=Category.SHOE, timestamp=20),
        Item(id="a", stored_location="/data/a.jpg", name="Scarf", category=Category.ACCESSORY, timestamp=10),
    ]

    assert deserialize_items(serialize_items(items)) == items


@pytest.mark.parametrize(
    "raw",
    [
        '{"id": "a"}',
        '[{"id": "a", "uri": "/x", "name": "n", "category": "Hat", "timestamp": 1}]',
        '[{"id": "a", "uri": "/x", "name": "n", "category": "Shoe"}]',
        '[{"id": "a", "uri": "/x", "name": "n", "category": "Shoe", "timestamp": "1"}]',
    ],
)
def test_deserialize_rejects_malformed_records(raw: str) -> None:
    with pytest.raises(ValueError):
        deserialize_items(raw)


class _MemoryKeyValueStore(KeyValueStore):
    def __init__(self) -> None:
        self.entries: dict[str, str] = {}

    async def get_item(self, key: str) -> str | None:
        return self.entries.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self.entries[key] = value


def test_key_value_store_requires_both_operations() -> None:
    class ReadOnly(KeyValueStore):
        async def get_item(self, key: str) -> str | None:
            return None

    with pytest.raises(TypeError):
        ReadOnly()


@pytest.mark.asyncio
async def test_store_runs_on_any_key_value_backend(tmp_path: Path, make_image) -> None:
    backend = _MemoryKeyValueStore()
    store = ItemStore(backend, tmp_path / "documents")
    await store.initialize()

    item = await store.add_item(ItemCandidate(str(make_image()), "Tee", Category.UPPER_WEAR))

    assert json.loads(backend.entries[STORAGE_KEY])[0]["id"] == item.id
