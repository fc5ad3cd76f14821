"""Durable, append-only catalogue of wardrobe items."""

from __future__ import annotations

import asyncio
import logging
import shutil
import time
import uuid
from pathlib import Path
from typing import Callable
from urllib.parse import unquote, urlparse

from wardrobe.storage.kv import KeyValueStore
from wardrobe.storage.models import Item, ItemCandidate, deserialize_items, serialize_items

STORAGE_KEY = "@wardrobe_items"
DEFAULT_DIRECTORY = "wardrobe"
DEFAULT_EXTENSION = ".jpg"

logger = logging.getLogger(__name__)


class ItemIngestionError(RuntimeError):
    """Raised when an item could not be copied or persisted."""


def _epoch_millis() -> int:
    return int(time.time() * 1000)


def resolve_source_path(location: str) -> Path:
    """Turn a picker location (plain path or ``file://`` URI) into a path."""

    if location.startswith("file://"):
        return Path(unquote(urlparse(location).path))
    return Path(location)


class ItemStore:
    """Copies item images into app storage and keeps the item index persisted.

    The in-memory list is newest-first and only replaced after the serialized
    list has been written, so a failed ingestion never exposes a partial item.
    Mutations are serialized through a per-store lock.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        documents_root: Path,
        *,
        directory_name: str = DEFAULT_DIRECTORY,
        storage_key: str = STORAGE_KEY,
        clock: Callable[[], int] = _epoch_millis,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
    ) -> None:
        self._kv = kv
        self._directory = documents_root / directory_name
        self._storage_key = storage_key
        self._clock = clock
        self._id_factory = id_factory
        self._items: list[Item] = []
        self._lock = asyncio.Lock()
        self._is_loading = True
        self._initialized = False

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def is_loading(self) -> bool:
        """``True`` until :meth:`initialize` has completed."""

        return self._is_loading

    def list_items(self) -> list[Item]:
        """Return the items, newest first."""

        return list(self._items)

    async def initialize(self) -> list[Item]:
        """Load the persisted list; missing or corrupt data yields an empty list."""

        async with self._lock:
            if self._initialized:
                return list(self._items)
            self._is_loading = True
            try:
                raw = await self._kv.get_item(self._storage_key)
                self._items = deserialize_items(raw) if raw else []
            except (OSError, ValueError) as exc:
                logger.warning("Could not load stored items, starting empty: %s", exc)
                self._items = []
            finally:
                self._is_loading = False
                self._initialized = True
            logger.info("Loaded %d wardrobe items.", len(self._items))
            return list(self._items)

    async def add_item(self, candidate: ItemCandidate) -> Item:
        """Copy the candidate image into storage and persist the new item."""

        async with self._lock:
            try:
                await asyncio.to_thread(self._directory.mkdir, parents=True, exist_ok=True)

                source = resolve_source_path(candidate.source_location)
                item_id = self._new_id()
                destination = self._directory / f"{item_id}{source.suffix or DEFAULT_EXTENSION}"
                await asyncio.to_thread(shutil.copyfile, source, destination)

                item = Item(
                    id=item_id,
                    stored_location=str(destination.resolve()),
                    name=candidate.name,
                    category=candidate.category,
                    timestamp=self._next_timestamp(),
                )
                updated = [item, *self._items]
                await self._kv.set_item(self._storage_key, serialize_items(updated))
            except Exception as exc:
                logger.error("Failed to save item %r", candidate.name, exc_info=True)
                raise ItemIngestionError(f"Could not save '{candidate.name}': {exc}") from exc

            self._items = updated
            logger.info("Stored wardrobe item %s (%s).", item.id, item.category.value)
            return item

    def _new_id(self) -> str:
        known = {item.id for item in self._items}
        item_id = self._id_factory()
        while item_id in known:
            item_id = self._id_factory()
        return item_id

    def _next_timestamp(self) -> int:
        now = self._clock()
        if self._items and self._items[0].timestamp > now:
            return self._items[0].timestamp
        return now
