"""Key-value persistence used for the item index."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Async string key-value interface."""

    @abstractmethod
    async def get_item(self, key: str) -> str | None:
        """Return the stored string, or ``None`` when the key is absent."""

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Persist ``value`` under ``key``, replacing any previous value."""


class JsonFileKeyValueStore(KeyValueStore):
    """Keeps all entries in a single JSON object on disk."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    async def get_item(self, key: str) -> str | None:
        async with self._lock:
            entries = await asyncio.to_thread(self._read_entries)
        value = entries.get(key)
        return value if isinstance(value, str) else None

    async def set_item(self, key: str, value: str) -> None:
        async with self._lock:
            try:
                entries = await asyncio.to_thread(self._read_entries)
            except ValueError:
                logger.warning("Key-value file %s is corrupt; rewriting it.", self._path)
                entries = {}
            entries[key] = value
            await asyncio.to_thread(self._write_entries, entries)

    def _read_entries(self) -> dict[str, object]:
        if not self._path.exists():
            return {}
        payload = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            raise ValueError(f"Key-value file {self._path} does not hold a JSON object.")
        return payload

    def _write_entries(self, entries: dict[str, object]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(f"{self._path.name}.tmp")
        tmp_path.write_text(json.dumps(entries, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp_path, self._path)
