"""Wardrobe item model and its JSON representation."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping


class Category(str, Enum):
    """Item categories as they are persisted."""

    UPPER_WEAR = "Upper Wear"
    BOTTOM_WEAR = "Bottom Wear"
    SHOE = "Shoe"
    ACCESSORY = "Accessory"

    @property
    def is_wearable(self) -> bool:
        return self in WEARABLE_CATEGORIES

    @property
    def short_label(self) -> str:
        """Label used on item chips, e.g. ``Upper`` for ``Upper Wear``."""

        return self.value.replace(" Wear", "")


# Display order of an outfit.
WEARABLE_CATEGORIES: tuple[Category, ...] = (
    Category.UPPER_WEAR,
    Category.BOTTOM_WEAR,
    Category.SHOE,
)


@dataclass(slots=True, frozen=True)
class Item:
    """A catalogued wardrobe item."""

    id: str
    stored_location: str
    name: str
    category: Category
    timestamp: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "uri": self.stored_location,
            "name": self.name,
            "category": self.category.value,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Item":
        try:
            timestamp = payload["timestamp"]
            if isinstance(timestamp, bool) or not isinstance(timestamp, int):
                raise ValueError(f"Invalid timestamp: {timestamp!r}")
            return cls(
                id=str(payload["id"]),
                stored_location=str(payload["uri"]),
                name=str(payload["name"]),
                category=Category(payload["category"]),
                timestamp=timestamp,
            )
        except KeyError as exc:
            raise ValueError(f"Item record is missing field {exc.args[0]!r}") from exc


@dataclass(slots=True, frozen=True)
class ItemCandidate:
    """Caller-validated input for :meth:`ItemStore.add_item`."""

    source_location: str
    name: str
    category: Category


def serialize_items(items: Iterable[Item]) -> str:
    """Serialize items to the JSON array stored in the key-value store."""

    return json.dumps([item.to_dict() for item in items], ensure_ascii=False)


def deserialize_items(raw: str) -> list[Item]:
    """Parse a persisted item list, raising ``ValueError`` on malformed data."""

    payload = json.loads(raw)
    if not isinstance(payload, list):
        raise ValueError("Persisted item list must be a JSON array.")
    items = []
    for record in payload:
        if not isinstance(record, Mapping):
            raise ValueError(f"Invalid item record: {record!r}")
        items.append(Item.from_dict(record))
    return items
