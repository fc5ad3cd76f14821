"""Item storage: models, key-value backend and the item store."""

from .kv import JsonFileKeyValueStore, KeyValueStore
from .models import (
    WEARABLE_CATEGORIES,
    Category,
    Item,
    ItemCandidate,
    deserialize_items,
    serialize_items,
)
from .repository import STORAGE_KEY, ItemIngestionError, ItemStore

__all__ = [
    "Category",
    "Item",
    "ItemCandidate",
    "ItemIngestionError",
    "ItemStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "STORAGE_KEY",
    "WEARABLE_CATEGORIES",
    "deserialize_items",
    "serialize_items",
]
