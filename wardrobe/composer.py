"""Outfit selection state machine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Mapping

from wardrobe.storage import WEARABLE_CATEGORIES, Category, Item, ItemStore


class OutfitCompositionError(RuntimeError):
    """Raised when an outfit is requested without any selected item."""


class SelectionState(str, Enum):
    """Selection mode of a composer session."""

    IDLE = "idle"
    SELECTING = "selecting"


@dataclass(slots=True, frozen=True)
class Outfit:
    """Items of a composed outfit, ordered Upper, Bottom, Shoe."""

    items: tuple[Item, ...]

    def __iter__(self) -> Iterator[Item]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @property
    def categories(self) -> list[Category]:
        return [item.category for item in self.items]


class OutfitComposer:
    """Turns taps on items into an outfit with at most one item per category."""

    def __init__(self, store: ItemStore) -> None:
        self._store = store
        self._state = SelectionState.IDLE
        self._selection: dict[Category, Item | None] = self._empty_selection()

    @staticmethod
    def _empty_selection() -> dict[Category, Item | None]:
        return {category: None for category in WEARABLE_CATEGORIES}

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def selection(self) -> Mapping[Category, Item | None]:
        return dict(self._selection)

    @property
    def can_compose(self) -> bool:
        return any(item is not None for item in self._selection.values())

    def is_selected(self, item: Item) -> bool:
        current = self._selection.get(item.category)
        return current is not None and current.id == item.id

    def begin(self) -> None:
        """Enter selection mode with an empty selection."""

        self._state = SelectionState.SELECTING
        self._selection = self._empty_selection()

    def toggle_select(self, item: Item) -> bool:
        """Select or unselect ``item``; returns whether the selection changed."""

        if self._state is not SelectionState.SELECTING:
            return False
        if not item.category.is_wearable:
            return False

        if self.is_selected(item):
            self._selection[item.category] = None
        else:
            self._selection[item.category] = item
        return True

    def toggle_select_by_id(self, item_id: str) -> bool:
        for item in self._store.list_items():
            if item.id == item_id:
                return self.toggle_select(item)
        return False

    def compose(self) -> Outfit:
        """Build the outfit from the current selection and leave selection mode."""

        if not self.can_compose:
            raise OutfitCompositionError("Select at least one top, bottom or shoe first.")

        outfit = Outfit(
            items=tuple(
                self._selection[category]
                for category in WEARABLE_CATEGORIES
                if self._selection[category] is not None
            ),
        )
        self.cancel()
        return outfit

    def cancel(self) -> None:
        self._state = SelectionState.IDLE
        self._selection = self._empty_selection()
