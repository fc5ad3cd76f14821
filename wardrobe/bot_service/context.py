"""Shared dependencies passed into handler setup functions."""

from __future__ import annotations

from dataclasses import dataclass, field

from wardrobe.composer import OutfitComposer
from wardrobe.config.settings import WardrobeSettings
from wardrobe.logic import UploadDraft, WardrobeLogic
from wardrobe.storage import ItemStore


@dataclass(slots=True)
class BotContext:
    """Container for objects shared across handlers.

    Drafts and composer sessions are per chat and live only in memory.
    """

    settings: WardrobeSettings
    store: ItemStore
    logic: WardrobeLogic
    drafts: dict[int, UploadDraft] = field(default_factory=dict)
    composers: dict[int, OutfitComposer] = field(default_factory=dict)

    def composer_for(self, chat_id: int) -> OutfitComposer:
        if chat_id not in self.composers:
            self.composers[chat_id] = OutfitComposer(self.store)
        return self.composers[chat_id]
