"""Inline keyboards and message texts for the bot."""

from __future__ import annotations

from typing import Sequence

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from wardrobe.composer import OutfitComposer
from wardrobe.logic import OutfitPreview, UploadDraft
from wardrobe.storage import Category, Item

CATEGORY_PREFIX = "draft:cat:"
DRAFT_SAVE = "draft:save"
DRAFT_CANCEL = "draft:cancel"
PICK_PREFIX = "pick:"
OUTFIT_CREATE = "outfit:create"
OUTFIT_CANCEL = "outfit:cancel"


def draft_keyboard(draft: UploadDraft) -> InlineKeyboardMarkup:
    """Category chips plus Save/Cancel for an upload draft."""

    chips = [
        InlineKeyboardButton(
            text=f"✓ {category.value}" if draft.category is category else category.value,
            callback_data=f"{CATEGORY_PREFIX}{category.value}",
        )
        for category in Category
    ]
    return InlineKeyboardMarkup(
        inline_keyboard=[
            chips[:2],
            chips[2:],
            [
                InlineKeyboardButton(text="Save Items", callback_data=DRAFT_SAVE),
                InlineKeyboardButton(text="Cancel", callback_data=DRAFT_CANCEL),
            ],
        ],
    )


def draft_summary(draft: UploadDraft) -> str:
    category = draft.category.value if draft.category else "not selected"
    return (
        f"Images: {len(draft.images)}/{draft.max_images}\n"
        f"Name: {draft.name or 'not set'}\n"
        f"Category: {category}"
    )


def selection_keyboard(items: Sequence[Item], composer: OutfitComposer) -> InlineKeyboardMarkup:
    """One button per item; Create Outfit only appears once something is picked."""

    rows = []
    for item in items:
        if not item.category.is_wearable:
            label = f"· {item.name.upper()} ({item.category.short_label})"
        elif composer.is_selected(item):
            label = f"☑ {item.name.upper()} ({item.category.short_label})"
        else:
            label = f"☐ {item.name.upper()} ({item.category.short_label})"
        rows.append([InlineKeyboardButton(text=label, callback_data=f"{PICK_PREFIX}{item.id}")])

    actions = [InlineKeyboardButton(text="Cancel", callback_data=OUTFIT_CANCEL)]
    if composer.can_compose:
        actions.append(InlineKeyboardButton(text="Create Outfit", callback_data=OUTFIT_CREATE))
    rows.append(actions)
    return InlineKeyboardMarkup(inline_keyboard=rows)


def format_item_list(items: Sequence[Item]) -> str:
    if not items:
        return "No items yet"
    lines = ["My Wardrobe"]
    lines.extend(
        f"{index}. {item.name.upper()} [{item.category.short_label}]"
        for index, item in enumerate(items, start=1)
    )
    return "\n".join(lines)


def format_preview(preview: OutfitPreview) -> str:
    analysis = preview.analysis
    parts = [
        f"{analysis.title} ({analysis.score:g}/10)",
        analysis.analysis,
        f"Best for: {analysis.occasion}",
    ]
    if preview.visualization:
        parts.append("")
        parts.append(preview.visualization)
    return "\n".join(parts)
