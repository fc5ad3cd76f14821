"""Wardrobe listing and outfit selection handlers."""

from __future__ import annotations

from pathlib import Path

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import CallbackQuery, FSInputFile, InputMediaPhoto, Message

from wardrobe.bot_service.context import BotContext
from wardrobe.bot_service.keyboards import (
    OUTFIT_CANCEL,
    OUTFIT_CREATE,
    PICK_PREFIX,
    format_item_list,
    format_preview,
    selection_keyboard,
)
from wardrobe.composer import OutfitCompositionError, SelectionState
from wardrobe.logic import OutfitPreview

SELECTION_HINT = "Select 1 Top, 1 Bottom, 1 Shoe"


def setup(router: Router, context: BotContext) -> None:
    """Register listing and outfit handlers."""

    @router.message(Command("wardrobe"))
    async def handle_wardrobe(message: Message) -> None:
        if context.store.is_loading:
            await message.answer("Still loading your wardrobe, try again in a moment.")
            return
        await message.answer(format_item_list(context.store.list_items()))

    @router.message(Command("outfit"))
    async def handle_outfit(message: Message) -> None:
        items = context.store.list_items()
        if not items:
            await message.answer("No items yet. Use /add first.")
            return
        composer = context.composer_for(message.chat.id)
        composer.begin()
        await message.answer(SELECTION_HINT, reply_markup=selection_keyboard(items, composer))

    @router.callback_query(F.data.startswith(PICK_PREFIX))
    async def handle_pick(callback: CallbackQuery) -> None:
        composer = context.composer_for(callback.message.chat.id)
        if composer.state is not SelectionState.SELECTING:
            await callback.answer("Start a selection with /outfit.")
            return
        changed = composer.toggle_select_by_id(callback.data.removeprefix(PICK_PREFIX))
        await callback.answer()
        if changed:
            await callback.message.edit_reply_markup(
                reply_markup=selection_keyboard(context.store.list_items(), composer),
            )

    @router.callback_query(F.data == OUTFIT_CANCEL)
    async def handle_cancel(callback: CallbackQuery) -> None:
        context.composer_for(callback.message.chat.id).cancel()
        await callback.answer()
        await callback.message.edit_text("Selection cancelled.")

    @router.callback_query(F.data == OUTFIT_CREATE)
    async def handle_create(callback: CallbackQuery) -> None:
        composer = context.composer_for(callback.message.chat.id)
        try:
            outfit = composer.compose()
        except OutfitCompositionError as exc:
            await callback.answer(str(exc), show_alert=True)
            return

        await callback.answer()
        await callback.message.edit_text("Daily Outfit: styling…")
        preview = await context.logic.preview_outfit(outfit)
        await _send_preview(callback.message, preview)


async def _send_preview(message: Message, preview: OutfitPreview) -> None:
    items = list(preview.outfit)
    if preview.composite_path and Path(preview.composite_path).exists():
        await message.answer_photo(FSInputFile(preview.composite_path), caption="Daily Outfit")
    elif len(items) == 1:
        item = items[0]
        await message.answer_photo(
            FSInputFile(item.stored_location),
            caption=f"{item.category.short_label}: {item.name}",
        )
    else:
        await message.answer_media_group(
            [
                InputMediaPhoto(
                    media=FSInputFile(item.stored_location),
                    caption=f"{item.category.short_label}: {item.name}",
                )
                for item in items
            ],
        )
    await message.answer(format_preview(preview))
