"""Handlers for the add-item flow."""

from __future__ import annotations

import asyncio
import uuid
from pathlib import Path

from aiogram import F, Router
from aiogram.exceptions import TelegramNetworkError
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message

from wardrobe.bot_service.context import BotContext
from wardrobe.bot_service.filters import DraftFilter
from wardrobe.bot_service.keyboards import (
    CATEGORY_PREFIX,
    DRAFT_CANCEL,
    DRAFT_SAVE,
    draft_keyboard,
    draft_summary,
)
from wardrobe.logic import ItemValidationError, UploadDraft, UploadLimitError
from wardrobe.storage import Category, ItemIngestionError


def setup(router: Router, context: BotContext) -> None:
    """Register upload handlers."""

    @router.message(Command("add"))
    async def handle_add_command(message: Message) -> None:
        previous = context.drafts.pop(message.chat.id, None)
        if previous is not None:
            await context.logic.discard_draft(previous)
        draft = context.logic.new_draft()
        context.drafts[message.chat.id] = draft
        await message.answer(
            f"Send up to {draft.max_images} photos of the item, then its name "
            "(e.g. Nike Dunk Low), and pick a category.",
            reply_markup=draft_keyboard(draft),
        )

    @router.message(DraftFilter(context), F.photo)
    async def handle_photo(message: Message, draft: UploadDraft) -> None:
        if len(draft.images) >= draft.max_images:
            await message.answer(f"Limit reached. You can upload up to {draft.max_images} images.")
            return

        incoming_dir = Path(context.settings.incoming_root) / str(message.chat.id)
        await asyncio.to_thread(incoming_dir.mkdir, parents=True, exist_ok=True)
        destination = incoming_dir / f"{uuid.uuid4().hex}.jpg"
        try:
            file_info = await message.bot.get_file(message.photo[-1].file_id)
            await message.bot.download_file(file_info.file_path, destination=destination)
        except TelegramNetworkError:
            await message.answer("Could not download the photo from Telegram. Please try again.")
            return

        try:
            draft.add_image(str(destination))
        except UploadLimitError as exc:
            await asyncio.to_thread(destination.unlink, missing_ok=True)
            await message.answer(str(exc))
            return
        await message.answer(draft_summary(draft), reply_markup=draft_keyboard(draft))

    @router.message(DraftFilter(context), F.text & ~F.text.startswith("/"))
    async def handle_name(message: Message, draft: UploadDraft) -> None:
        draft.name = (message.text or "").strip()
        await message.answer(draft_summary(draft), reply_markup=draft_keyboard(draft))

    @router.callback_query(DraftFilter(context), F.data.startswith(CATEGORY_PREFIX))
    async def handle_category(callback: CallbackQuery, draft: UploadDraft) -> None:
        try:
            draft.category = Category(callback.data.removeprefix(CATEGORY_PREFIX))
        except ValueError:
            await callback.answer("Unknown category.", show_alert=True)
            return
        await callback.answer()
        await callback.message.edit_text(draft_summary(draft), reply_markup=draft_keyboard(draft))

    @router.callback_query(DraftFilter(context), F.data == DRAFT_SAVE)
    async def handle_save(callback: CallbackQuery, draft: UploadDraft) -> None:
        try:
            item = await context.logic.save_draft(draft)
        except ItemValidationError as exc:
            await callback.answer(str(exc), show_alert=True)
            return
        except ItemIngestionError as exc:
            await callback.answer(f"Failed to save item: {exc}", show_alert=True)
            return

        context.drafts.pop(callback.message.chat.id, None)
        await context.logic.discard_draft(draft)
        await callback.answer()
        await callback.message.edit_text(f"Saved {item.name.upper()} [{item.category.short_label}].")

    @router.callback_query(DraftFilter(context), F.data == DRAFT_CANCEL)
    async def handle_cancel(callback: CallbackQuery, draft: UploadDraft) -> None:
        context.drafts.pop(callback.message.chat.id, None)
        await context.logic.discard_draft(draft)
        await callback.answer()
        await callback.message.edit_text("Upload cancelled.")
