"""Start command handler."""

from __future__ import annotations

from aiogram import Router
from aiogram.filters import CommandStart
from aiogram.types import Message

from wardrobe.bot_service.context import BotContext


def setup(router: Router, context: BotContext) -> None:
    """Register /start handler."""

    @router.message(CommandStart())
    async def handle_start(message: Message) -> None:
        count = len(context.store.list_items())
        await message.answer(
            "Hi! I keep your wardrobe.\n"
            "/add - add an item (photos, name, category)\n"
            "/wardrobe - list your items\n"
            "/outfit - pick a top, a bottom and shoes\n"
            f"Items stored: {count}",
        )
