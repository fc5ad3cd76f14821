"""Custom aiogram filters used by the wardrobe bot."""

from __future__ import annotations

from typing import Any

from aiogram.filters import BaseFilter
from aiogram.types import CallbackQuery, Message

from wardrobe.bot_service.context import BotContext


class DraftFilter(BaseFilter):
    """Matches updates from chats that have an upload draft open."""

    def __init__(self, context: BotContext) -> None:
        self._context = context

    async def __call__(self, event: Message | CallbackQuery) -> bool | dict[str, Any]:
        message = event.message if isinstance(event, CallbackQuery) else event
        if message is None:
            return False
        draft = self._context.drafts.get(message.chat.id)
        if draft is None:
            return False
        return {"draft": draft}
