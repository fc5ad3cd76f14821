"""Entrypoint for the wardrobe Telegram bot."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from pathlib import Path

from aiogram import Bot, Dispatcher, Router

from wardrobe.api import StylingClient
from wardrobe.bot_service.context import BotContext
from wardrobe.bot_service.handlers import setup_handlers
from wardrobe.config.settings import get_settings
from wardrobe.logic import WardrobeLogic
from wardrobe.monitoring import configure_logging
from wardrobe.storage import ItemStore, JsonFileKeyValueStore

logger = logging.getLogger(__name__)


async def main() -> None:
    """Load the wardrobe, wire dependencies and start polling Telegram."""

    settings = get_settings()
    configure_logging(settings)
    if not settings.bot_token:
        raise RuntimeError("TELEGRAM_BOT_TOKEN is not configured.")
    if not settings.styling_api_key:
        raise RuntimeError("STYLING_API_KEY is not configured.")

    store = ItemStore(JsonFileKeyValueStore(Path(settings.kv_path)), Path(settings.documents_root))
    await store.initialize()
    client = StylingClient(settings)
    logic = WardrobeLogic(settings, store, client)

    bot = Bot(token=settings.bot_token)
    dispatcher = Dispatcher()
    router = Router()
    setup_handlers(router, BotContext(settings=settings, store=store, logic=logic))
    dispatcher.include_router(router)

    try:
        logger.info("Starting wardrobe bot polling.")
        await dispatcher.start_polling(bot)
    finally:
        with suppress(Exception):
            await bot.session.close()
        with suppress(Exception):
            await client.close()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
