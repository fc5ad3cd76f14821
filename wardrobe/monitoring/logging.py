"""Logging setup shared by the bot and the check script."""

from __future__ import annotations

import logging

from wardrobe.config.settings import WardrobeSettings, get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# httpx logs every request URL at INFO; the bot token is part of Telegram URLs.
_QUIET_LOGGERS = ("httpx", "httpcore")


def configure_logging(settings: WardrobeSettings | None = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
