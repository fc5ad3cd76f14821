"""Startup checks for the styling service and the local wardrobe storage."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from openai import OpenAIError

from wardrobe.api import StylingClient
from wardrobe.config.settings import WardrobeSettings, get_settings
from wardrobe.storage import STORAGE_KEY, JsonFileKeyValueStore, deserialize_items

logger = logging.getLogger(__name__)

STYLING_CHECK = "Styling service"
STORAGE_CHECK = "Wardrobe storage"


@dataclass(slots=True)
class IntegrationCheckResult:
    """Outcome of one check, printed by ``scripts/check_integrations.py``."""

    name: str
    success: bool
    message: str


async def check_styling_service(settings: WardrobeSettings | None = None) -> IntegrationCheckResult:
    """List the service's models with the configured key."""

    settings = settings or get_settings()
    if not settings.styling_api_key:
        return IntegrationCheckResult(STYLING_CHECK, False, "STYLING_API_KEY is not configured.")

    client = StylingClient(settings)
    try:
        reachable = await client.ping()
    except OpenAIError as exc:
        logger.warning("Styling service ping failed: %s", exc)
        return IntegrationCheckResult(STYLING_CHECK, False, str(exc))
    finally:
        await client.close()

    if not reachable:
        return IntegrationCheckResult(STYLING_CHECK, False, "Service responded with non-success status.")
    return IntegrationCheckResult(STYLING_CHECK, True, f"Reachable at {settings.styling_base_url}.")


async def check_storage(settings: WardrobeSettings | None = None) -> IntegrationCheckResult:
    """Make sure the documents directory exists and the item index is readable."""

    settings = settings or get_settings()
    try:
        await asyncio.to_thread(Path(settings.documents_root).mkdir, parents=True, exist_ok=True)
    except OSError as exc:
        return IntegrationCheckResult(STORAGE_CHECK, False, f"Documents root is not writable: {exc}")

    try:
        raw = await JsonFileKeyValueStore(Path(settings.kv_path)).get_item(STORAGE_KEY)
        items = deserialize_items(raw) if raw else []
    except (OSError, ValueError) as exc:
        return IntegrationCheckResult(STORAGE_CHECK, False, f"Item index is unreadable: {exc}")
    return IntegrationCheckResult(STORAGE_CHECK, True, f"{len(items)} item(s) indexed.")


async def run_all_checks(settings: WardrobeSettings | None = None) -> list[IntegrationCheckResult]:
    """Run every check concurrently."""

    settings = settings or get_settings()
    return list(await asyncio.gather(check_styling_service(settings), check_storage(settings)))
