"""Settings loader for the wardrobe bot and its storage."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

DEFAULT_STYLING_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai"


def _load_env_file(path: str = ".env") -> None:
    """Populate environment variables from a .env file if present."""

    env_path = Path(path)
    if not env_path.exists():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


def _as_bool(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(slots=True, frozen=True)
class WardrobeSettings:
    """Settings required by the bot, the item store and the styling client."""

    bot_token: str = ""
    styling_api_key: str = ""
    styling_base_url: str = DEFAULT_STYLING_BASE_URL
    styling_chat_model: str = "gemini-1.5-flash-latest"
    styling_image_model: str = "gemini-2.5-flash-image"
    styling_composite_enabled: bool = False
    request_timeout: float = 60.0
    documents_root: str = "storage/documents"
    kv_path: str = "storage/kv.json"
    incoming_root: str = "storage/incoming"
    max_upload_images: int = 4
    log_level: str = "INFO"


def _build_settings() -> WardrobeSettings:
    _load_env_file()
    return WardrobeSettings(
        bot_token=os.getenv("TELEGRAM_BOT_TOKEN", ""),
        styling_api_key=os.getenv("STYLING_API_KEY", ""),
        styling_base_url=os.getenv("STYLING_BASE_URL", DEFAULT_STYLING_BASE_URL),
        styling_chat_model=os.getenv("STYLING_CHAT_MODEL", "gemini-1.5-flash-latest"),
        styling_image_model=os.getenv("STYLING_IMAGE_MODEL", "gemini-2.5-flash-image"),
        styling_composite_enabled=_as_bool(os.getenv("STYLING_COMPOSITE_ENABLED", "false")),
        request_timeout=float(os.getenv("STYLING_REQUEST_TIMEOUT", "60")),
        documents_root=os.getenv("WARDROBE_DOCUMENTS_ROOT", "storage/documents"),
        kv_path=os.getenv("WARDROBE_KV_PATH", "storage/kv.json"),
        incoming_root=os.getenv("WARDROBE_INCOMING_ROOT", "storage/incoming"),
        max_upload_images=int(os.getenv("WARDROBE_MAX_UPLOAD_IMAGES", "4")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )


@lru_cache(maxsize=1)
def get_settings() -> WardrobeSettings:
    """Return cached settings instance."""

    return _build_settings()
