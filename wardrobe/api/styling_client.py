"""Async client for the generative styling service."""

from __future__ import annotations

import asyncio
import base64
import binascii
import json
import logging
import re
from io import BytesIO
from pathlib import Path
from typing import Any, Mapping, Sequence

import httpx
from openai import AsyncOpenAI, OpenAIError
from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel, Field, ValidationError

from wardrobe.api.prompts import (
    ANALYSIS_INSTRUCTIONS,
    COMPOSITE_INSTRUCTIONS,
    VISUALIZATION_INSTRUCTIONS,
    build_prompt,
)
from wardrobe.config.settings import WardrobeSettings
from wardrobe.storage import Item

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{.*\})\s*```", re.DOTALL)
_BARE_JSON = re.compile(r"(\{.*\})", re.DOTALL)


class StylingError(RuntimeError):
    """Base class for styling service failures."""


class StylingRequestError(StylingError):
    """Raised when the request could not be prepared or the service failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class StylingResponseError(StylingError):
    """Raised when the service reply cannot be interpreted."""


class StylingResult(BaseModel):
    """Structured outfit analysis."""

    score: float = Field(ge=0, le=10)
    title: str
    analysis: str
    occasion: str


class StylingClient:
    """Sends outfit images to an OpenAI-compatible multimodal endpoint."""

    def __init__(
        self,
        settings: WardrobeSettings,
        *,
        http_client: httpx.AsyncClient | None = None,
        openai_client: AsyncOpenAI | None = None,
    ) -> None:
        base_url = settings.styling_base_url.rstrip("/")
        self._settings = settings
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url,
            timeout=settings.request_timeout,
            headers={
                "Authorization": f"Bearer {settings.styling_api_key}",
            },
        )
        self._openai = openai_client or AsyncOpenAI(
            api_key=settings.styling_api_key,
            base_url=base_url,
            timeout=settings.request_timeout,
        )

    async def close(self) -> None:
        """Close the underlying HTTP clients."""

        await self._client.aclose()
        await self._openai.close()

    async def _request_json(self, method: str, endpoint: str, *, json_body: Mapping[str, Any]) -> dict[str, Any]:
        try:
            response = await self._client.request(method, endpoint, json=json_body)
            response.raise_for_status()
            if not response.content:
                return {}
            payload = response.json()
        except httpx.TimeoutException as exc:  # pragma: no cover - network safeguard
            raise StylingRequestError("Styling service timed out.") from exc
        except httpx.HTTPStatusError as exc:
            raise StylingRequestError(
                f"Styling service returned {exc.response.status_code}: {exc.response.text}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise StylingRequestError(f"Styling service request failed: {exc}") from exc
        except ValueError as exc:
            raise StylingResponseError("Styling service returned a non-JSON body.") from exc
        if not isinstance(payload, dict):
            raise StylingResponseError("Styling service returned a non-object JSON body.")
        return payload

    async def chat_completion(self, messages: Sequence[Mapping[str, Any]], **kwargs: Any) -> dict[str, Any]:
        """Call the OpenAI-compatible chat completions endpoint."""

        payload = {
            "model": self._settings.styling_chat_model,
            "messages": list(messages),
        }
        payload.update(kwargs)
        return await self._request_json("POST", "/chat/completions", json_body=payload)

    async def analyze_outfit(self, items: Sequence[Item]) -> StylingResult:
        """Score the outfit and return a short title, analysis and occasion."""

        response = await self.chat_completion(
            await self._multimodal_messages(build_prompt(ANALYSIS_INSTRUCTIONS, items), items),
        )
        content = self._first_choice_content(response)
        try:
            return StylingResult.model_validate(self.extract_json(content))
        except ValidationError as exc:
            raise StylingResponseError(f"Unexpected analysis payload: {content}") from exc

    async def generate_outfit_visualization(self, items: Sequence[Item]) -> str:
        """Return a free-text description of the outfit worn together."""

        response = await self.chat_completion(
            await self._multimodal_messages(build_prompt(VISUALIZATION_INSTRUCTIONS, items), items),
        )
        content = self._first_choice_content(response).strip()
        if not content:
            raise StylingResponseError("Styling service returned an empty description.")
        return content

    async def generate_outfit_composite(self, items: Sequence[Item]) -> bytes | None:
        """Render the items as one image; ``None`` when compositing is disabled."""

        if not self._settings.styling_composite_enabled:
            return None

        image_files = [
            await asyncio.to_thread(self._image_as_png, Path(item.stored_location), f"item_{index}")
            for index, item in enumerate(items, start=1)
        ]
        try:
            result = await self._openai.images.edit(
                model=self._settings.styling_image_model,
                image=image_files,
                prompt=build_prompt(COMPOSITE_INSTRUCTIONS, items),
            )
        except OpenAIError as exc:
            raise StylingRequestError(f"Composite generation failed: {exc}") from exc
        finally:
            for file in image_files:
                file.close()
        return self._decode_image_response(result)

    async def ping(self) -> bool:
        """Return ``True`` if the service answers a model listing call."""

        models = await self._openai.models.list()
        return bool(models.data)

    async def _multimodal_messages(self, prompt: str, items: Sequence[Item]) -> list[dict[str, Any]]:
        content: list[dict[str, Any]] = [{"type": "text", "text": prompt}]
        for item in items:
            content.append(
                {
                    "type": "image_url",
                    "image_url": {"url": await self._image_data_url(item)},
                },
            )
        return [{"role": "user", "content": content}]

    @staticmethod
    async def _image_data_url(item: Item) -> str:
        path = Path(item.stored_location)
        try:
            data = await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise StylingRequestError(f"Could not read image for '{item.name}': {exc}") from exc
        mime_type = "image/png" if path.suffix.lower() == ".png" else "image/jpeg"
        encoded = base64.b64encode(data).decode("ascii")
        return f"data:{mime_type};base64,{encoded}"

    @staticmethod
    def _image_as_png(source_path: Path, name_prefix: str) -> BytesIO:
        try:
            with Image.open(source_path) as img:
                img = img.convert("RGBA")
                buffer = BytesIO()
                img.save(buffer, format="PNG")
        except (OSError, UnidentifiedImageError) as exc:
            raise StylingRequestError(f"File {source_path} is not a supported image.") from exc
        buffer.seek(0)
        buffer.name = f"{name_prefix}.png"
        return buffer

    @staticmethod
    def _decode_image_response(result: Any) -> bytes | None:
        data_attr = getattr(result, "data", None)
        if not isinstance(data_attr, list) or not data_attr:
            logger.warning("Composite response has no image data.")
            return None
        image_base64 = getattr(data_attr[0], "b64_json", None)
        if not image_base64:
            return None
        try:
            return base64.b64decode(image_base64)
        except (ValueError, binascii.Error) as exc:
            raise StylingResponseError("Composite image is not valid base64.") from exc

    @staticmethod
    def extract_json(text: str) -> dict[str, Any]:
        """Parse a JSON object from raw text or a fenced code block."""

        stripped = text.strip()
        match = _FENCED_JSON.search(stripped) or _BARE_JSON.search(stripped)
        candidate = match.group(1) if match else stripped
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError as exc:
            raise StylingResponseError(f"Could not parse JSON from: {text}") from exc
        if not isinstance(parsed, dict):
            raise StylingResponseError(f"Expected a JSON object, got: {text}")
        return parsed

    @staticmethod
    def _first_choice_content(response: Mapping[str, Any]) -> str:
        choices = response.get("choices") or []
        if not isinstance(choices, list) or not choices:
            raise StylingResponseError("Styling service returned no choices.")
        choice = choices[0]
        message = choice.get("message") if isinstance(choice, Mapping) else None
        if not isinstance(message, Mapping):
            raise StylingResponseError("Styling service returned a malformed choice.")
        content = message.get("content")
        if isinstance(content, list):
            content = "".join(
                part.get("text", "") for part in content if isinstance(part, Mapping)
            )
        if not isinstance(content, str):
            raise StylingResponseError("Styling service returned no text content.")
        return content
