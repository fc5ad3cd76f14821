"""High-level operations used by the bot: item uploads and outfit previews."""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path

from wardrobe.api import StylingClient, StylingError, StylingResult
from wardrobe.composer import Outfit
from wardrobe.config.settings import WardrobeSettings
from wardrobe.storage import Category, Item, ItemCandidate, ItemIngestionError, ItemStore

logger = logging.getLogger(__name__)

FALLBACK_ANALYSIS = StylingResult(
    score=8,
    title="Classic Mix",
    analysis=(
        "This combination offers a balanced silhouette and a versatile palette "
        "suitable for various daily activities."
    ),
    occasion="Casual Outings",
)


class ItemValidationError(ValueError):
    """Raised when an upload draft is incomplete."""


class UploadLimitError(ValueError):
    """Raised when more images are picked than a draft accepts."""


@dataclass(slots=True)
class UploadDraft:
    """An item being assembled before it is saved."""

    max_images: int = 4
    images: list[str] = field(default_factory=list)
    name: str = ""
    category: Category | None = None

    def add_image(self, location: str) -> None:
        if len(self.images) >= self.max_images:
            raise UploadLimitError(f"You can upload up to {self.max_images} images.")
        self.images.append(location)


@dataclass(slots=True)
class OutfitPreview:
    """What the user sees after creating an outfit."""

    outfit: Outfit
    analysis: StylingResult
    visualization: str | None = None
    composite_path: str | None = None


class WardrobeLogic:
    """Validates uploads, delegates persistence and builds outfit previews."""

    def __init__(self, settings: WardrobeSettings, store: ItemStore, client: StylingClient) -> None:
        self._settings = settings
        self._store = store
        self._client = client

    @property
    def store(self) -> ItemStore:
        return self._store

    def new_draft(self) -> UploadDraft:
        return UploadDraft(max_images=self._settings.max_upload_images)

    @staticmethod
    def validate_draft(draft: UploadDraft) -> None:
        if not draft.images:
            raise ItemValidationError("Please add at least one image.")
        if not draft.name.strip():
            raise ItemValidationError("Please enter a name for the item.")
        if draft.category is None:
            raise ItemValidationError("Please select a category.")

    async def save_draft(self, draft: UploadDraft) -> Item:
        """Validate the draft and store its first image as a new item."""

        self.validate_draft(draft)
        candidate = ItemCandidate(
            source_location=draft.images[0],
            name=draft.name.strip(),
            category=draft.category,
        )
        try:
            return await self._store.add_item(candidate)
        except ItemIngestionError:
            logger.error("Upload of %r was not saved.", candidate.name)
            raise

    async def discard_draft(self, draft: UploadDraft) -> None:
        """Delete the downloaded images of a saved or cancelled draft."""

        for location in draft.images:
            try:
                await asyncio.to_thread(Path(location).unlink, missing_ok=True)
            except OSError as exc:
                logger.warning("Could not remove draft image %s: %s", location, exc)
        draft.images.clear()

    async def preview_outfit(self, outfit: Outfit) -> OutfitPreview:
        """Describe the outfit; AI failures fall back to fixed values."""

        items = list(outfit)
        analysis, visualization, composite = await asyncio.gather(
            self._analyze(items),
            self._visualize(items),
            self._composite(items),
        )
        return OutfitPreview(
            outfit=outfit,
            analysis=analysis,
            visualization=visualization,
            composite_path=composite,
        )

    async def _analyze(self, items: list[Item]) -> StylingResult:
        try:
            return await self._client.analyze_outfit(items)
        except StylingError as exc:
            logger.warning("Outfit analysis failed, using fallback: %s", exc)
            return FALLBACK_ANALYSIS

    async def _visualize(self, items: list[Item]) -> str | None:
        try:
            return await self._client.generate_outfit_visualization(items)
        except StylingError as exc:
            logger.warning("Outfit visualization failed: %s", exc)
            return None

    async def _composite(self, items: list[Item]) -> str | None:
        try:
            image_bytes = await self._client.generate_outfit_composite(items)
        except StylingError as exc:
            logger.warning("Outfit composite failed: %s", exc)
            return None
        if not image_bytes:
            return None

        output_dir = Path(self._settings.documents_root) / "composites"
        output_path = output_dir / f"outfit_{uuid.uuid4().hex}.png"
        try:
            await asyncio.to_thread(output_dir.mkdir, parents=True, exist_ok=True)
            await asyncio.to_thread(output_path.write_bytes, image_bytes)
        except OSError as exc:
            logger.warning("Could not write outfit composite: %s", exc)
            return None
        return str(output_path)
