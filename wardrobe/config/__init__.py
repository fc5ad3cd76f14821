"""Settings for the wardrobe application."""

from .settings import WardrobeSettings, get_settings

__all__ = ["WardrobeSettings", "get_settings"]
