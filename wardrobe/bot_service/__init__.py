"""Telegram front-end for the wardrobe."""
