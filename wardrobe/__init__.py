"""Wardrobe catalogue: item storage, outfit composition and a Telegram front-end."""
