"""Prompt texts for the styling model."""

from __future__ import annotations

from typing import Sequence

from wardrobe.storage import Item

ANALYSIS_INSTRUCTIONS = (
    "You are a high-end fashion stylist. Analyze these clothing items as an outfit.\n"
    "Provide your feedback in JSON format with the following keys:\n"
    '- "score": A number from 0 to 10.\n'
    '- "title": A catchy 2-3 word name for this outfit style.\n'
    '- "analysis": A 2-sentence professional explanation of why this outfit works '
    "(or how to improve it).\n"
    '- "occasion": The best setting or event to wear this outfit.\n\n'
    "Return ONLY the JSON."
)

VISUALIZATION_INSTRUCTIONS = (
    "You are a fashion magazine editor creating a visual description for a lookbook.\n\n"
    "Analyze these clothing items and write a vivid, detailed description (2-3 sentences) "
    "of how this complete outfit would look when worn together. Focus on:\n"
    "- The visual harmony and color coordination\n"
    "- The silhouette and proportions\n"
    "- The overall aesthetic and mood\n"
    "- How the pieces complement each other\n\n"
    "Write in an elegant, descriptive style as if you're captioning a high-end fashion "
    "editorial. Be specific about visual details.\n\n"
    "Return ONLY the description text, no JSON or extra formatting."
)

COMPOSITE_INSTRUCTIONS = (
    "Combine the provided clothing items into a single flat-lay photo of the complete outfit, "
    "top to bottom, on a plain light background."
)


def describe_items(items: Sequence[Item]) -> str:
    """List items with their category labels, one per line, in image order."""

    lines = [
        f"Image {index}: {item.category.value} - {item.name}"
        for index, item in enumerate(items, start=1)
    ]
    return "\n".join(lines)


def build_prompt(instructions: str, items: Sequence[Item]) -> str:
    return f"{instructions}\n\nItems:\n{describe_items(items)}"
