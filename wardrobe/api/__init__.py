"""Client for the generative styling service."""

from .styling_client import (
    StylingClient,
    StylingError,
    StylingRequestError,
    StylingResponseError,
    StylingResult,
)

__all__ = [
    "StylingClient",
    "StylingError",
    "StylingRequestError",
    "StylingResponseError",
    "StylingResult",
]
