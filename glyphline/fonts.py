# this_file: glyphline/fonts.py
"""
Font backend registry: pick a backend and load font data with it.
"""

from __future__ import annotations

import logging

from .base import BaseFont, ConfigError, FontParseError
from .constants import DEFAULT_BACKEND
from .freetypepy import FreeTypeFont
from .harfbuzzpy import HarfBuzzFont

logger = logging.getLogger(__name__)

# Backends in order of preference for "auto"
BACKENDS: dict[str, type[BaseFont]] = {
    "freetype": FreeTypeFont,
    "harfbuzz": HarfBuzzFont,
}


def list_available() -> list[str]:
    """List font backends usable on this system."""
    return [name for name, cls in BACKENDS.items() if cls.is_available()]


def load_font(data: bytes, backend: str = DEFAULT_BACKEND) -> BaseFont:
    """
    Parse font data with the requested backend.

    Args:
        data: Raw font file bytes
        backend: Backend name ("freetype", "harfbuzz") or "auto"

    Returns:
        Font instance

    Raises:
        ConfigError: If the backend is unknown or not installed
        FontParseError: If the data is not a usable outline font
    """
    if backend == "auto":
        available = list_available()
        if not available:
            raise ConfigError("No font backends available")
        backend = available[0]

    cls = BACKENDS.get(backend)
    if cls is None:
        raise ConfigError(f"Unknown font backend: {backend}")
    if not cls.is_available():
        raise ConfigError(f"Font backend not available: {backend}")

    if not data:
        raise FontParseError("Font data is empty")

    font = cls(data)
    logger.debug("Loaded font %s", font.summary())
    return font
