# this_file: glyphline/measure.py
"""
String measurement: advance width and face metrics in device pixels.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .base import BaseFont, GlyphNotFoundError, fixed_ceil, to_fixed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StringMetrics:
    """Layout metrics of one line of text, in whole pixels."""

    width: int
    ascent: int
    descent: int
    padding: int = 0

    @property
    def height(self) -> int:
        return self.ascent + self.descent

    @property
    def baseline(self) -> int:
        """Row of the baseline in the padded image."""
        return self.ascent + self.padding

    @property
    def image_width(self) -> int:
        return 2 * self.padding + self.width

    @property
    def image_height(self) -> int:
        return 2 * self.padding + self.height


def advance_fixed(font: BaseFont, point_size: float, char: str) -> int:
    """Advance of ``char`` in 26.6 fixed-point pixels; 0 if the font lacks it."""
    try:
        glyph = font.glyph_for(char)
    except GlyphNotFoundError:
        return 0
    return to_fixed(glyph.advance, point_size, font.units_per_em)


def measure(font: BaseFont, point_size: float, text: str, padding: int = 0) -> StringMetrics:
    """
    Measure ``text`` set in ``font`` at ``point_size``.

    Advances are accumulated in 1/64 pixel and only the total is rounded up,
    so long strings do not drift by a pixel per glyph.
    """
    total = sum(advance_fixed(font, point_size, char) for char in text)
    ascent, descent = font.face_metrics(point_size)
    metrics = StringMetrics(
        width=fixed_ceil(total),
        ascent=ascent,
        descent=descent,
        padding=padding,
    )
    logger.debug("Measured %d chars at %spt: %s", len(text), point_size, metrics)
    return metrics
