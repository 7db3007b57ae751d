# this_file: glyphline/base.py
"""
Base abstractions for font backends, plus the error hierarchy.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Tuple

from .constants import FIXED_ONE

Point = Tuple[float, float]
# A segment is its start point followed by its control and end points:
# 2 points for a line, 3 for a quadratic curve, 4 for a cubic curve.
Segment = Tuple[Point, ...]
Contour = Tuple[Segment, ...]


class GlyphlineError(RuntimeError):
    """Base class for all errors raised by glyphline."""


class ConfigError(GlyphlineError, ValueError):
    """Raised when a render request is missing or has invalid parameters."""


class FontParseError(GlyphlineError):
    """Raised when font data is malformed or of an unsupported format."""


class GlyphNotFoundError(GlyphlineError, KeyError):
    """Raised when a font has no glyph for a character."""

    def __init__(self, char: str):
        super().__init__(f"No glyph for {char!r} (U+{ord(char):04X})")
        self.char = char

    def __str__(self) -> str:
        return self.args[0]


class RasterizeError(GlyphlineError):
    """Raised on numeric degeneracy while rasterizing a glyph."""


class EncodeError(GlyphlineError):
    """Raised when a canvas cannot be encoded to an image file."""


@dataclass(frozen=True)
class Glyph:
    """
    One character's outline and advance, in font design units (y up).

    ``ft_face`` is the FreeType face the glyph renders through; glyphs
    without one (unmapped characters) have no outline.
    """

    char: str
    glyph_id: int
    advance: int
    units_per_em: int
    contours: Tuple[Contour, ...] = ()
    ft_face: Any = field(default=None, repr=False, compare=False)

    @classmethod
    def empty(cls, char: str, units_per_em: int) -> "Glyph":
        """Zero-advance glyph without outline, used for unmapped characters."""
        return cls(char=char, glyph_id=0, advance=0, units_per_em=units_per_em)

    @property
    def is_empty(self) -> bool:
        return not self.contours


def to_fixed(units: float, point_size: float, units_per_em: int) -> int:
    """Scale design units to 26.6 fixed-point pixels, rounding to nearest."""
    return int(math.floor(units * point_size * FIXED_ONE / units_per_em + 0.5))


def fixed_ceil(value: int) -> int:
    """Round a 26.6 fixed-point value up to whole pixels."""
    return -(-value // FIXED_ONE)


class BaseFont(ABC):
    """
    Abstract base class for font backends.

    Subclasses parse the font in ``__init__`` and expose design-unit metrics
    plus a character to glyph lookup. Instances are immutable once built.
    """

    backend: str = "base"

    def __init__(self, units_per_em: int, ascent: int, descent: int):
        if units_per_em <= 0:
            raise FontParseError(f"Invalid units per em: {units_per_em}")
        self.units_per_em = int(units_per_em)
        self.ascent = int(ascent)
        # Stored as a positive distance below the baseline
        self.descent = abs(int(descent))
        self._glyphs: dict[str, Glyph] = {}

    @classmethod
    def is_available(cls) -> bool:
        """
        Return True if the backend library can be used on the current system.
        """
        return True

    @abstractmethod
    def _load_glyph(self, char: str) -> Glyph:
        """
        Build the glyph for ``char`` or raise GlyphNotFoundError.
        """

    def glyph_for(self, char: str) -> Glyph:
        """Return the glyph for a single character."""
        if len(char) != 1:
            raise ValueError(f"Expected a single character, got {char!r}")
        glyph = self._glyphs.get(char)
        if glyph is None:
            glyph = self._load_glyph(char)
            self._glyphs[char] = glyph
        return glyph

    def face_metrics(self, point_size: float) -> Tuple[int, int]:
        """Face ascent and descent in whole pixels at ``point_size``."""
        ascent = fixed_ceil(to_fixed(self.ascent, point_size, self.units_per_em))
        descent = fixed_ceil(to_fixed(self.descent, point_size, self.units_per_em))
        return ascent, descent

    def summary(self) -> dict[str, Any]:
        """
        Diagnostics for logging.
        """
        return {
            "backend": self.backend,
            "upem": self.units_per_em,
            "ascent": self.ascent,
            "descent": self.descent,
        }


class OutlinePen:
    """
    Collects an outline as closed contours of segments.

    Speaks the segment pen protocol (moveTo / lineTo / qCurveTo / curveTo /
    closePath), so it can be driven by HarfBuzz draw callbacks or by a
    decomposed FreeType outline.
    """

    def __init__(self):
        self.contours: list[Contour] = []
        self._segments: list[Segment] = []
        self._start: Point | None = None
        self._current: Point | None = None

    def moveTo(self, pt: Point) -> None:
        self._finish()
        self._start = self._current = (float(pt[0]), float(pt[1]))

    def lineTo(self, pt: Point) -> None:
        end = (float(pt[0]), float(pt[1]))
        self._segments.append((self._require_current(), end))
        self._current = end

    def qCurveTo(self, *points: Point) -> None:
        # Consecutive off-curve points imply an on-curve point halfway between
        pts = [(float(x), float(y)) for x, y in points]
        for i, ctrl in enumerate(pts[:-1]):
            if i == len(pts) - 2:
                end = pts[-1]
            else:
                nxt = pts[i + 1]
                end = ((ctrl[0] + nxt[0]) / 2.0, (ctrl[1] + nxt[1]) / 2.0)
            self._segments.append((self._require_current(), ctrl, end))
            self._current = end

    def curveTo(self, *points: Point) -> None:
        if len(points) != 3:
            raise FontParseError(f"Unsupported cubic segment with {len(points)} points")
        c1, c2, end = [(float(x), float(y)) for x, y in points]
        self._segments.append((self._require_current(), c1, c2, end))
        self._current = end

    def closePath(self) -> None:
        self._finish()

    endPath = closePath

    def _require_current(self) -> Point:
        if self._current is None:
            raise FontParseError("Outline segment without a starting point")
        return self._current

    def _finish(self) -> None:
        if self._start is not None and self._current is not None and self._current != self._start:
            self._segments.append((self._current, self._start))
        if self._segments:
            self.contours.append(tuple(self._segments))
        self._segments = []
        self._start = self._current = None

    def glyph_contours(self) -> Tuple[Contour, ...]:
        self._finish()
        return tuple(self.contours)
