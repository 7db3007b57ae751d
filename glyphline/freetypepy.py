# this_file: glyphline/freetypepy.py
"""
Font backend reading outlines through FreeType (freetype-py).
"""

from __future__ import annotations

import io
import logging

from .base import BaseFont, FontParseError, Glyph, GlyphNotFoundError, OutlinePen

try:
    import freetype
except ImportError as exc:  # pragma: no cover - dependency error handled via is_available
    FT_IMPORT_ERROR: ImportError | None = exc
else:
    FT_IMPORT_ERROR = None

logger = logging.getLogger(__name__)


class FreeTypeFont(BaseFont):
    """
    Outline font parsed by FreeType.

    Glyphs are loaded with FT_LOAD_NO_SCALE, so outlines and advances come
    back in design units. The rasterizer renders through the same face at
    the requested size.
    """

    backend = "freetype"

    def __init__(self, data: bytes):
        if FT_IMPORT_ERROR:
            raise FontParseError(
                f"freetype backend unavailable: {FT_IMPORT_ERROR}"
            ) from FT_IMPORT_ERROR

        try:
            self.ft_face = freetype.Face(io.BytesIO(data))
        except freetype.FT_Exception as exc:
            raise FontParseError(f"FreeType cannot parse font: {exc}") from exc

        if not self.ft_face.is_scalable:
            raise FontParseError("Font has no scalable outlines")

        super().__init__(
            self.ft_face.units_per_EM,
            self.ft_face.ascender,
            self.ft_face.descender,
        )

    @classmethod
    def is_available(cls) -> bool:
        """Check if FreeType is available (requires freetype-py)."""
        return FT_IMPORT_ERROR is None

    def _load_glyph(self, char: str) -> Glyph:
        index = self.ft_face.get_char_index(ord(char))
        if index == 0:
            raise GlyphNotFoundError(char)

        try:
            self.ft_face.load_glyph(index, freetype.FT_LOAD_NO_SCALE)
        except freetype.FT_Exception as exc:
            raise FontParseError(f"Failed to load glyph {index}: {exc}") from exc

        slot = self.ft_face.glyph
        pen = OutlinePen()
        _draw_outline(slot.outline, pen)
        contours = pen.glyph_contours()
        logger.debug("Loaded glyph %d for %r (%d contours)", index, char, len(contours))
        return Glyph(
            char=char,
            glyph_id=index,
            advance=int(slot.metrics.horiAdvance),
            units_per_em=self.units_per_em,
            contours=contours,
            ft_face=self.ft_face,
        )


def _draw_outline(outline, pen: OutlinePen) -> None:
    """Replay a FreeType outline into ``pen``."""

    def move_to(p, _):
        pen.moveTo((p.x, p.y))
        return 0

    def line_to(p, _):
        pen.lineTo((p.x, p.y))
        return 0

    def conic_to(c, p, _):
        pen.qCurveTo((c.x, c.y), (p.x, p.y))
        return 0

    def cubic_to(c1, c2, p, _):
        pen.curveTo((c1.x, c1.y), (c2.x, c2.y), (p.x, p.y))
        return 0

    outline.decompose(move_to=move_to, line_to=line_to, conic_to=conic_to, cubic_to=cubic_to)
