# this_file: glyphline/harfbuzzpy.py
"""
Font backend reading metrics and outlines through HarfBuzz (uharfbuzz),
rendering glyphs through FreeType (freetype-py).
"""

from __future__ import annotations

import io
import logging

from .base import BaseFont, FontParseError, Glyph, GlyphNotFoundError, OutlinePen

try:
    import freetype
    import uharfbuzz as hb
except ImportError as exc:  # pragma: no cover - dependency error handled via is_available
    HB_IMPORT_ERROR: ImportError | None = exc
else:
    HB_IMPORT_ERROR = None

logger = logging.getLogger(__name__)


class HarfBuzzFont(BaseFont):
    """
    Outline font parsed by HarfBuzz.

    The font scale is set to the face's units per em, so advances and drawn
    outlines are in design units. No shaping is performed: characters map to
    glyphs through the nominal cmap lookup. A FreeType face over the same
    data renders the glyphs.
    """

    backend = "harfbuzz"

    def __init__(self, data: bytes):
        if HB_IMPORT_ERROR:
            raise FontParseError(
                f"harfbuzz backend unavailable: {HB_IMPORT_ERROR}"
            ) from HB_IMPORT_ERROR

        self.hb_blob = hb.Blob(data)
        self.hb_face = hb.Face(self.hb_blob)
        # HarfBuzz does not fail on garbage input, it yields an empty face
        if self.hb_face.glyph_count == 0:
            raise FontParseError("HarfBuzz found no glyphs in font data")

        self.hb_font = hb.Font(self.hb_face)
        hb.ot_font_set_funcs(self.hb_font)

        upem = self.hb_face.upem
        self.hb_font.scale = (upem, upem)

        try:
            self.ft_face = freetype.Face(io.BytesIO(data))
        except freetype.FT_Exception as exc:
            raise FontParseError(f"FreeType cannot parse font: {exc}") from exc

        extents = self.hb_font.get_font_extents("ltr")
        super().__init__(upem, extents.ascender, extents.descender)

    @classmethod
    def is_available(cls) -> bool:
        """Check if HarfBuzz is available (requires uharfbuzz and freetype-py)."""
        return HB_IMPORT_ERROR is None

    def _load_glyph(self, char: str) -> Glyph:
        gid = self.hb_font.get_nominal_glyph(ord(char))
        if not gid:
            raise GlyphNotFoundError(char)

        pen = OutlinePen()
        self.hb_font.draw_glyph_with_pen(gid, pen)
        logger.debug("Drew glyph %d for %r", gid, char)
        return Glyph(
            char=char,
            glyph_id=gid,
            advance=int(self.hb_font.get_glyph_h_advance(gid)),
            units_per_em=self.units_per_em,
            contours=pen.glyph_contours(),
            ft_face=self.ft_face,
        )
