# this_file: glyphline/raster.py
"""
Glyph rasterization into anti-aliased coverage masks.

FreeType scales the outline to the requested size, grid-fits it when hinting
is on and fills it with its anti-aliasing rasterizer (non-zero winding, exact
area coverage). The resulting 8-bit bitmap becomes a coverage mask placed
relative to the pen origin on the baseline.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

import numpy as np

from .base import Glyph, RasterizeError, to_fixed
from .constants import FIXED_ONE

logger = logging.getLogger(__name__)

# 16.16 identity matrix for FT_Set_Transform
_IDENTITY = (0x10000, 0, 0, 0x10000)


class Hinting(str, Enum):
    """Grid-fitting mode."""

    NONE = "none"
    FULL = "full"


@dataclass(frozen=True)
class CoverageMask:
    """
    Per-pixel opacity in [0, 1] of one glyph.

    ``left`` is the column of the first mask pixel relative to the pen origin,
    ``top`` the number of rows from the first mask row down to the baseline.
    """

    alpha: np.ndarray = field(default_factory=lambda: np.zeros((0, 0), dtype=np.float64))
    left: int = 0
    top: int = 0

    @property
    def width(self) -> int:
        return int(self.alpha.shape[1])

    @property
    def height(self) -> int:
        return int(self.alpha.shape[0])

    @property
    def is_empty(self) -> bool:
        return self.alpha.size == 0 or not np.any(self.alpha)


def rasterize(
    glyph: Glyph,
    point_size: float,
    hinting: Hinting | str = Hinting.NONE,
    offset: float = 0.0,
) -> Tuple[CoverageMask, float]:
    """
    Rasterize ``glyph`` at ``point_size``.

    Args:
        glyph: Glyph loaded from a font backend
        point_size: Font size in points (one point is one pixel)
        hinting: Hinting.NONE or Hinting.FULL
        offset: Sub-pixel horizontal pen offset in [0, 1), ignored when hinting

    Returns:
        (coverage mask, advance in pixels)

    Raises:
        RasterizeError: If the size or the glyph's units per em is degenerate,
            or FreeType cannot render the glyph
    """
    if not math.isfinite(point_size) or point_size <= 0:
        raise RasterizeError(f"Point size must be positive, got {point_size}")
    if glyph.units_per_em <= 0:
        raise RasterizeError(f"Invalid units per em: {glyph.units_per_em}")
    hinting = Hinting(hinting)

    advance_fixed = to_fixed(glyph.advance, point_size, glyph.units_per_em)
    if hinting is Hinting.FULL:
        advance = float((advance_fixed + FIXED_ONE // 2) // FIXED_ONE)
        # Hinted glyphs sit on whole pixels
        offset = 0.0
    else:
        advance = advance_fixed / FIXED_ONE

    if glyph.is_empty:
        return CoverageMask(), advance
    if glyph.ft_face is None:
        raise RasterizeError(f"No face to render glyph {glyph.glyph_id} ({glyph.char!r}) with")

    mask = _render(glyph, point_size, hinting, offset)
    logger.debug(
        "Rasterized %r: %dx%d mask at (%d, %d), advance %.3f",
        glyph.char, mask.width, mask.height, mask.left, mask.top, advance,
    )
    return mask, advance


def _render(glyph: Glyph, point_size: float, hinting: Hinting, offset: float) -> CoverageMask:
    try:
        import freetype
    except ImportError as exc:
        raise RasterizeError("freetype-py is required for rasterizing glyphs") from exc

    flags = freetype.FT_LOAD_RENDER | freetype.FT_LOAD_NO_BITMAP
    if hinting is Hinting.FULL:
        # The font's own instructions, or the auto-hinter when it has none
        flags |= freetype.FT_LOAD_TARGET_NORMAL
    else:
        flags |= freetype.FT_LOAD_NO_HINTING

    face = glyph.ft_face
    char_size = max(1, int(round(point_size * FIXED_ONE)))
    delta = freetype.Vector(int(round(offset * FIXED_ONE)), 0)
    try:
        face.set_char_size(char_size, 0, 72, 72)
        face.set_transform(freetype.Matrix(*_IDENTITY), delta)
        face.load_glyph(glyph.glyph_id, flags)
    except freetype.FT_Exception as exc:
        raise RasterizeError(f"FreeType failed to render glyph {glyph.glyph_id}: {exc}") from exc
    finally:
        # The face is shared with outline loading, which must not be shifted
        face.set_transform(freetype.Matrix(*_IDENTITY), freetype.Vector(0, 0))

    slot = face.glyph
    bitmap = slot.bitmap
    if bitmap.width == 0 or bitmap.rows == 0:
        return CoverageMask()

    rows = np.array(bitmap.buffer, dtype=np.uint8).reshape(bitmap.rows, abs(bitmap.pitch))
    alpha = rows[:, :bitmap.width].astype(np.float64) / 255.0
    return CoverageMask(alpha=alpha, left=int(slot.bitmap_left), top=int(slot.bitmap_top))
