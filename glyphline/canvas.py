# this_file: glyphline/canvas.py
"""
RGBA pixel buffer with source-over compositing of coverage masks.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from .base import ConfigError

RGBA = Tuple[int, int, int, int]


def as_rgba(color: Sequence[int]) -> RGBA:
    """Validate a color as four integer channels in 0..255."""
    try:
        channels = tuple(int(c) for c in color)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid color: {color!r}") from exc
    if len(channels) != 4:
        raise ConfigError(f"Color must have 4 components (R,G,B,A), got {color!r}")
    if any(c < 0 or c > 255 for c in channels):
        raise ConfigError(f"Color components must be in 0..255, got {color!r}")
    return channels  # type: ignore[return-value]


class Canvas:
    """
    An RGBA image held as a (height, width, 4) uint8 array.
    """

    def __init__(self, width: int, height: int, background: Sequence[int] = (0, 0, 0, 0)):
        if width < 0 or height < 0:
            raise ConfigError(f"Canvas size must be non-negative, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.background = as_rgba(background)
        self.pixels = np.empty((self.height, self.width, 4), dtype=np.uint8)
        self.pixels[:, :] = self.background

    def composite(self, x: int, y: int, mask: np.ndarray, foreground: Sequence[int]) -> None:
        """
        Blend ``foreground`` over the canvas through ``mask`` placed at (x, y).

        Each channel, alpha included, becomes ``fg * c + existing * (1 - c)``.
        Mask pixels falling outside the canvas are dropped.
        """
        fg = np.asarray(as_rgba(foreground), dtype=np.float64)
        mh, mw = mask.shape

        x1 = max(0, x)
        y1 = max(0, y)
        x2 = min(self.width, x + mw)
        y2 = min(self.height, y + mh)

        if x2 <= x1 or y2 <= y1:
            return

        mx1 = x1 - x
        my1 = y1 - y
        region = np.asarray(mask[my1:my1 + (y2 - y1), mx1:mx1 + (x2 - x1)], dtype=np.float64)
        if not np.any(region):
            return

        coverage = np.clip(region, 0.0, 1.0)[:, :, None]
        existing = self.pixels[y1:y2, x1:x2].astype(np.float64)
        blended = fg * coverage + existing * (1.0 - coverage)
        self.pixels[y1:y2, x1:x2] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)

    def tobytes(self) -> bytes:
        """Raw RGBA bytes, row-major."""
        return self.pixels.tobytes()

    def to_image(self):
        """Return the canvas as a Pillow RGBA image."""
        from PIL import Image

        return Image.fromarray(self.pixels)

    def __repr__(self) -> str:
        return f"Canvas({self.width}x{self.height}, background={self.background})"
