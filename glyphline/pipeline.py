# this_file: glyphline/pipeline.py
"""
Render pipeline: validate a request, measure, size the canvas, then
rasterize and composite each glyph along one baseline.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from numbers import Integral, Real
from typing import Iterator

from .base import BaseFont, ConfigError, Glyph, GlyphlineError, GlyphNotFoundError, to_fixed
from .canvas import RGBA, Canvas, as_rgba
from .constants import (
    DEFAULT_BACKEND,
    DEFAULT_BACKGROUND,
    DEFAULT_FOREGROUND,
    DEFAULT_PADDING,
    DEFAULT_POINT_SIZE,
    FIXED_ONE,
)
from .fonts import load_font
from .measure import StringMetrics, measure
from .raster import CoverageMask, Hinting, rasterize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderRequest:
    """Everything one render depends on."""

    font_data: bytes
    text: str
    point_size: float = DEFAULT_POINT_SIZE
    padding: int = DEFAULT_PADDING
    hinting: Hinting = Hinting.NONE
    foreground: RGBA = DEFAULT_FOREGROUND
    background: RGBA = DEFAULT_BACKGROUND
    backend: str = DEFAULT_BACKEND

    def validate(self) -> None:
        """
        Check every parameter.

        Raises:
            ConfigError: On the first invalid parameter
        """
        if not isinstance(self.font_data, (bytes, bytearray, memoryview)) or len(self.font_data) == 0:
            raise ConfigError("Font data is required")
        if not isinstance(self.text, str):
            raise ConfigError(f"Text must be a string, got {type(self.text).__name__}")
        if (
            isinstance(self.point_size, bool)
            or not isinstance(self.point_size, Real)
            or not math.isfinite(self.point_size)
            or self.point_size <= 0
        ):
            raise ConfigError(f"Point size must be a positive number, got {self.point_size!r}")
        if isinstance(self.padding, bool) or not isinstance(self.padding, Integral) or self.padding < 0:
            raise ConfigError(f"Padding must be a non-negative integer, got {self.padding!r}")
        try:
            Hinting(self.hinting)
        except ValueError as exc:
            raise ConfigError(f"Unknown hinting mode: {self.hinting!r}") from exc
        as_rgba(self.foreground)
        as_rgba(self.background)
        if not isinstance(self.backend, str):
            raise ConfigError(f"Backend must be a string, got {self.backend!r}")


class PipelineState(Enum):
    INIT = "init"
    MEASURED = "measured"
    SIZED = "sized"
    RENDERING = "rendering"
    DONE = "done"


@dataclass(frozen=True)
class GlyphPlacement:
    """Where one glyph's coverage mask lands on the canvas."""

    char: str
    origin_x: int
    baseline: int
    mask: CoverageMask
    advance: float

    @property
    def x(self) -> int:
        return self.origin_x + self.mask.left

    @property
    def y(self) -> int:
        return self.baseline - self.mask.top


class Pipeline:
    """
    One render of one request.

    ``measure()`` stops after layout metrics; ``render()`` runs to completion
    and returns the canvas. A pipeline renders once.
    """

    def __init__(self, request: RenderRequest):
        self.request = request
        self.state = PipelineState.INIT
        self.font: BaseFont | None = None
        self.metrics: StringMetrics | None = None

    def _transition(self, state: PipelineState) -> None:
        logger.debug("Pipeline %s -> %s", self.state.value, state.value)
        self.state = state

    def measure(self) -> StringMetrics:
        """Validate, load the font and measure the text."""
        if self.state is PipelineState.DONE:
            raise GlyphlineError("Pipeline has already rendered")
        if self.metrics is None:
            request = self.request
            request.validate()
            self.font = load_font(bytes(request.font_data), request.backend)
            self.metrics = measure(self.font, request.point_size, request.text, int(request.padding))
            self._transition(PipelineState.MEASURED)
        return self.metrics

    def _resolve(self, char: str) -> Glyph:
        if self.font is None:
            raise GlyphlineError("Pipeline has not been measured")
        try:
            return self.font.glyph_for(char)
        except GlyphNotFoundError as exc:
            logger.warning("%s, rendering an empty glyph", exc)
            return Glyph.empty(char, self.font.units_per_em)

    def layout(self) -> Iterator[GlyphPlacement]:
        """
        Rasterize the text glyph by glyph, left to right.

        The pen starts at the left padding and moves by the measured advances,
        kept in 26.6 fixed point. Unhinted glyphs are placed at the integer
        part of the pen and rasterized with the fractional part as sub-pixel
        offset; hinted glyphs are placed at the nearest whole pixel, so they
        never drift past the measured width.
        """
        metrics = self.measure()
        request = self.request
        hinting = Hinting(request.hinting)
        pen = 0
        for char in request.text:
            glyph = self._resolve(char)
            if hinting is Hinting.FULL:
                origin_x = metrics.padding + (pen + FIXED_ONE // 2) // FIXED_ONE
                offset = 0.0
            else:
                origin_x = metrics.padding + pen // FIXED_ONE
                offset = (pen % FIXED_ONE) / FIXED_ONE
            mask, advance = rasterize(glyph, request.point_size, hinting, offset=offset)
            yield GlyphPlacement(
                char=char,
                origin_x=origin_x,
                baseline=metrics.baseline,
                mask=mask,
                advance=advance,
            )
            pen += to_fixed(glyph.advance, request.point_size, glyph.units_per_em)

    def render(self) -> Canvas:
        """Run the whole pipeline and return the finished canvas."""
        metrics = self.measure()
        request = self.request

        canvas = Canvas(metrics.image_width, metrics.image_height, request.background)
        self._transition(PipelineState.SIZED)

        self._transition(PipelineState.RENDERING)
        for placement in self.layout():
            if placement.mask.is_empty:
                continue
            canvas.composite(placement.x, placement.y, placement.mask.alpha, request.foreground)

        self._transition(PipelineState.DONE)
        self.font = None
        self.metrics = None
        return canvas


def measure_text(request: RenderRequest) -> StringMetrics:
    """Measure-only entry point: metrics of the image ``request`` would produce."""
    return Pipeline(request).measure()


def render_text(request: RenderRequest) -> Canvas:
    """Render ``request`` into a new canvas."""
    return Pipeline(request).render()
