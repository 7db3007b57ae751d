"""
glyphline: render a single line of text to an RGBA raster.

The pipeline loads an outline font, measures the string, rasterizes each
glyph into an anti-aliased coverage mask (optionally grid-fitted) and
composites the masks onto a canvas along one baseline.

Font backends:
- FreeType (via freetype-py)
- HarfBuzz (via uharfbuzz)
"""

from __future__ import annotations

__version__ = "0.1.0"

from .base import (
    BaseFont,
    ConfigError,
    EncodeError,
    FontParseError,
    Glyph,
    GlyphlineError,
    GlyphNotFoundError,
    RasterizeError,
)
from .canvas import Canvas
from .fonts import list_available, load_font
from .measure import StringMetrics, measure
from .pipeline import Pipeline, PipelineState, RenderRequest, measure_text, render_text
from .raster import CoverageMask, Hinting, rasterize

__all__ = [
    "BaseFont",
    "Canvas",
    "ConfigError",
    "CoverageMask",
    "EncodeError",
    "FontParseError",
    "Glyph",
    "GlyphlineError",
    "GlyphNotFoundError",
    "Hinting",
    "Pipeline",
    "PipelineState",
    "RasterizeError",
    "RenderRequest",
    "StringMetrics",
    "list_available",
    "load_font",
    "measure",
    "measure_text",
    "rasterize",
    "render_text",
    "__version__",
]
