# this_file: glyphline/output.py
"""
Output side of the command line tool: PNG encoding, atomic file writes and
the dry-run report.
"""

from __future__ import annotations

import io
import logging
import os
import tempfile
from pathlib import Path

from .base import EncodeError
from .canvas import Canvas
from .measure import StringMetrics

logger = logging.getLogger(__name__)


def encode_png(canvas: Canvas) -> bytes:
    """Encode the canvas as an RGBA PNG."""
    if canvas.width == 0 or canvas.height == 0:
        raise EncodeError(f"Cannot encode an empty {canvas.width}x{canvas.height} image")
    buf = io.BytesIO()
    try:
        canvas.to_image().save(buf, format="PNG")
    except (OSError, ValueError) as exc:
        raise EncodeError(f"Failed to encode PNG: {exc}") from exc
    return buf.getvalue()


def write_atomic(path: Path | str, data: bytes) -> None:
    """
    Write ``data`` to ``path`` through a temporary file in the same
    directory, so the target is either complete or untouched.
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise
    logger.info("Wrote %s (%d bytes)", path, len(data))


def save_png(canvas: Canvas, path: Path | str) -> None:
    """Encode and write the canvas as a PNG file."""
    write_atomic(path, encode_png(canvas))


def format_report(metrics: StringMetrics) -> str:
    """Three-line dry-run report: text box, image size, baseline."""
    return (
        f"glyph dimensions: {metrics.width}, {metrics.height}\n"
        f"image dimensions: {metrics.image_width}, {metrics.image_height}\n"
        f"glyph baseline: {metrics.baseline}"
    )
