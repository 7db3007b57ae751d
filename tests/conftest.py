# this_file: tests/conftest.py
"""Shared fixtures: a small TrueType font built in memory with fontTools."""

import io

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from glyphline import list_available

UPEM = 1000
ASCENT = 800
DESCENT = -200


def rect(pen, x0, y0, x1, y1):
    """Clockwise rectangle (outer contour in TrueType orientation)."""
    pen.moveTo((x0, y0))
    pen.lineTo((x0, y1))
    pen.lineTo((x1, y1))
    pen.lineTo((x1, y0))
    pen.closePath()


def hole(pen, x0, y0, x1, y1):
    """Counter-clockwise rectangle, cutting a counter out of an outer contour."""
    pen.moveTo((x0, y0))
    pen.lineTo((x1, y0))
    pen.lineTo((x1, y1))
    pen.lineTo((x0, y1))
    pen.closePath()


def _glyph_a():
    # Block "A": 100..600 x 0..700 with a counter at 250..450 x 300..500
    pen = TTGlyphPen(None)
    rect(pen, 100, 0, 600, 700)
    hole(pen, 250, 300, 450, 500)
    return pen.glyph()


def _glyph_h():
    # Two stems and an overlapping bar, all wound the same way
    pen = TTGlyphPen(None)
    rect(pen, 50, 0, 150, 700)
    rect(pen, 450, 0, 550, 700)
    rect(pen, 50, 300, 550, 400)
    return pen.glyph()


def _glyph_o():
    pen = TTGlyphPen(None)
    pen.moveTo((250, 0))
    pen.qCurveTo((50, 0), (50, 250))
    pen.qCurveTo((50, 500), (250, 500))
    pen.qCurveTo((450, 500), (450, 250))
    pen.qCurveTo((450, 0), (250, 0))
    pen.closePath()
    return pen.glyph()


def _glyph_g():
    # Reaches below the baseline
    pen = TTGlyphPen(None)
    rect(pen, 50, -200, 450, 500)
    return pen.glyph()


def _glyph_period():
    pen = TTGlyphPen(None)
    rect(pen, 50, 0, 200, 150)
    return pen.glyph()


def _empty():
    return TTGlyphPen(None).glyph()


# name: (codepoint, advance, left side bearing, outline factory)
GLYPHS = {
    "A": (ord("A"), 700, 100, _glyph_a),
    "H": (ord("H"), 600, 50, _glyph_h),
    "o": (ord("o"), 500, 50, _glyph_o),
    "g": (ord("g"), 500, 50, _glyph_g),
    "period": (ord("."), 250, 50, _glyph_period),
    "space": (ord(" "), 250, 0, _empty),
}


def build_font() -> bytes:
    glyph_order = [".notdef", *GLYPHS]
    fb = FontBuilder(UPEM, isTTF=True)
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap({code: name for name, (code, _, _, _) in GLYPHS.items()})

    glyphs = {".notdef": _empty()}
    metrics = {".notdef": (500, 0)}
    for name, (_, advance, lsb, factory) in GLYPHS.items():
        glyphs[name] = factory()
        metrics[name] = (advance, lsb)

    fb.setupGlyf(glyphs)
    fb.setupHorizontalMetrics(metrics)
    fb.setupHorizontalHeader(ascent=ASCENT, descent=DESCENT)
    fb.setupOS2(
        sTypoAscender=ASCENT,
        sTypoDescender=DESCENT,
        usWinAscent=ASCENT,
        usWinDescent=-DESCENT,
    )
    fb.setupNameTable(
        {
            "familyName": "Glyphline Test",
            "styleName": "Regular",
        }
    )
    fb.setupPost()
    fb.setupMaxp()

    fb.font["head"].created = 0
    fb.font["head"].modified = 0

    buf = io.BytesIO()
    fb.save(buf)
    return buf.getvalue()


@pytest.fixture(scope="session")
def font_data() -> bytes:
    """Bytes of the test font."""
    return build_font()


@pytest.fixture(scope="session")
def font_file(tmp_path_factory, font_data):
    """The test font written to disk."""
    path = tmp_path_factory.mktemp("fonts") / "glyphline-test.ttf"
    path.write_bytes(font_data)
    return path


@pytest.fixture(params=list_available())
def backend(request) -> str:
    """Each installed font backend in turn."""
    return request.param
