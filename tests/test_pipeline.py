# this_file: tests/test_pipeline.py

"""Tests for the render pipeline."""

import logging
import math

import numpy as np
import pytest

from glyphline import (
    ConfigError,
    FontParseError,
    GlyphlineError,
    Hinting,
    Pipeline,
    PipelineState,
    RenderRequest,
    measure_text,
    render_text,
)

BLACK = (0, 0, 0, 255)
CLEAR = (0, 0, 0, 0)
ADVANCES = {"A": 700, "H": 600, "o": 500, "g": 500, ".": 250, " ": 250}


def partial_pixels(alpha):
    return int(np.count_nonzero((alpha > 0) & (alpha < 255)))


@pytest.fixture
def make_request(font_data, backend):
    def factory(text="A", **kwargs):
        kwargs.setdefault("backend", backend)
        return RenderRequest(font_data=font_data, text=text, **kwargs)

    return factory


class TestDimensions:
    """Test image size and baseline."""

    def test_reference_scenario(self, make_request):
        """700/1000 units at 10pt with padding 2."""
        canvas = render_text(make_request("A", point_size=10, padding=2))
        metrics = measure_text(make_request("A", point_size=10, padding=2))
        assert metrics.width == 7
        assert (canvas.width, canvas.height) == (11, 14)
        assert metrics.baseline == 10

    @pytest.mark.parametrize("text", ["A", "AHo", "g. A", "ooo"])
    @pytest.mark.parametrize("size,padding", [(10, 0), (12, 3), (13.3, 1), (48, 5)])
    def test_formulas(self, make_request, text, size, padding):
        """Image size is twice the padding plus the rounded-up metrics."""
        request = make_request(text, point_size=size, padding=padding)
        metrics = measure_text(request)
        canvas = render_text(request)
        # Advances in 1/64 px, one ceiling on the total
        total = sum(math.floor(ADVANCES[c] * size * 64 / 1000 + 0.5) for c in text)
        assert metrics.width == math.ceil(total / 64)
        assert canvas.width == 2 * padding + metrics.width
        assert canvas.height == 2 * padding + math.ceil(800 * size / 1000) + math.ceil(200 * size / 1000)

    def test_baseline_ignores_content(self, make_request):
        """The baseline depends on the face, not on the text."""
        baselines = {measure_text(make_request(text, padding=4)).baseline for text in ["A", "g", "...", ""]}
        assert baselines == {10 + 4}

    def test_empty_text(self, make_request):
        """Empty text gives a padding-wide image of the face's height."""
        canvas = render_text(make_request("", point_size=10, padding=2))
        assert (canvas.width, canvas.height) == (4, 14)
        assert np.all(canvas.pixels == 0)

    def test_measure_matches_render(self, make_request):
        """Measure-only reports exactly what a render allocates."""
        request = make_request("HoA.g", point_size=17.5, padding=3)
        metrics = measure_text(request)
        canvas = render_text(request)
        assert (metrics.image_width, metrics.image_height) == (canvas.width, canvas.height)

    def test_hinting_keeps_metrics(self, make_request):
        """Hinting changes pixels, never the measured box."""
        plain = measure_text(make_request("Ho.g", point_size=13.3, padding=1))
        hinted = measure_text(make_request("Ho.g", point_size=13.3, padding=1, hinting=Hinting.FULL))
        assert plain == hinted


class TestRendering:
    """Test the rendered pixels."""

    def test_glyph_pixels(self, make_request):
        """The block A is drawn on the baseline with its counter open."""
        canvas = render_text(make_request("A", point_size=10, padding=2))
        assert tuple(canvas.pixels[0, 0]) == CLEAR
        assert tuple(canvas.pixels[3, 3]) == BLACK
        assert tuple(canvas.pixels[4, 3]) == BLACK
        assert tuple(canvas.pixels[9, 7]) == BLACK
        # Counter at 250..450 x 300..500 units
        assert tuple(canvas.pixels[5, 5]) == CLEAR
        # Below the baseline
        assert tuple(canvas.pixels[10, 4]) == CLEAR

    def test_descender(self, make_request):
        """Glyphs extend below the baseline into the descent."""
        canvas = render_text(make_request("g", point_size=10))
        assert canvas.height == 10
        assert tuple(canvas.pixels[9, 1]) == BLACK

    def test_colors(self, make_request):
        """Foreground and background come from the request."""
        canvas = render_text(
            make_request("A", point_size=10, padding=2, foreground=(200, 10, 20, 255), background=(1, 2, 3, 4))
        )
        assert tuple(canvas.pixels[0, 0]) == (1, 2, 3, 4)
        assert tuple(canvas.pixels[3, 3]) == (200, 10, 20, 255)

    def test_deterministic(self, make_request):
        """Identical requests give identical pixels."""
        request = make_request("Ho.gA", point_size=13.7, padding=1)
        assert np.array_equal(render_text(request).pixels, render_text(request).pixels)

    def test_full_hinting_is_sharper(self, make_request):
        """Full hinting grid-fits stems that straddle pixel edges."""
        plain = render_text(make_request("H", point_size=10)).pixels[:, :, 3]
        hinted = render_text(make_request("H", point_size=10, hinting=Hinting.FULL)).pixels[:, :, 3]
        assert partial_pixels(hinted) < partial_pixels(plain)

    def test_missing_glyph_is_skipped(self, make_request, caplog):
        """Characters the font lacks render as nothing and warn."""
        with caplog.at_level(logging.WARNING, logger="glyphline.pipeline"):
            with_gap = render_text(make_request("AZA", point_size=10))
        without = render_text(make_request("AA", point_size=10))
        assert np.array_equal(with_gap.pixels, without.pixels)
        assert "U+005A" in caplog.text


class TestLayout:
    """Test glyph placement."""

    def test_pen_is_monotonic(self, make_request):
        """Each glyph's origin is at or right of the previous one."""
        placements = list(Pipeline(make_request("AHo .gAZo", point_size=13.3, padding=2)).layout())
        origins = [p.origin_x for p in placements]
        assert origins == sorted(origins)
        assert origins[0] == 2

    def test_shared_baseline(self, make_request):
        """All glyphs sit on the same baseline."""
        placements = list(Pipeline(make_request("AHg", point_size=10, padding=1)).layout())
        assert {p.baseline for p in placements} == {9}
        assert [p.y for p in placements] == [2, 2, 4]

    def test_advances(self, make_request):
        """The pen advances by the scaled advance widths."""
        placements = list(Pipeline(make_request("A.A", point_size=10)).layout())
        assert [p.origin_x for p in placements] == [0, 7, 9]
        assert [p.advance for p in placements] == [7.0, 2.5, 7.0]

    def test_hinted_glyphs_stay_in_box(self, make_request):
        """Hinted glyphs snap to the nearest pixel of the measured pen."""
        request = make_request("." * 12, point_size=10, hinting=Hinting.FULL)
        placements = list(Pipeline(request).layout())
        metrics = measure_text(request)
        # 2.5 px per period, rounded half up
        assert [p.origin_x for p in placements] == [(160 * k + 32) // 64 for k in range(12)]
        assert all(p.x < metrics.image_width for p in placements)
        assert {p.advance for p in placements} == {3.0}

    def test_hinted_pen_is_monotonic(self, make_request):
        """Rounding the pen keeps glyph origins in order."""
        request = make_request("AHo .gAZo", point_size=13.3, padding=2, hinting=Hinting.FULL)
        origins = [p.origin_x for p in Pipeline(request).layout()]
        assert origins == sorted(origins)
        assert origins[0] == 2


class TestPipelineState:
    """Test the pipeline's life cycle."""

    def test_states(self, make_request):
        """A pipeline moves from init through measured to done."""
        pipeline = Pipeline(make_request())
        assert pipeline.state is PipelineState.INIT
        pipeline.measure()
        assert pipeline.state is PipelineState.MEASURED
        pipeline.render()
        assert pipeline.state is PipelineState.DONE
        assert pipeline.font is None

    def test_renders_once(self, make_request):
        """A finished pipeline cannot render again."""
        pipeline = Pipeline(make_request())
        pipeline.render()
        with pytest.raises(GlyphlineError):
            pipeline.render()

    def test_glyphs_need_measuring(self, make_request):
        """Glyph lookup before the font is loaded is an error."""
        pipeline = Pipeline(make_request())
        with pytest.raises(GlyphlineError, match="not been measured"):
            pipeline._resolve("A")


class TestValidation:
    """Test request validation."""

    @pytest.mark.parametrize(
        "changes",
        [
            {"point_size": 0},
            {"point_size": -12},
            {"point_size": float("nan")},
            {"point_size": float("inf")},
            {"point_size": True},
            {"point_size": "12"},
            {"padding": -1},
            {"padding": 1.5},
            {"hinting": "light"},
            {"foreground": (0, 0, 0)},
            {"background": (0, 0, 0, 300)},
            {"text": None},
        ],
    )
    def test_invalid_request(self, make_request, changes):
        """Bad parameters raise ConfigError before anything is loaded."""
        with pytest.raises(ConfigError):
            measure_text(make_request(**changes))

    def test_numpy_scalars(self, make_request):
        """Integer and real numpy scalars are valid sizes and paddings."""
        metrics = measure_text(make_request(point_size=np.float64(10), padding=np.int64(2)))
        assert (metrics.image_width, metrics.image_height) == (11, 14)
        assert metrics.baseline == 10

    def test_empty_font_data(self):
        """Font data is required."""
        with pytest.raises(ConfigError):
            render_text(RenderRequest(font_data=b"", text="A"))

    def test_hinting_by_name(self, make_request):
        """Hinting modes may be given by name."""
        assert measure_text(make_request(hinting="full")).width == 9

    def test_bad_font(self, backend):
        """Unparseable font data aborts the render."""
        with pytest.raises(FontParseError):
            render_text(RenderRequest(font_data=b"\x00\x01\x00\x00" + b"\x00" * 64, text="A", backend=backend))
