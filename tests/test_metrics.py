import math

import pytest

from bitmap_font_builder.metrics import (
    compute_line_metrics,
    derive_glyph_metrics,
    uv_corners,
    uv_to_rect,
    vertical_offset,
)
from bitmap_font_builder.packer import Rect


def test_line_space_is_tallest_glyph():
    rects = [Rect(0, 0, 4, 10), Rect(4, 0, 4, 17), Rect(8, 0, 4, 3)]
    assert compute_line_metrics(rects).line_space == 17


@pytest.mark.parametrize("rects", [[], [Rect(0, 0, 5, 0)], [Rect(0, 0, 0, 0), Rect(1, 1, 0, 0)]])
def test_line_space_never_below_minimum(rects):
    assert compute_line_metrics(rects).line_space == pytest.approx(0.1)


def test_vertical_metrics_even_heights():
    rects = [Rect(0, 0, 8, 20), Rect(8, 0, 6, 10)]
    tall, short = derive_glyph_metrics(rects, "ab", (32, 32))

    # offset_y = floor(-line/2 + (line - h)/2) = floor(-h/2)
    assert (tall.min_y, tall.max_y) == (-10, 10)
    assert (short.min_y, short.max_y) == (-5, 5)
    assert (tall.min_x, tall.max_x, tall.advance) == (0, 8, 8)
    assert (short.min_x, short.max_x, short.advance) == (0, 6, 6)


def test_vertical_offset_floors_odd_heights():
    rects = [Rect(0, 0, 4, 20), Rect(4, 0, 4, 5)]
    line = compute_line_metrics(rects)
    assert vertical_offset(rects[1], line) == -3
    glyph = derive_glyph_metrics(rects, "xy", (16, 32), line)[1]
    assert glyph.min_y == -5 + 3
    assert glyph.max_y == 3
    assert glyph.max_y - glyph.min_y == 5


def test_uv_corners_use_bottom_left_origin():
    rect = Rect(16, 8, 8, 4)
    bl, br, tl, tr = uv_corners(rect, (64, 32))
    assert bl == (0.25, 0.25)
    assert br == (0.375, 0.25)
    assert tl == (0.25, 0.375)
    assert tr == (0.375, 0.375)


def test_uv_round_trip_reproduces_pixel_bounds():
    atlas = (128, 64)
    rects = [Rect(0, 0, 7, 13), Rect(7, 0, 11, 3), Rect(18, 13, 5, 29), Rect(100, 50, 28, 14)]
    for rect, glyph in zip(rects, derive_glyph_metrics(rects, "abcd", atlas)):
        x, y, w, h = uv_to_rect(glyph, atlas)
        assert math.isclose(x, rect.x, abs_tol=1e-9)
        assert math.isclose(y, rect.y, abs_tol=1e-9)
        assert math.isclose(w, rect.width, abs_tol=1e-9)
        assert math.isclose(h, rect.height, abs_tol=1e-9)


def test_mismatched_lengths_use_shorter_prefix(caplog):
    rects = [Rect(0, 0, 2, 2), Rect(2, 0, 2, 2), Rect(4, 0, 2, 2)]
    with caplog.at_level("WARNING"):
        glyphs = derive_glyph_metrics(rects, "xy", (8, 8))
    assert [glyph.character for glyph in glyphs] == ["x", "y"]
    assert "differ" in caplog.text

    assert len(derive_glyph_metrics(rects[:1], "xyz", (8, 8))) == 1
