from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .config import MIN_LINE_SPACE
from .packer import Rect

log = logging.getLogger(__name__)

UV = Tuple[float, float]


@dataclass(frozen=True)
class LineMetrics:
    line_space: float


@dataclass(frozen=True)
class GlyphMetrics:
    character: str
    uv_bottom_left: UV
    uv_bottom_right: UV
    uv_top_left: UV
    uv_top_right: UV
    min_x: int
    max_x: int
    min_y: int
    max_y: int
    advance: int

    @property
    def code_point(self) -> int:
        return ord(self.character)


def compute_line_metrics(rects: Sequence[Rect]) -> LineMetrics:
    line_space = MIN_LINE_SPACE
    for rect in rects:
        if rect.height > line_space:
            line_space = rect.height
    return LineMetrics(line_space=float(line_space))


def processed_count(rects: Sequence[Rect], characters: Sequence[str]) -> int:
    """Number of glyphs both lists cover; a mismatch is logged, not fatal."""
    if len(rects) != len(characters):
        log.warning(
            "Rect count (%d) and character count (%d) differ; using the first %d",
            len(rects),
            len(characters),
            min(len(rects), len(characters)),
        )
    return min(len(rects), len(characters))


def uv_corners(rect: Rect, atlas_size: Tuple[int, int]) -> Tuple[UV, UV, UV, UV]:
    """Bottom-left, bottom-right, top-left and top-right UVs of `rect`."""
    width, height = atlas_size
    left = rect.x / width
    right = rect.right / width
    bottom = rect.y / height
    top = rect.top / height
    return (left, bottom), (right, bottom), (left, top), (right, top)


def vertical_offset(rect: Rect, line: LineMetrics) -> int:
    pivot = -line.line_space / 2
    return math.floor(pivot + (line.line_space - rect.height) / 2)


def derive_glyph_metrics(
    rects: Sequence[Rect],
    characters: Sequence[str],
    atlas_size: Tuple[int, int],
    line: LineMetrics | None = None,
) -> List[GlyphMetrics]:
    line = line or compute_line_metrics(rects)
    glyphs: List[GlyphMetrics] = []
    for i in range(processed_count(rects, characters)):
        rect = rects[i]
        offset_y = vertical_offset(rect, line)
        bottom_left, bottom_right, top_left, top_right = uv_corners(rect, atlas_size)
        glyphs.append(
            GlyphMetrics(
                character=characters[i],
                uv_bottom_left=bottom_left,
                uv_bottom_right=bottom_right,
                uv_top_left=top_left,
                uv_top_right=top_right,
                min_x=0,
                max_x=rect.width,
                min_y=-rect.height - offset_y,
                max_y=-offset_y,
                advance=rect.width,
            )
        )
    return glyphs


def uv_to_rect(glyph: GlyphMetrics, atlas_size: Tuple[int, int]) -> Tuple[float, float, float, float]:
    """Pixel (x, y, width, height) covered by the UV corners of `glyph`."""
    width, height = atlas_size
    left, bottom = glyph.uv_bottom_left
    right, top = glyph.uv_top_right
    return left * width, bottom * height, (right - left) * width, (top - bottom) * height
