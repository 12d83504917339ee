"""AngelCode BMFont text descriptor (.fnt)."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

from .config import FntHeader
from .metrics import processed_count
from .packer import Rect


def _to_str(value: Any) -> str:
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    return str(int(value))


def _record(name: str, fields: Dict[str, Any]) -> str:
    return name + " " + " ".join(f"{key}={_to_str(value)}" for key, value in fields.items()) + "\n"


def info_fields(header: FntHeader) -> Dict[str, Any]:
    return {
        "face": header.face,
        "size": header.size,
        "bold": header.bold,
        "italic": header.italic,
        "charset": header.charset,
        "unicode": header.unicode,
        "stretchH": header.stretch_h,
        "smooth": header.smooth,
        "aa": header.aa,
        "padding": header.padding,
        "spacing": header.spacing,
        "outline": header.outline,
    }


def common_fields(header: FntHeader) -> Dict[str, Any]:
    return {
        "lineHeight": header.line_height,
        "base": header.base,
        "scaleW": header.scale_w,
        "scaleH": header.scale_h,
        "pages": 1,
        "packed": header.packed,
        "alphaChnl": header.alpha_chnl,
        "redChnl": header.red_chnl,
        "greenChnl": header.green_chnl,
        "blueChnl": header.blue_chnl,
    }


def char_fields(rect: Rect, character: str, atlas_height: int) -> Dict[str, Any]:
    return {
        "id": ord(character),
        "x": rect.x,
        # the text format counts y from the top of the page
        "y": atlas_height - rect.y - rect.height,
        "width": rect.width,
        "height": rect.height,
        "xoffset": 0,
        "yoffset": 0,
        "xadvance": rect.width,
        "page": 0,
        "chnl": 0,
        "letter": character,
    }


def render_fnt(
    rects: Sequence[Rect],
    characters: Sequence[str],
    atlas_size: Tuple[int, int],
    atlas_file: str,
    header: FntHeader | None = None,
) -> str:
    header = header or FntHeader()
    count = processed_count(rects, characters)
    _, atlas_height = atlas_size

    lines: List[str] = [
        _record("info", info_fields(header)),
        _record("common", common_fields(header)),
        _record("page", {"id": 0, "file": atlas_file}),
        _record("chars", {"count": count}),
    ]
    for i in range(count):
        lines.append(_record("char", char_fields(rects[i], characters[i], atlas_height)))
    return "".join(lines)


def write_fnt(
    path: Path,
    rects: Sequence[Rect],
    characters: Sequence[str],
    atlas_size: Tuple[int, int],
    atlas_file: str,
    header: FntHeader | None = None,
) -> str:
    content = render_fnt(rects, characters, atlas_size, atlas_file, header)
    Path(path).write_text(content, encoding="utf-8", newline="\n")
    return content
