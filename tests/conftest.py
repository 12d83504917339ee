from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Tuple

import pytest
from PIL import Image


def make_png(path: Path, size: Tuple[int, int], color=(255, 255, 255, 255), mode: str = "RGBA") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    image = Image.new("RGBA", size, color)
    if mode != "RGBA":
        image = image.convert(mode)
    image.save(path, format="PNG")
    return path


def parse_fnt(content: str) -> List[Tuple[str, Dict[str, str]]]:
    """(record, {key: raw value}) per line; quoted values are unquoted."""
    records = []
    for line in content.splitlines():
        name, _, rest = line.partition(" ")
        fields: Dict[str, str] = {}
        i = 0
        while i < len(rest):
            if rest[i] == " ":
                i += 1
                continue
            eq = rest.index("=", i)
            key = rest[i:eq]
            i = eq + 1
            if rest[i:i + 1] == '"':
                end = i + 1
                while True:
                    end = rest.index('"', end)
                    if end + 1 == len(rest) or rest[end + 1] == " ":
                        break
                    end += 1
                fields[key] = rest[i + 1:end]
                i = end + 1
            else:
                end = rest.find(" ", i)
                end = len(rest) if end == -1 else end
                fields[key] = rest[i:end]
                i = end
        records.append((name, fields))
    return records


@pytest.fixture
def glyph_dir(tmp_path: Path) -> Path:
    """A folder of three glyphs of different sizes plus one badly named file."""
    directory = tmp_path / "digits"
    make_png(directory / "A.png", (8, 12), (255, 0, 0, 255))
    make_png(directory / "B.png", (6, 10), (0, 255, 0, 255))
    make_png(directory / "C.png", (10, 16), (0, 0, 255, 255))
    make_png(directory / "AB.png", (4, 4))
    return directory


@pytest.fixture
def manifest_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "numbers"
    make_png(directory / "img0.png", (5, 7), (255, 0, 0, 255))
    make_png(directory / "img1.png", (9, 11), (0, 255, 0, 255))
    make_png(directory / "img2.png", (3, 5), (0, 0, 255, 255))
    (directory / "chars.txt").write_text("ABC", encoding="utf-8")
    return directory
