"""Build defaults shared by the pipeline and the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

IMAGE_PATTERN = "*.png"
MANIFEST_NAME = "chars.txt"
RECOVERY_PREFIX = "_"

ATLAS_PADDING = 0
MAX_ATLAS_SIZE = 4096

MIN_LINE_SPACE = 0.1

ATLAS_EXTENSION = ".png"
FNT_EXTENSION = ".fnt"
FONT_SETTINGS_EXTENSION = ".fontsettings"
MATERIAL_EXTENSION = ".mat"
META_EXTENSION = ".meta"


@dataclass(frozen=True)
class FntHeader:
    """Values for the `info` and `common` records of a BMFont text file.

    These are fixed placeholders; they do not follow the font name or the
    computed line space unless a caller overrides them.
    """

    face: str = "Custom"
    size: int = 50
    bold: int = 1
    italic: int = 0
    charset: str = ""
    unicode: int = 1
    stretch_h: int = 100
    smooth: int = 1
    aa: int = 1
    padding: Tuple[int, int, int, int] = (0, 0, 0, 0)
    spacing: Tuple[int, int] = (1, 1)
    outline: int = 0
    base: int = 26
    scale_w: int = 128
    scale_h: int = 64
    packed: int = 0
    alpha_chnl: int = 1
    red_chnl: int = 0
    green_chnl: int = 0
    blue_chnl: int = 0

    @property
    def line_height(self) -> int:
        return self.size
