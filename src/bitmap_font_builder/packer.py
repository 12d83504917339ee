from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import rectpack
from PIL import Image

from .config import ATLAS_PADDING, MAX_ATLAS_SIZE
from .errors import AtlasOverflowError
from .image_store import ImageStore

log = logging.getLogger(__name__)

NormalizedRect = Tuple[float, float, float, float]


@dataclass(frozen=True)
class Rect:
    """Pixel rectangle in atlas space, origin bottom-left."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def top(self) -> int:
        return self.y + self.height


@dataclass
class PackedAtlas:
    image: Image.Image
    rects: List[Rect]
    source_indices: List[int]

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size


def _next_power_of_two(value: int) -> int:
    size = 1
    while size < value:
        size *= 2
    return size


def _place(sizes: Sequence[Tuple[int, int]], width: int, height: int, padding: int):
    packer = rectpack.newPacker(rotation=False)
    packer.add_bin(width, height)
    for index, (w, h) in enumerate(sizes):
        packer.add_rect(w + padding, h + padding, index)
    packer.pack()
    placed = packer.rect_list()
    if len(placed) != len(sizes):
        return None
    return {rid: (x, y) for _, x, y, _, _, rid in placed}


def pack_textures(
    images: Sequence[Image.Image],
    padding: int = ATLAS_PADDING,
    max_size: int = MAX_ATLAS_SIZE,
) -> Tuple[Image.Image, List[NormalizedRect]]:
    """Pack RGBA images into one atlas.

    Returns the atlas and one (x, y, width, height) rectangle per image, in
    input order, as fractions of the atlas size with the origin at the
    bottom-left corner. The atlas starts at the smallest power of two that
    holds the largest image and doubles width and height in turn until
    everything fits.
    """
    if not images:
        return Image.new("RGBA", (1, 1), (0, 0, 0, 0)), []

    sizes = [image.size for image in images]
    width = _next_power_of_two(max(w for w, _ in sizes) + padding)
    height = _next_power_of_two(max(h for _, h in sizes) + padding)

    while True:
        if width > max_size or height > max_size:
            raise AtlasOverflowError(max_size)
        positions = _place(sizes, width, height, padding)
        if positions is not None:
            break
        if height < width:
            height *= 2
        else:
            width *= 2

    atlas = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    rects: List[NormalizedRect] = []
    for index, image in enumerate(images):
        x, y = positions[index]
        w, h = image.size
        # rectpack and the returned rects count y from the bottom, PIL from the top
        atlas.paste(image, (x, height - y - h))
        rects.append((x / width, y / height, w / width, h / height))

    return atlas, rects


def pack_atlas(
    images: Sequence[Optional[Image.Image]],
    store: Optional[ImageStore] = None,
    padding: int = ATLAS_PADDING,
    max_size: int = MAX_ATLAS_SIZE,
) -> PackedAtlas:
    packable: List[Image.Image] = []
    source_indices: List[int] = []
    for index, image in enumerate(images):
        if image is None:
            log.warning("Found null texture at position %d, skipping", index)
            continue
        if image.width == 0 or image.height == 0:
            log.warning("Texture at position %d has no pixels, skipping", index)
            continue
        if store is not None:
            image = store.normalize_for_packing(image)
        else:
            image = image.convert("RGBA")
        packable.append(image)
        source_indices.append(index)

    if not packable:
        log.warning("No usable textures; the atlas is empty")

    atlas, normalized = pack_textures(packable, padding=padding, max_size=max_size)

    width, height = atlas.size
    rects = [
        Rect(
            x=round(nx * width),
            y=round(ny * height),
            width=round(nw * width),
            height=round(nh * height),
        )
        for nx, ny, nw, nh in normalized
    ]
    return PackedAtlas(image=atlas, rects=rects, source_indices=source_indices)
