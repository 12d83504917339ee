from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

log = logging.getLogger(__name__)

# formats Pillow can write back in RGBA mode
ALPHA_FORMATS = {"PNG", "TGA", "TIFF", "WEBP"}


class ImageStore:
    """Loads glyph images and prepares them for packing.

    Stems starting with "." (``..png``, ``.png``) are not addressable and
    load as ``None``, the same way the asset loader treats them.
    """

    def __init__(self, persist_normalized: bool = True) -> None:
        self.persist_normalized = persist_normalized

    def load_image(self, path: Path) -> Image.Image | None:
        path = Path(path)
        if path.stem.startswith("."):
            log.warning("Cannot address image [%s]: file name is not valid", path)
            return None
        try:
            image = Image.open(path)
            image.load()
        except (OSError, UnidentifiedImageError) as exc:
            log.warning("Failed to load image [%s]: %s", path, exc)
            return None
        return image

    def normalize_for_packing(self, image: Image.Image) -> Image.Image:
        if image.mode == "RGBA":
            return image
        source = getattr(image, "filename", "")
        original_mode = image.mode
        original_format = image.format or "PNG"
        image = image.convert("RGBA")
        if not (self.persist_normalized and source):
            return image
        if original_format not in ALPHA_FORMATS:
            log.warning(
                "Cannot store RGBA in %s file [%s]; converting in memory only",
                original_format,
                source,
            )
            return image
        image.save(source, format=original_format)
        log.info("Rewrote [%s] as RGBA (was %s)", source, original_mode)
        return image
