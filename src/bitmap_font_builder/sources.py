"""Collect (character, image) pairs from a glyph directory."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional

from PIL import Image

from .config import ATLAS_EXTENSION, IMAGE_PATTERN, MANIFEST_NAME, RECOVERY_PREFIX
from .errors import DuplicateCharacterError, ManifestMismatchError, ManifestNotFoundError, SelectionError
from .image_store import ImageStore

log = logging.getLogger(__name__)


@dataclass
class GlyphSource:
    character: str
    image: Optional[Image.Image]
    path: Path


def require_directory(directory: Path) -> Path:
    directory = Path(directory)
    if not directory.is_dir():
        raise SelectionError(f"{directory} is not a directory; select exactly one folder")
    return directory


def iter_image_files(directory: Path, exclude: Optional[str] = None) -> Iterator[Path]:
    """Yield the top-level PNG files of `directory` in name order."""
    for path in sorted(directory.glob(IMAGE_PATTERN)):
        if not path.is_file():
            continue
        if exclude is not None and path.name == exclude:
            continue
        yield path


def atlas_file_name(font_name: str) -> str:
    return f"{font_name}{ATLAS_EXTENSION}"


def _load_with_recovery(path: Path, store: ImageStore) -> Optional[Image.Image]:
    image = store.load_image(path)
    if image is not None:
        return image

    log.warning("Loading image [%s] failed, the file name may not be valid", path)
    copy_path = path.with_name(RECOVERY_PREFIX + path.name)
    log.warning("Copying image [%s] -> [%s]...", path, copy_path)
    if copy_path.exists():
        log.warning("Found existing image [%s], deleting it before copying", copy_path)
        copy_path.unlink()
    shutil.copyfile(path, copy_path)

    image = store.load_image(copy_path)
    if image is None:
        log.warning("Loading image [%s] still failed after copying, skipping it", path)
    return image


def resolve_from_filenames(
    directory: Path,
    store: Optional[ImageStore] = None,
    exclude: Optional[str] = None,
) -> List[GlyphSource]:
    directory = require_directory(directory)
    store = store or ImageStore()

    sources: List[GlyphSource] = []
    seen = set()
    for path in iter_image_files(directory, exclude=exclude):
        name = path.stem
        if len(name) != 1:
            log.warning("Skipping [%s]: its file name is not a single character", path)
            continue
        if name in seen:
            log.warning("Skipping [%s]: character %r already has an image", path, name)
            continue

        image = _load_with_recovery(path, store)
        if image is None:
            continue

        seen.add(name)
        sources.append(GlyphSource(character=name, image=image, path=path))

    return sources


def read_manifest(manifest_path: Path) -> List[str]:
    if not manifest_path.is_file():
        raise ManifestNotFoundError(f"File [{manifest_path}] does not exist")
    content = manifest_path.read_text(encoding="utf-8-sig")
    return [ch for ch in content if ch not in "\r\n"]


def resolve_from_manifest(
    directory: Path,
    store: Optional[ImageStore] = None,
    manifest_name: str = MANIFEST_NAME,
    exclude: Optional[str] = None,
) -> List[GlyphSource]:
    directory = require_directory(directory)
    store = store or ImageStore()

    chars = read_manifest(directory / manifest_name)
    files = list(iter_image_files(directory, exclude=exclude))
    if len(chars) != len(files):
        raise ManifestMismatchError(len(files), len(chars))

    seen = set()
    for ch in chars:
        if ch in seen:
            raise DuplicateCharacterError(ch)
        seen.add(ch)

    return [
        GlyphSource(character=ch, image=store.load_image(path), path=path)
        for ch, path in zip(chars, files)
    ]


def default_characters(directory: Path, manifest_name: str = MANIFEST_NAME, exclude: Optional[str] = None) -> str:
    """Characters to pre-fill an editable request with.

    The manifest content when there is one, else every single-character
    file name in the directory.
    """
    manifest_path = directory / manifest_name
    if manifest_path.is_file():
        return "".join(read_manifest(manifest_path))
    return "".join(path.stem for path in iter_image_files(directory, exclude=exclude) if len(path.stem) == 1)
