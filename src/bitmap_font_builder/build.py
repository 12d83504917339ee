"""Bitmap font build pipeline: pack, derive metrics, write every artifact."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import yaml
from PIL import Image

from . import bmfont, unity
from .config import (
    ATLAS_PADDING,
    FNT_EXTENSION,
    FONT_SETTINGS_EXTENSION,
    MANIFEST_NAME,
    MATERIAL_EXTENSION,
    MAX_ATLAS_SIZE,
    META_EXTENSION,
    FntHeader,
)
from .errors import DuplicateCharacterError, RequestFileError
from .image_store import ImageStore
from .metrics import LineMetrics, compute_line_metrics, derive_glyph_metrics
from .packer import Rect, pack_atlas
from .sources import (
    GlyphSource,
    atlas_file_name,
    default_characters,
    iter_image_files,
    require_directory,
    resolve_from_filenames,
    resolve_from_manifest,
)

log = logging.getLogger(__name__)

FILENAME_STRATEGY = "filenames"
MANIFEST_STRATEGY = "manifest"


@dataclass
class BuildRequest:
    textures: List[Optional[Image.Image]]
    characters: Sequence[str]
    output_dir: Path
    font_name: str

    @classmethod
    def from_sources(cls, sources: Sequence[GlyphSource], output_dir: Path, font_name: str) -> "BuildRequest":
        return cls(
            textures=[source.image for source in sources],
            characters=[source.character for source in sources],
            output_dir=Path(output_dir),
            font_name=font_name,
        )


@dataclass(frozen=True)
class FontBuildArtifacts:
    output_dir: Path
    font_name: str

    def _path(self, extension: str) -> Path:
        return self.output_dir / f"{self.font_name}{extension}"

    @property
    def atlas_file(self) -> Path:
        return self.output_dir / atlas_file_name(self.font_name)

    @property
    def atlas_meta_file(self) -> Path:
        return self.atlas_file.with_name(self.atlas_file.name + META_EXTENSION)

    @property
    def fnt_file(self) -> Path:
        return self._path(FNT_EXTENSION)

    @property
    def font_settings_file(self) -> Path:
        return self._path(FONT_SETTINGS_EXTENSION)

    @property
    def material_file(self) -> Path:
        return self._path(MATERIAL_EXTENSION)

    def files(self) -> List[Path]:
        return [
            self.atlas_file,
            self.atlas_meta_file,
            self.fnt_file,
            self.font_settings_file,
            self.material_file,
        ]

    def delete_existing(self) -> None:
        for path in self.files():
            if path.exists():
                path.unlink()
                log.debug("Deleted old artifact %s", path)


@dataclass(frozen=True)
class PackedGlyph:
    character: str
    rect: Rect


@dataclass
class BuildResult:
    artifacts: FontBuildArtifacts
    glyphs: List[PackedGlyph]
    atlas_size: Tuple[int, int]
    line_metrics: LineMetrics
    skipped: int = 0

    def summary(self) -> Dict[str, Any]:
        return {
            "font_name": self.artifacts.font_name,
            "output_dir": str(self.artifacts.output_dir),
            "files": [str(path) for path in self.artifacts.files()],
            "atlas_width": self.atlas_size[0],
            "atlas_height": self.atlas_size[1],
            "line_space": self.line_metrics.line_space,
            "glyphs": len(self.glyphs),
            "characters": "".join(glyph.character for glyph in self.glyphs),
            "skipped": self.skipped,
        }


def check_unique(characters: Sequence[str]) -> None:
    seen = set()
    for ch in characters:
        if ch in seen:
            raise DuplicateCharacterError(ch)
        seen.add(ch)


def build_font(
    request: BuildRequest,
    store: Optional[ImageStore] = None,
    padding: int = ATLAS_PADDING,
    max_size: int = MAX_ATLAS_SIZE,
    header: Optional[FntHeader] = None,
) -> BuildResult:
    store = store or ImageStore()
    artifacts = FontBuildArtifacts(output_dir=Path(request.output_dir), font_name=request.font_name)
    characters = list(request.characters)
    check_unique(characters)
    if len(characters) != len(request.textures):
        log.warning(
            "Texture count (%d) and character count (%d) differ; unmatched entries are dropped",
            len(request.textures),
            len(characters),
        )

    packed = pack_atlas(request.textures, store=store, padding=padding, max_size=max_size)
    artifacts.delete_existing()
    packed_chars = [characters[i] for i in packed.source_indices if i < len(characters)]

    artifacts.output_dir.mkdir(parents=True, exist_ok=True)
    packed.image.save(artifacts.atlas_file)
    texture_guid = unity.asset_guid(artifacts.atlas_file)
    unity.write_texture_meta(artifacts.atlas_meta_file, texture_guid)

    bmfont.write_fnt(
        artifacts.fnt_file,
        packed.rects,
        packed_chars,
        packed.size,
        artifacts.atlas_file.name,
        header,
    )

    line = compute_line_metrics(packed.rects)
    glyph_metrics = derive_glyph_metrics(packed.rects, packed_chars, packed.size, line)
    material_guid = unity.asset_guid(artifacts.material_file)
    unity.write_material(artifacts.material_file, request.font_name, texture_guid)
    unity.write_font_settings(artifacts.font_settings_file, request.font_name, glyph_metrics, line, material_guid)

    glyphs = [PackedGlyph(character=ch, rect=rect) for ch, rect in zip(packed_chars, packed.rects)]
    if not glyphs:
        log.warning("Font %s was built with no glyphs", request.font_name)
    log.info(
        "Built font %s: %d glyphs in a %dx%d atlas",
        request.font_name,
        len(glyphs),
        packed.size[0],
        packed.size[1],
    )
    return BuildResult(
        artifacts=artifacts,
        glyphs=glyphs,
        atlas_size=packed.size,
        line_metrics=line,
        skipped=len(request.textures) - len(glyphs),
    )


def directory_request(
    directory: Path,
    strategy: str = FILENAME_STRATEGY,
    store: Optional[ImageStore] = None,
    output_dir: Optional[Path] = None,
    font_name: Optional[str] = None,
    manifest_name: str = MANIFEST_NAME,
) -> BuildRequest:
    """Assemble a request from a glyph directory.

    Output goes next to the glyphs and the font is named after the folder
    unless told otherwise. The build's own atlas is left out of the inputs.
    """
    directory = require_directory(directory)
    output_dir = Path(output_dir) if output_dir is not None else directory
    font_name = font_name or directory.resolve().name
    exclude = atlas_file_name(font_name) if output_dir.resolve() == directory.resolve() else None

    if strategy == FILENAME_STRATEGY:
        sources = resolve_from_filenames(directory, store, exclude=exclude)
    elif strategy == MANIFEST_STRATEGY:
        sources = resolve_from_manifest(directory, store, manifest_name=manifest_name, exclude=exclude)
    else:
        raise ValueError(f"Unknown glyph strategy: {strategy!r}")
    return BuildRequest.from_sources(sources, output_dir, font_name)


def build_from_directory(
    directory: Path,
    strategy: str = FILENAME_STRATEGY,
    store: Optional[ImageStore] = None,
    output_dir: Optional[Path] = None,
    font_name: Optional[str] = None,
    manifest_name: str = MANIFEST_NAME,
    padding: int = ATLAS_PADDING,
    max_size: int = MAX_ATLAS_SIZE,
    header: Optional[FntHeader] = None,
) -> BuildResult:
    store = store or ImageStore()
    request = directory_request(directory, strategy, store, output_dir, font_name, manifest_name)
    return build_font(request, store=store, padding=padding, max_size=max_size, header=header)


def init_request(
    directory: Path,
    request_path: Path,
    output_dir: Optional[Path] = None,
    font_name: Optional[str] = None,
    manifest_name: str = MANIFEST_NAME,
) -> Dict[str, Any]:
    """Write an editable request file pre-filled from a glyph directory."""
    directory = require_directory(directory).resolve()
    output_dir = Path(output_dir).resolve() if output_dir is not None else directory
    font_name = font_name or directory.name
    exclude = atlas_file_name(font_name) if output_dir == directory else None

    request_path = Path(request_path)
    data = {
        "font_name": font_name,
        "output_dir": str(output_dir),
        "characters": default_characters(directory, manifest_name, exclude=exclude),
        "textures": [str(path) for path in iter_image_files(directory, exclude=exclude)],
    }
    request_path.parent.mkdir(parents=True, exist_ok=True)
    with open(request_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
    return data


def load_request(request_path: Path, store: Optional[ImageStore] = None) -> BuildRequest:
    """Read a request file; relative paths are taken from its folder."""
    request_path = Path(request_path)
    store = store or ImageStore()
    try:
        data = yaml.safe_load(request_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise RequestFileError(f"Cannot read request file {request_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise RequestFileError(f"Unexpected request format in {request_path}")

    missing = [key for key in ("font_name", "characters", "textures") if key not in data]
    if missing:
        raise RequestFileError(f"Request {request_path} is missing {', '.join(missing)}")

    base = request_path.parent
    textures = []
    for entry in data["textures"] or []:
        path = Path(entry)
        if not path.is_absolute():
            path = base / path
        textures.append(store.load_image(path))

    output_dir = Path(data.get("output_dir") or base)
    if not output_dir.is_absolute():
        output_dir = base / output_dir

    return BuildRequest(
        textures=textures,
        characters=str(data["characters"] or ""),
        output_dir=output_dir,
        font_name=str(data["font_name"]),
    )
