"""CLI entry point for building bitmap fonts from glyph images."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .build import (
    FILENAME_STRATEGY,
    MANIFEST_STRATEGY,
    build_font,
    build_from_directory,
    init_request,
    load_request,
)
from .config import ATLAS_PADDING, MANIFEST_NAME, MAX_ATLAS_SIZE, FntHeader
from .errors import FontBuildError
from .image_store import ImageStore

log = logging.getLogger(__name__)


def _add_build_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--padding",
        type=int,
        default=ATLAS_PADDING,
        help="Pixels left between glyphs in the atlas.",
    )
    parser.add_argument(
        "--max-size",
        type=int,
        default=MAX_ATLAS_SIZE,
        help="Largest atlas width/height to try before giving up.",
    )
    parser.add_argument(
        "--face",
        default=FntHeader.face,
        help="Face name written to the .fnt info record.",
    )
    parser.add_argument(
        "--size",
        type=int,
        default=FntHeader.size,
        help="Size and line height written to the .fnt info/common records.",
    )
    parser.add_argument(
        "--no-normalize-sources",
        action="store_true",
        help="Do not rewrite non-RGBA source images as RGBA.",
    )


def _add_output_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory for the generated files (default: the glyph directory).",
    )
    parser.add_argument(
        "--font-name",
        default=None,
        help="Base name of the generated files (default: the glyph directory name).",
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pack glyph images into a bitmap font atlas.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output.")
    commands = parser.add_subparsers(dest="command", required=True)

    filenames = commands.add_parser(
        FILENAME_STRATEGY,
        help="Use each PNG's single-character file name as its glyph.",
    )
    filenames.add_argument("directory", help="Directory containing the glyph PNGs.")
    _add_output_options(filenames)
    _add_build_options(filenames)

    manifest = commands.add_parser(
        MANIFEST_STRATEGY,
        help="Pair the PNGs, in name order, with the characters of a manifest file.",
    )
    manifest.add_argument("directory", help="Directory containing the glyph PNGs and the manifest.")
    manifest.add_argument(
        "--manifest",
        default=MANIFEST_NAME,
        help="Manifest file name inside the directory.",
    )
    _add_output_options(manifest)
    _add_build_options(manifest)

    init = commands.add_parser(
        "init-request",
        help="Write an editable request file pre-filled from a glyph directory.",
    )
    init.add_argument("directory", help="Directory containing the glyph PNGs.")
    init.add_argument("request", help="Request file to write (YAML).")
    init.add_argument("--manifest", default=MANIFEST_NAME, help="Manifest file name inside the directory.")
    _add_output_options(init)

    build = commands.add_parser("build-request", help="Build the font described by a request file.")
    build.add_argument("request", help="Request file (YAML).")
    _add_build_options(build)

    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> dict:
    if args.command == "init-request":
        data = init_request(
            Path(args.directory),
            Path(args.request),
            output_dir=args.output_dir,
            font_name=args.font_name,
            manifest_name=args.manifest,
        )
        return {"request": str(Path(args.request)), "textures": len(data["textures"]), "characters": data["characters"]}

    store = ImageStore(persist_normalized=not args.no_normalize_sources)
    header = FntHeader(face=args.face, size=args.size)

    if args.command == "build-request":
        request = load_request(Path(args.request), store)
        result = build_font(request, store=store, padding=args.padding, max_size=args.max_size, header=header)
    else:
        result = build_from_directory(
            Path(args.directory),
            strategy=args.command,
            store=store,
            output_dir=Path(args.output_dir) if args.output_dir else None,
            font_name=args.font_name,
            manifest_name=getattr(args, "manifest", MANIFEST_NAME),
            padding=args.padding,
            max_size=args.max_size,
            header=header,
        )
    return result.summary()


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )
    try:
        summary = run(args)
    except FontBuildError as exc:
        log.error("%s", exc)
        sys.exit(1)
    print(json.dumps(summary, ensure_ascii=False))


if __name__ == "__main__":
    main()
