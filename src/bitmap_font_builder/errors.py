"""Fatal build preconditions. Raised before any output file is touched."""

from __future__ import annotations


class FontBuildError(Exception):
    """Base class for errors that abort a build."""


class SelectionError(FontBuildError):
    """The build input is not exactly one existing directory."""


class ManifestNotFoundError(FontBuildError):
    pass


class ManifestMismatchError(FontBuildError):
    def __init__(self, image_count: int, char_count: int) -> None:
        super().__init__(
            f"PNG file count ({image_count}) and character count ({char_count}) differ; "
            "make them match before building"
        )
        self.image_count = image_count
        self.char_count = char_count


class DuplicateCharacterError(FontBuildError):
    def __init__(self, character: str) -> None:
        super().__init__(f"Character {character!r} is listed more than once")
        self.character = character


class AtlasOverflowError(FontBuildError):
    def __init__(self, max_size: int) -> None:
        super().__init__(f"Glyphs do not fit in a {max_size}x{max_size} atlas")
        self.max_size = max_size


class RequestFileError(FontBuildError):
    pass
