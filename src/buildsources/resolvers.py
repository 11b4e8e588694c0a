"""File resolver capability and the live-filesystem resolver."""
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from buildsources.io_utils import DEFAULT_ENCODINGS, read_file, validate_encodings


class FileResolver(ABC):
    """Maps a file path to its text content, or None when it has none."""

    @abstractmethod
    def resolve(self, file_path: str) -> str | None:
        """Return the file's full text, or None if this resolver can't.

        Implementations never raise for a missing or unreadable file.
        """


class LocalSourceFileResolver(FileResolver):
    """Reads source files from the live filesystem.

    Every failure (missing file, directory, permission denied, file
    removed between check and read, invalid path) degrades to None.
    """

    def __init__(self, encodings: tuple[str, ...] = DEFAULT_ENCODINGS) -> None:
        self._encodings = validate_encodings(encodings)

    def resolve(self, file_path: str) -> str | None:
        if not file_path:
            return None
        try:
            path = Path(file_path)
        except (TypeError, ValueError):
            return None
        try:
            return read_file(path, encodings=self._encodings)
        except ValueError:
            # embedded NUL in the path
            return None
