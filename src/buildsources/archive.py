"""In-memory snapshot of the source files packaged alongside a build log.

The archive is a zip whose entry names are source paths already in
archive-key form (see :func:`buildsources.paths.calculate_archive_path`).
Every entry is read and decoded once, at construction; lookups afterwards
touch only the in-memory mapping.
"""
from __future__ import annotations

import io
import logging
import zipfile
import zlib
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import IO

from buildsources.io_utils import DEFAULT_ENCODINGS, decode_bytes, validate_encodings
from buildsources.paths import calculate_archive_path
from buildsources.resolvers import FileResolver

log = logging.getLogger(__name__)

_FLAG_ENCRYPTED = 0x1


class ArchiveCorruptError(RuntimeError):
    """Raised when source archive bytes are not a readable zip."""


class ArchiveFileResolver(FileResolver):
    """Resolves paths against the extracted entries of a source archive.

    Keys compare case-insensitively. When two entries normalize to the
    same key the later one wins.
    """

    def __init__(
        self,
        source: str | Path | bytes,
        *,
        encodings: tuple[str, ...] = DEFAULT_ENCODINGS,
    ) -> None:
        """Extract every entry of a zip given as a file path or raw bytes.

        Raises:
            ArchiveCorruptError: the data is not a valid zip, or an entry
                is encrypted or fails to decompress.
            OSError: ``source`` is a path that cannot be opened.
            ValueError: ``encodings`` names an unknown codec.
        """
        self._encodings = validate_encodings(encodings)
        # folded key -> (normalized name, text)
        self._entries: dict[str, tuple[str, str]] = {}

        if isinstance(source, bytes | bytearray | memoryview):
            self._extract(io.BytesIO(bytes(source)), "<bytes>")
        else:
            with open(source, "rb") as stream:
                self._extract(stream, str(source))

        self._files = MappingProxyType(
            {name: text for name, text in self._entries.values()}
        )

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        *,
        encodings: tuple[str, ...] = DEFAULT_ENCODINGS,
    ) -> ArchiveFileResolver:
        return cls(data, encodings=encodings)

    @classmethod
    def from_path(
        cls,
        zip_path: str | Path,
        *,
        encodings: tuple[str, ...] = DEFAULT_ENCODINGS,
    ) -> ArchiveFileResolver:
        return cls(Path(zip_path), encodings=encodings)

    def _extract(self, stream: IO[bytes], origin: str) -> None:
        try:
            with zipfile.ZipFile(stream) as zf:
                for info in zf.infolist():
                    if info.is_dir():
                        continue
                    if info.flag_bits & _FLAG_ENCRYPTED:
                        raise ArchiveCorruptError(
                            f"Invalid source archive {origin}: "
                            f"entry {info.filename!r} is encrypted"
                        )
                    data = zf.read(info)
                    self._add_file(info.filename, decode_bytes(data, self._encodings))
        except (zipfile.BadZipFile, zlib.error, NotImplementedError, EOFError) as exc:
            raise ArchiveCorruptError(
                f"Invalid source archive {origin}: {exc}"
            ) from exc
        log.debug("Extracted %d source files from %s", len(self._entries), origin)

    def _add_file(self, full_name: str, text: str) -> None:
        name = calculate_archive_path(full_name)
        self._entries[name.lower()] = (name, text)

    @property
    def files(self) -> Mapping[str, str]:
        """Read-only mapping of normalized entry name -> text."""
        return self._files

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._files)

    def resolve(self, file_path: str) -> str | None:
        entry = self._entries.get(calculate_archive_path(file_path).lower())
        return entry[1] if entry is not None else None

    def find_file_names(self, substring: str) -> Iterator[str]:
        """Yield entry names containing ``substring``, ignoring case."""
        needle = substring.lower()
        for key, (name, _) in self._entries.items():
            if needle in key:
                yield name
