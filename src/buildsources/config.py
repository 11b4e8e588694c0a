"""Resolver configuration, loaded from JSON."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from buildsources.io_utils import DEFAULT_ENCODINGS, load_json, validate_encodings
from buildsources.paths import ARCHIVE_SUFFIX


@dataclass(frozen=True, slots=True)
class SourceConfig:
    """Settings shared by the resolver chain and the lookup CLI.

    archive_suffix replaces the log file's extension to locate its
    companion source archive. encodings are tried in order when decoding
    a file that carries no byte-order mark. context_lines is the default
    number of lines shown on each side of a requested line.
    """

    archive_suffix: str = ARCHIVE_SUFFIX
    encodings: tuple[str, ...] = DEFAULT_ENCODINGS
    context_lines: int = 3

    def __post_init__(self) -> None:
        if not self.archive_suffix.startswith(".") or len(self.archive_suffix) < 2:
            raise ValueError(
                f"archive_suffix must start with '.', got {self.archive_suffix!r}"
            )
        validate_encodings(self.encodings)
        if self.context_lines < 0:
            raise ValueError(
                f"context_lines must be >= 0, got {self.context_lines}"
            )

    @classmethod
    def from_json(cls, path: Path) -> SourceConfig:
        """Load from a JSON object; missing keys keep their defaults."""
        data = load_json(path)
        if not isinstance(data, dict):
            raise ValueError(f"Config {path} must contain a JSON object")
        encodings = data.get("encodings", list(DEFAULT_ENCODINGS))
        if not isinstance(encodings, list):
            raise ValueError(
                f"Config {path}: encodings must be a JSON list, got {encodings!r}"
            )
        return cls(
            archive_suffix=str(data.get("archive_suffix", ARCHIVE_SUFFIX)),
            encodings=tuple(encodings),
            context_lines=int(data.get("context_lines", 3)),
        )
