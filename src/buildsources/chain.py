"""Ordered, memoized source-file resolution for one log-viewing session.

The chain queries an optional source archive first and the live
filesystem last, wraps the first text found in a :class:`SourceText`, and
caches the outcome (found or not) per path for the chain's lifetime.

Caches are append-only and guarded by a lock. Resolution itself runs
outside the lock, so two threads missing on the same path may both do
the work; the first result stored wins and both callers receive it.
"""
from __future__ import annotations

import logging
import os
import threading
from pathlib import Path

from buildsources.archive import ArchiveFileResolver
from buildsources.config import SourceConfig
from buildsources.paths import companion_archive_path
from buildsources.resolvers import FileResolver, LocalSourceFileResolver
from buildsources.source_text import SourceText

log = logging.getLogger(__name__)


class SourceFileResolver:
    """Resolver chain: archive (when present) then local filesystem.

    Build with :meth:`from_log_file` (companion archive discovered next to
    the log) or :meth:`from_archive_bytes` (archive already selected).
    """

    def __init__(
        self,
        archive: ArchiveFileResolver | None = None,
        *,
        config: SourceConfig | None = None,
        local: FileResolver | None = None,
    ) -> None:
        self._config = config or SourceConfig()
        self._archive = archive
        resolvers: list[FileResolver] = []
        if archive is not None:
            resolvers.append(archive)
        resolvers.append(local or LocalSourceFileResolver(self._config.encodings))
        self._resolvers: tuple[FileResolver, ...] = tuple(resolvers)

        self._lock = threading.Lock()
        self._text_cache: dict[str, SourceText | None] = {}
        self._exists_cache: dict[str, bool] = {}

    @classmethod
    def from_log_file(
        cls,
        log_file_path: str | Path | None,
        *,
        config: SourceConfig | None = None,
    ) -> SourceFileResolver:
        """Attach the log's companion archive if one exists beside it.

        Raises ArchiveCorruptError if the companion exists but is not a zip.
        """
        config = config or SourceConfig()
        archive: ArchiveFileResolver | None = None
        if log_file_path:
            archive_path = companion_archive_path(log_file_path, config.archive_suffix)
            if archive_path.is_file():
                archive = ArchiveFileResolver.from_path(
                    archive_path, encodings=config.encodings,
                )
                log.debug("Attached source archive %s", archive_path)
            else:
                log.debug("No source archive at %s, using local files only", archive_path)
        return cls(archive, config=config)

    @classmethod
    def from_archive_bytes(
        cls,
        data: bytes,
        *,
        config: SourceConfig | None = None,
    ) -> SourceFileResolver:
        """Always attach the given archive. Raises ArchiveCorruptError."""
        config = config or SourceConfig()
        archive = ArchiveFileResolver.from_bytes(data, encodings=config.encodings)
        return cls(archive, config=config)

    @property
    def archive(self) -> ArchiveFileResolver | None:
        return self._archive

    @property
    def config(self) -> SourceConfig:
        return self._config

    @property
    def resolvers(self) -> tuple[FileResolver, ...]:
        return self._resolvers

    @staticmethod
    def _cache_key(file_path: str) -> str:
        # folds case only where the host filesystem does
        return os.path.normcase(file_path)

    def has_file(self, file_path: str | None) -> bool:
        """Whether some resolver in the chain yields text for the path."""
        if file_path is None:
            return False
        key = self._cache_key(file_path)
        with self._lock:
            cached = self._exists_cache.get(key)
        if cached is not None:
            return cached

        found = self.get_text(file_path) is not None
        with self._lock:
            return self._exists_cache.setdefault(key, found)

    def get_text(self, file_path: str | None) -> SourceText | None:
        """Resolve a path to its indexed text, or None if nothing has it.

        Each path is resolved at most once per chain (barring concurrent
        first requests); negative outcomes are cached too.
        """
        if file_path is None:
            return None
        key = self._cache_key(file_path)
        with self._lock:
            if key in self._text_cache:
                return self._text_cache[key]

        result: SourceText | None = None
        for resolver in self._resolvers:
            text = resolver.resolve(file_path)
            if text is not None:
                result = SourceText(text)
                break

        with self._lock:
            return self._text_cache.setdefault(key, result)

    def find_file_names(self, substring: str) -> list[str]:
        """Archive entry names containing ``substring``; empty without archive."""
        if self._archive is None:
            return []
        return list(self._archive.find_file_names(substring))
