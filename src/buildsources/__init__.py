"""Source-file resolution and line indexing for build log viewers.

Resolves files referenced by a build log from the log's companion source
archive or the local filesystem, and indexes their lines for lookup and
search.
"""
from __future__ import annotations

from buildsources.archive import ArchiveCorruptError, ArchiveFileResolver
from buildsources.chain import SourceFileResolver
from buildsources.config import SourceConfig
from buildsources.lines import (
    HighlightedText,
    PropertyUsage,
    SourceFileLine,
    build_highlights,
    source_lines_around,
)
from buildsources.locations import (
    NO_FILE_TEXT,
    HasSourceLocation,
    SourceLocation,
    SourceView,
    resolve_source_view,
)
from buildsources.paths import (
    ARCHIVE_SUFFIX,
    calculate_archive_path,
    companion_archive_path,
)
from buildsources.resolvers import FileResolver, LocalSourceFileResolver
from buildsources.source_text import (
    LineOutOfRangeError,
    SourceText,
    compute_line_spans,
)
from buildsources.spans import Span

__all__ = [
    "ARCHIVE_SUFFIX",
    "NO_FILE_TEXT",
    "ArchiveCorruptError",
    "ArchiveFileResolver",
    "FileResolver",
    "HasSourceLocation",
    "HighlightedText",
    "LineOutOfRangeError",
    "LocalSourceFileResolver",
    "PropertyUsage",
    "SourceConfig",
    "SourceFileLine",
    "SourceFileResolver",
    "SourceLocation",
    "SourceText",
    "SourceView",
    "Span",
    "build_highlights",
    "calculate_archive_path",
    "companion_archive_path",
    "compute_line_spans",
    "resolve_source_view",
    "source_lines_around",
]
