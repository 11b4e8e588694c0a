"""Archive path canonicalization and companion archive discovery.

Archive entry names are source paths with the volume separator removed
and every separator rewritten to a single backslash, e.g.
``C:\\src\\app\\app.csproj`` is stored as ``C\\src\\app\\app.csproj``.
"""
from __future__ import annotations

import re
from pathlib import Path

ARCHIVE_SUFFIX = ".buildsources.zip"

_BACKSLASH_RUN_RE: re.Pattern[str] = re.compile(r"\\{2,}")


def calculate_archive_path(file_path: str) -> str:
    """Canonicalize ``file_path`` into an archive lookup key.

    Strips ``:``, converts ``/`` to ``\\`` and collapses runs of
    backslashes. Idempotent; accepts any string. Case is preserved, the
    archive compares keys case-insensitively.
    """
    archive_path = file_path.replace(":", "")
    archive_path = archive_path.replace("/", "\\")
    return _BACKSLASH_RUN_RE.sub(r"\\", archive_path)


def companion_archive_path(
    log_file_path: str | Path,
    suffix: str = ARCHIVE_SUFFIX,
) -> Path:
    """Replace the log file's extension with ``suffix``.

    The extension starts at the last dot of the file name, so
    ``build.binlog`` -> ``build.buildsources.zip`` and ``.binlog`` ->
    ``.buildsources.zip``. A name without a dot gets the suffix appended.
    """
    path = Path(log_file_path)
    name = path.name
    if not name:
        return path / suffix
    dot = name.rfind(".")
    base = name[:dot] if dot >= 0 else name
    return path.with_name(base + suffix)
