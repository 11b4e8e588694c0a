"""I/O utilities for JSON and encoding-safe text decoding.

JSON goes through orjson. Text decoding honours a byte-order mark, then
falls back through the configured encodings (UTF-8 -> CP1252 by default)
and finally UTF-8 with replacement characters, so it never fails.
"""
from __future__ import annotations

import codecs
import sys
from pathlib import Path
from typing import Any

import orjson

DEFAULT_ENCODINGS: tuple[str, ...] = ("utf-8", "cp1252")

# Longest marks first: the UTF-32-LE BOM starts with the UTF-16-LE one.
_BOMS: tuple[tuple[bytes, str], ...] = (
    (codecs.BOM_UTF32_LE, "utf-32-le"),
    (codecs.BOM_UTF32_BE, "utf-32-be"),
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)


def validate_encodings(encodings: tuple[str, ...]) -> tuple[str, ...]:
    """Check that ``encodings`` is a non-empty tuple of known codec names.

    Raises ValueError otherwise, so decoding never meets an unknown codec.
    """
    if not isinstance(encodings, tuple) or not encodings:
        raise ValueError(
            f"encodings must be a non-empty tuple of codec names, got {encodings!r}"
        )
    for encoding in encodings:
        if not isinstance(encoding, str):
            raise ValueError(f"encoding names must be str, got {encoding!r}")
        try:
            codecs.lookup(encoding)
        except LookupError as exc:
            raise ValueError(f"unknown encoding {encoding!r}") from exc
    return encodings


def decode_bytes(
    data: bytes,
    encodings: tuple[str, ...] = DEFAULT_ENCODINGS,
) -> str:
    """Decode raw file bytes to text.

    Args:
        data: Raw file content.
        encodings: Encodings to try in order when no BOM is present.

    Returns:
        The decoded text with any BOM removed.
    """
    for bom, encoding in _BOMS:
        if data.startswith(bom):
            return data[len(bom):].decode(encoding, errors="replace")
    for encoding in encodings:
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    return data.decode("utf-8", errors="replace")


def read_file(
    fpath: Path,
    *,
    encodings: tuple[str, ...] = DEFAULT_ENCODINGS,
) -> str | None:
    """Read a text file with encoding fallback.

    Returns None on any OSError (missing, a directory, permission denied,
    removed mid-read).
    """
    try:
        data = fpath.read_bytes()
    except OSError:
        return None
    return decode_bytes(data, encodings)


def load_json(path: Path) -> Any:
    """Load JSON from a file using orjson."""
    return orjson.loads(path.read_bytes())


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    """Save an object as JSON using orjson."""
    path.parent.mkdir(parents=True, exist_ok=True)
    opts = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS if pretty else orjson.OPT_SORT_KEYS
    path.write_bytes(orjson.dumps(obj, option=opts))


def dump_json(obj: Any) -> None:
    """Write indented JSON to stdout."""
    sys.stdout.buffer.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2))
    sys.stdout.buffer.write(b"\n")
    sys.stdout.flush()
