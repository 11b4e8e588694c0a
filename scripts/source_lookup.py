#!/usr/bin/env python3
"""Show source lines referenced by a build log.

Resolves a file from the log's companion ``.buildsources.zip`` archive (or
an explicit archive) before falling back to the local filesystem, then
prints the requested lines as JSON to stdout with summary messages to
stderr. Line numbers on the command line and in the output are 1-based.

Usage:
    python3 scripts/source_lookup.py --log build.binlog \
      --file 'C:\\src\\app\\app.csproj' --line 42 --context 5
    python3 scripts/source_lookup.py --archive build.buildsources.zip \
      --file 'C:\\src\\app\\app.csproj' --find "<Target"
    python3 scripts/source_lookup.py --log build.binlog --list app.csproj
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from buildsources.archive import ArchiveCorruptError
from buildsources.chain import SourceFileResolver
from buildsources.config import SourceConfig
from buildsources.io_utils import dump_json, save_json
from buildsources.lines import source_lines_around
from buildsources.source_text import LineOutOfRangeError, SourceText

log = logging.getLogger("source_lookup")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Show source lines referenced by a build log."
    )
    origin = parser.add_mutually_exclusive_group()
    origin.add_argument(
        "--log", type=Path, default=None,
        help="Build log path; its companion source archive is used if present",
    )
    origin.add_argument(
        "--archive", type=Path, default=None,
        help="Explicit source archive (zip) to resolve against",
    )
    action = parser.add_mutually_exclusive_group(required=True)
    action.add_argument("--file", help="Source file path as recorded in the log")
    action.add_argument(
        "--list", metavar="SUBSTRING",
        help="List archive entry names containing SUBSTRING",
    )
    query = parser.add_mutually_exclusive_group()
    query.add_argument("--line", type=int, default=None, help="1-based line number")
    query.add_argument("--find", default=None, help="Case-insensitive search text")
    parser.add_argument(
        "--context", type=int, default=None,
        help="Lines of context around --line (default: from config, 3)",
    )
    parser.add_argument(
        "--config", type=Path, default=None, help="JSON resolver configuration",
    )
    parser.add_argument(
        "--output", type=Path, default=None,
        help="Write the JSON result to this file instead of stdout",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging",
    )
    return parser


def _emit(obj: Any, output: Path | None) -> None:
    if output is None:
        dump_json(obj)
        return
    save_json(obj, output)
    print(f"Wrote {output}", file=sys.stderr)


def _line_rows(source: SourceText, line_numbers: list[int]) -> list[dict[str, Any]]:
    return [
        {"line": i + 1, "text": source.get_line_text(i)} for i in line_numbers
    ]


def lookup(
    resolver: SourceFileResolver,
    file_path: str,
    *,
    line: int | None,
    find: str | None,
    context: int,
) -> dict[str, Any] | None:
    """Build the JSON payload for one file, or None if it can't be resolved."""
    source = resolver.get_text(file_path)
    if source is None:
        return None

    payload: dict[str, Any] = {
        "file": file_path,
        "from_archive": resolver.archive is not None
        and resolver.archive.resolve(file_path) is not None,
        "line_count": source.line_count,
    }
    if line is not None:
        rows = source_lines_around(source, line - 1, context)
        payload["requested_line"] = line
        payload["lines"] = [
            {"line": r.line_number + 1, "text": r.line_text} for r in rows
        ]
    elif find is not None:
        payload["query"] = find
        payload["lines"] = _line_rows(source, source.find(find))
    return payload


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    config = SourceConfig()
    if args.config is not None:
        if not args.config.exists():
            print(f"Error: config not found: {args.config}", file=sys.stderr)
            sys.exit(1)
        try:
            config = SourceConfig.from_json(args.config)
        except ValueError as exc:
            print(f"Error: invalid config {args.config}: {exc}", file=sys.stderr)
            sys.exit(1)

    try:
        if args.archive is not None:
            if not args.archive.exists():
                print(f"Error: archive not found: {args.archive}", file=sys.stderr)
                sys.exit(1)
            resolver = SourceFileResolver.from_archive_bytes(
                args.archive.read_bytes(), config=config,
            )
        else:
            resolver = SourceFileResolver.from_log_file(args.log, config=config)
    except ArchiveCorruptError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    log.debug(
        "Resolving with %d resolvers (archive: %s)",
        len(resolver.resolvers), resolver.archive is not None,
    )

    if args.list is not None:
        names = resolver.find_file_names(args.list)
        print(f"Found {len(names)} archived files", file=sys.stderr)
        _emit(names, args.output)
        return

    context = args.context if args.context is not None else config.context_lines
    if context < 0:
        print("Error: --context must be >= 0", file=sys.stderr)
        sys.exit(1)

    try:
        payload = lookup(
            resolver, args.file, line=args.line, find=args.find, context=context,
        )
    except LineOutOfRangeError as exc:
        print(f"Error: line {args.line} out of range: {exc}", file=sys.stderr)
        sys.exit(1)
    if payload is None:
        print(f"Error: source not found: {args.file}", file=sys.stderr)
        sys.exit(1)

    if "lines" in payload:
        print(f"Returning {len(payload['lines'])} lines", file=sys.stderr)
    _emit(payload, args.output)


if __name__ == "__main__":
    main()
