"""Source locations carried by log nodes, and what a viewer shows for them.

Any log object with a file path and optional line number satisfies
:class:`HasSourceLocation`; the viewer asks :func:`resolve_source_view`
instead of branching on node types.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import PureWindowsPath
from typing import Protocol, runtime_checkable

from buildsources.chain import SourceFileResolver

NO_FILE_TEXT = "No file to display"


@runtime_checkable
class HasSourceLocation(Protocol):
    @property
    def source_file_path(self) -> str | None: ...

    @property
    def line_number(self) -> int | None: ...


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Plain HasSourceLocation; ``line_number`` is 0-based."""

    source_file_path: str | None
    line_number: int | None = None
    name: str | None = None


@dataclass(frozen=True, slots=True)
class SourceView:
    name: str
    text: str
    line_number: int | None
    found: bool


def _display_name(location: HasSourceLocation) -> str:
    name = getattr(location, "name", None)
    if name:
        return str(name)
    path = location.source_file_path
    if not path:
        return ""
    # PureWindowsPath splits on both separators
    return PureWindowsPath(path).name or path


def resolve_source_view(
    resolver: SourceFileResolver,
    location: HasSourceLocation,
) -> SourceView:
    """Resolve a location to the text a viewer should display.

    Unresolvable locations show NO_FILE_TEXT. A line number is kept only
    when it names an existing line of the resolved text.
    """
    name = _display_name(location)
    path = location.source_file_path
    source = resolver.get_text(path) if path else None
    if source is None:
        return SourceView(name=name, text=NO_FILE_TEXT, line_number=None, found=False)

    line = location.line_number
    if line is not None and not 0 <= line < source.line_count:
        line = None
    return SourceView(name=name, text=source.text, line_number=line, found=True)
