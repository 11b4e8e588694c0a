"""Tests for buildsources.resolvers."""
from __future__ import annotations

from pathlib import Path

import pytest

from buildsources.resolvers import FileResolver, LocalSourceFileResolver


class TestLocalSourceFileResolver:
    def test_reads_existing_file(self, tmp_path: Path) -> None:
        p = tmp_path / "Program.cs"
        p.write_text("class P {}\n", encoding="utf-8")
        assert LocalSourceFileResolver().resolve(str(p)) == "class P {}\n"

    def test_missing_file_is_none(self, tmp_path: Path) -> None:
        assert LocalSourceFileResolver().resolve(str(tmp_path / "nope.cs")) is None

    def test_directory_is_none(self, tmp_path: Path) -> None:
        assert LocalSourceFileResolver().resolve(str(tmp_path)) is None

    def test_empty_path_is_none(self) -> None:
        assert LocalSourceFileResolver().resolve("") is None

    def test_nul_in_path_is_none(self) -> None:
        assert LocalSourceFileResolver().resolve("bad\x00path") is None

    def test_custom_encodings(self, tmp_path: Path) -> None:
        p = tmp_path / "latin.txt"
        p.write_bytes(b"caf\xe9")
        resolver = LocalSourceFileResolver(("latin-1",))
        assert resolver.resolve(str(p)) == "café"

    def test_unknown_encoding_rejected_at_construction(self) -> None:
        with pytest.raises(ValueError, match="unknown encoding"):
            LocalSourceFileResolver(("bogus",))

    def test_is_a_file_resolver(self) -> None:
        assert isinstance(LocalSourceFileResolver(), FileResolver)

    def test_abstract_resolver_cannot_be_instantiated(self) -> None:
        with pytest.raises(TypeError):
            FileResolver()  # type: ignore[abstract]
