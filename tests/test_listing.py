"""Tests for example source listings."""

from __future__ import annotations

import typing as typ

import pytest

from docbookgen.atoms import AtomKind
from docbookgen.generator.listing import (
    example_file_name,
    find_example_file,
    listing_language,
    listing_text,
    read_example_file,
)

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.mark.parametrize(
    ("file_name", "language"),
    [
        ("main.cpp", "cpp"),
        ("view.qml", "qml"),
        ("app.js", "js"),
        ("tool.py", "python"),
        ("notes.unknownext", "cpp"),
    ],
)
def test_listing_language(file_name: str, language: str) -> None:
    assert listing_language(file_name) == language


@pytest.mark.parametrize(
    ("file_name", "kind", "strings"),
    [
        ("main.cpp", AtomKind.CODE, ("int main();", "cpp")),
        ("view.qml", AtomKind.QML, ("Item {}",)),
        ("app.js", AtomKind.JAVASCRIPT, ("let x;",)),
    ],
)
def test_listing_text_wraps_code(file_name: str, kind: AtomKind, strings: tuple[str, ...]) -> None:
    [atom] = list(listing_text(file_name, strings[0]))
    assert atom.kind is kind
    assert atom.strings == strings


def test_example_file_name() -> None:
    assert example_file_name("analogclock/main.cpp", "QtGui") == "qtgui-analogclock-main-cpp.xml"


def test_example_files_are_searched_in_order(tmp_path: Path) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    (second / "clock").mkdir(parents=True)
    (second / "clock" / "main.cpp").write_text("int main() {}\n", encoding="utf-8")
    first.mkdir()

    found = find_example_file("clock/main.cpp", [first, second])
    assert found == second / "clock" / "main.cpp"
    assert read_example_file("clock/main.cpp", [first, second]) == "int main() {}\n"


def test_missing_or_unreadable_example_files(tmp_path: Path) -> None:
    (tmp_path / "binary.cpp").write_bytes(b"\xff\xfe\x00bad")
    assert find_example_file("nope.cpp", [tmp_path]) is None
    assert read_example_file("nope.cpp", [tmp_path]) is None
    assert read_example_file("binary.cpp", [tmp_path]) is None
