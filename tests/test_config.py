"""Tests for loading the generator configuration file."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from docbookgen.config import (
    ConfigError,
    GeneratorConfig,
    build_generator_config,
    load_generator_config,
)


def _write_config(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "docbookgen.yaml"
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


def test_load_applies_defaults(tmp_path: Path) -> None:
    path = _write_config(tmp_path, "project: QtCore\n")
    config = load_generator_config(path)
    assert config.project == "QtCore"
    assert config.description == "QtCore Reference Documentation"
    assert config.natural_language == "en"
    assert config.output_dir == tmp_path / "docbook"
    assert not config.docbook_extensions


def test_load_resolves_relative_paths(tmp_path: Path) -> None:
    path = _write_config(
        tmp_path,
        """\
        project: Qt
        description: Qt 6 Manual
        natural_language: de
        build_version: "6.5"
        docbook_extensions: true
        output_dir: build/docbook
        example_dirs:
          - examples
          - /opt/qt/examples
        """,
    )
    config = load_generator_config(path)
    assert config.description == "Qt 6 Manual"
    assert config.natural_language == "de"
    assert config.build_version == "6.5"
    assert config.docbook_extensions
    assert config.output_dir == tmp_path / "build" / "docbook"
    assert config.example_dirs == [tmp_path / "examples", Path("/opt/qt/examples")]


def test_single_example_dir_string_is_accepted() -> None:
    config = build_generator_config({"example_dirs": "examples"}, base=Path("/src"))
    assert config.example_dirs == [Path("/src/examples")]


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ConfigError, match="outputdir"):
        build_generator_config({"project": "Qt", "outputdir": "x"})


def test_boolean_options_must_be_booleans() -> None:
    with pytest.raises(ConfigError, match="show_internal"):
        build_generator_config({"show_internal": "yes"})


def test_example_dirs_must_be_paths() -> None:
    with pytest.raises(ConfigError, match="example_dirs"):
        build_generator_config({"example_dirs": {"a": 1}})


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="not found"):
        load_generator_config(tmp_path / "missing.yaml")


def test_top_level_must_be_mapping(tmp_path: Path) -> None:
    path = _write_config(tmp_path, "- project\n")
    with pytest.raises(TypeError, match="mapping"):
        load_generator_config(path)


def test_empty_project_description_has_no_leading_space() -> None:
    assert GeneratorConfig().description == "Reference Documentation"
