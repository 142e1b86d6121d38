from __future__ import annotations

import json
import typing as typ
from pathlib import Path

import pytest

from docbookgen import cli

if typ.TYPE_CHECKING:
    from pytest_mock import MockerFixture

MODEL = """
nodes:
  - key: qstring
    kind: class
    name: QString
    brief: The QString class provides a Unicode character string.
    body: QString stores a string of 16-bit QChars.
  - key: size
    kind: function
    parent: qstring
    name: size
    return_type: int
    body: Returns the number of characters in this string.
  - key: overview
    kind: page
    name: overview.html
    title: Overview
    body: Start here.
"""

BROKEN_EXAMPLE = """
  - key: clock
    kind: example
    name: clock
    title: Clock
    body: Shows the time.
    files: [missing.cpp]
"""


def _write_project(tmp_path: Path, model: str = MODEL) -> tuple[Path, Path]:
    model_path = tmp_path / "model.yaml"
    model_path.write_text(model, encoding="utf-8")
    config_path = tmp_path / "docbookgen.yaml"
    config_path.write_text(
        "project: Qt\nbuild_version: '6.5'\noutput_dir: out\n", encoding="utf-8"
    )
    return model_path, config_path


def test_generate_writes_documents_and_manifest(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    model_path, config_path = _write_project(tmp_path)
    monkeypatch.chdir(tmp_path)

    cli.generate(model=model_path, config=config_path)

    out = capsys.readouterr().out.splitlines()
    assert out == [
        "wrote out/qstring.xml",
        "wrote out/overview.xml",
        "wrote out/.docbookgen-qt-manifest.json",
    ]
    manifest = json.loads((tmp_path / "out" / ".docbookgen-qt-manifest.json").read_text())
    assert manifest["files"] == ["qstring.xml", "overview.xml"]
    assert manifest["diagnostics"] == []
    assert b"QString Class" in (tmp_path / "out" / "qstring.xml").read_bytes()


def test_generate_limits_output_to_node(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    model_path, config_path = _write_project(tmp_path)
    monkeypatch.chdir(tmp_path)

    cli.generate(model=model_path, config=config_path, node="QString", output_dir=Path("dist"))

    assert (tmp_path / "dist" / "qstring.xml").exists()
    assert not (tmp_path / "dist" / "overview.xml").exists()
    assert not (tmp_path / "out").exists()
    assert "wrote dist/qstring.xml" in capsys.readouterr().out


def test_generate_starts_from_the_named_node(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, mocker: MockerFixture
) -> None:
    model_path, config_path = _write_project(tmp_path)
    monkeypatch.chdir(tmp_path)
    spy = mocker.spy(cli.DocBookGenerator, "generate")

    cli.generate(model=model_path, config=config_path, node="QString")

    [call] = spy.call_args_list
    _, start = call.args
    assert start.name == "QString"
    assert not (tmp_path / "out" / "overview.xml").exists()


def test_generate_rejects_unknown_node(tmp_path: Path) -> None:
    model_path, config_path = _write_project(tmp_path)
    with pytest.raises(ValueError, match="'QBogus' is not part of the model"):
        cli.generate(model=model_path, config=config_path, node="QBogus")


def test_generate_reports_warnings(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    model_path, config_path = _write_project(tmp_path, MODEL + BROKEN_EXAMPLE)
    monkeypatch.chdir(tmp_path)

    cli.generate(model=model_path, config=config_path)

    err = capsys.readouterr().err
    assert "warning: <unknown>: Cannot find file to quote from: 'missing.cpp'" in err
    manifest = json.loads((tmp_path / "out" / ".docbookgen-qt-manifest.json").read_text())
    assert [d["message"] for d in manifest["diagnostics"]] == [
        "Cannot find file to quote from: 'missing.cpp'"
    ]


def test_strict_generation_fails_on_warnings(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    model_path, config_path = _write_project(tmp_path, MODEL + BROKEN_EXAMPLE)
    monkeypatch.chdir(tmp_path)

    with pytest.raises(SystemExit) as excinfo:
        cli.generate(model=model_path, config=config_path, strict=True)
    assert excinfo.value.code == 1


def test_missing_config_file(tmp_path: Path) -> None:
    model_path, _ = _write_project(tmp_path)
    with pytest.raises(FileNotFoundError, match="not found"):
        cli.generate(model=model_path, config=tmp_path / "absent.yaml")
