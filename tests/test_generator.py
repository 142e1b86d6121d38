"""Tests for the generation run: tree walk, output sinks and manifest."""

from __future__ import annotations

import typing as typ

from docbookgen.atoms import Text
from docbookgen.config import GeneratorConfig
from docbookgen.generator import DirectorySink, DocBookGenerator, MemorySink
from docbookgen.model import (
    Access,
    ClassNode,
    Doc,
    FunctionNode,
    NodeKind,
    NodeStore,
    PageNode,
    Status,
)

if typ.TYPE_CHECKING:
    from pathlib import Path


def _documented() -> Doc:
    return Doc(brief=Text.from_string("Documented."))


def _populated_store() -> NodeStore:
    store = NodeStore()
    store.add(PageNode("overview.html", title="Overview", doc=_documented()))
    qstring = store.add(ClassNode("QString", doc=_documented()))
    store.add(FunctionNode("size", doc=_documented()), qstring)
    store.add(ClassNode("QStringData", status=Status.INTERNAL, doc=_documented()))
    store.add(PageNode("external.html", kind=NodeKind.EXTERNAL_PAGE))
    store.add(PageNode("remote", url="https://example.org/remote"))
    hidden = store.add(ClassNode("QHidden", access=Access.PRIVATE))
    store.add(ClassNode("QNested", doc=_documented()), hidden)
    return store


def test_generate_walks_the_tree(tmp_path: Path) -> None:
    sink = MemorySink()
    generator = DocBookGenerator(
        _populated_store(), GeneratorConfig(project="Qt", output_dir=tmp_path), sink=sink
    )
    documents = generator.generate()
    assert [document.file_name for document in documents] == ["overview.xml", "qstring.xml"]
    assert set(sink.documents) == {"overview.xml", "qstring.xml"}
    assert documents[1].text.startswith("<?xml")


def test_internal_nodes_are_generated_on_request(tmp_path: Path) -> None:
    config = GeneratorConfig(project="Qt", output_dir=tmp_path, show_internal=True)
    generator = DocBookGenerator(_populated_store(), config, sink=MemorySink())
    names = [document.file_name for document in generator.generate()]
    assert "qstringdata.xml" in names


def test_generate_from_a_subtree(tmp_path: Path) -> None:
    store = _populated_store()
    generator = DocBookGenerator(
        store, GeneratorConfig(project="Qt", output_dir=tmp_path), sink=MemorySink()
    )
    documents = generator.generate(store.find_class("QString"))
    assert [document.file_name for document in documents] == ["qstring.xml"]


def test_default_sink_writes_below_output_dir(tmp_path: Path) -> None:
    output_dir = tmp_path / "docbook"
    generator = DocBookGenerator(
        _populated_store(), GeneratorConfig(project="Qt", output_dir=output_dir)
    )
    generator.generate()
    assert isinstance(generator.sink, DirectorySink)
    assert (output_dir / "qstring.xml").read_bytes().startswith(b"<?xml")
    assert sorted(path.name for path in generator.sink.written) == ["overview.xml", "qstring.xml"]


def test_manifest_summarizes_the_run(tmp_path: Path) -> None:
    generator = DocBookGenerator(
        _populated_store(), GeneratorConfig(project="Qt", output_dir=tmp_path), sink=MemorySink()
    )
    generator.generate()
    generator.record_image(None, "images/logo.png")
    manifest = generator.manifest()
    assert manifest["format"] == "DocBook"
    assert manifest["project"] == "Qt"
    assert manifest["files"] == ["overview.xml", "qstring.xml"]
    assert manifest["images"] == [{"file": "images/logo.png", "document": "qstring.xml"}]
    assert manifest["diagnostics"] == []


def test_output_subdirectories_follow_config(tmp_path: Path) -> None:
    store = NodeStore()
    config = GeneratorConfig(project="Qt", output_dir=tmp_path, output_subdirs=True)
    DocBookGenerator(store, config, sink=MemorySink())
    assert store.use_output_subdirs
