"""Tests for the generated and annotated lists."""

from __future__ import annotations

import typing as typ

import pytest
from lxml import etree

from docbookgen._constants import DB_NAMESPACE, XLINK_NAMESPACE, XML_NAMESPACE
from docbookgen.atoms import Text
from docbookgen.config import GeneratorConfig
from docbookgen.generator import DocBookGenerator, MemorySink
from docbookgen.generator.lists import compact_bucket, compact_key
from docbookgen.generator.state import GenerationState
from docbookgen.model import build_model

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from docbookgen.model import NodeStore

NS = {"db": DB_NAMESPACE}
HREF = f"{{{XLINK_NAMESPACE}}}href"
XML_ID = f"{{{XML_NAMESPACE}}}id"

MODEL = {
    "nodes": [
        {"key": "a", "kind": "class", "name": "QAbstractItemModel", "brief": "Model base."},
        {"key": "b", "kind": "class", "name": "QString", "brief": "Strings."},
        {"key": "c", "kind": "class", "name": "Accel", "brief": "Shortcuts."},
        {
            "key": "d",
            "kind": "class",
            "name": "QStandardItemModel",
            "brief": "Generic model.",
            "bases": ["a"],
        },
        {"key": "arg", "kind": "function", "parent": "b", "name": "arg", "brief": "Args."},
        {"key": "size", "kind": "function", "parent": "b", "name": "size", "brief": "Size."},
        {
            "key": "old",
            "kind": "function",
            "parent": "b",
            "name": "ascii",
            "brief": "Old.",
            "status": "obsolete",
        },
        {
            "key": "widgets",
            "kind": "group",
            "name": "widgets",
            "title": "Widgets",
            "members": ["b", "c"],
        },
        {
            "key": "about",
            "kind": "page",
            "name": "about.html",
            "title": "About",
            "legalese": "MIT licensed.",
        },
    ]
}


@pytest.fixture
def list_store() -> NodeStore:
    return build_model(MODEL)


@pytest.fixture
def list_generator(list_store: NodeStore) -> DocBookGenerator:
    return DocBookGenerator(list_store, GeneratorConfig(project="Qt"), sink=MemorySink())


@pytest.fixture
def render_list(
    list_generator: DocBookGenerator,
) -> cabc.Callable[[str], etree._Element]:
    def run(selector: str) -> etree._Element:
        return _render(
            list_generator, lambda: list_generator.lists.generate_selected_list(selector, None)
        )

    return run


def _render(generator: DocBookGenerator, write: cabc.Callable[[], object]) -> etree._Element:
    generator.state = GenerationState(file_name="lists.xml")
    writer = generator.state.writer
    writer.start_element("article")
    write()
    writer.end_element()
    return etree.fromstring(writer.finish())


def _text_of(element) -> str:
    return "".join(element.itertext()).strip()


def test_compact_keys_and_buckets() -> None:
    assert compact_key("QFoo::QBar", "Q") == "bar"
    assert compact_bucket("") == 36
    assert compact_bucket("zoo") == 35


def test_class_hierarchy_nests_subclasses(render_list) -> None:
    root = render_list("classhierarchy")
    [top] = root.findall("db:itemizedlist", NS)
    items = top.findall("db:listitem", NS)
    assert [item.findtext("db:para/db:link", namespaces=NS) for item in items] == [
        "Accel",
        "QAbstractItemModel",
        "QString",
    ]
    [nested] = items[1].findall("db:itemizedlist/db:listitem", NS)
    assert nested.find("db:para/db:link", NS).get(HREF) == "qstandarditemmodel.xml"


def test_compact_list_buckets_by_letter(render_list) -> None:
    root = render_list("classes")
    lists = root.findall("db:variablelist", NS)
    assert [vl.get("role") for vl in lists] == ["classes", "classes"]
    terms = [vl.findtext("db:varlistentry/db:term/db:emphasis", namespaces=NS) for vl in lists]
    assert terms == ["A", "Q"]
    q_links = lists[1].findall("db:varlistentry/db:listitem/db:para/db:link", NS)
    assert [link.text for link in q_links] == [
        "QAbstractItemModel",
        "QStandardItemModel",
        "QString",
    ]
    assert q_links[2].get(HREF) == "qstring.xml"


def test_obsolete_member_list_links_to_obsolete_section(render_list) -> None:
    root = render_list("obsoletecppmembers")
    [link] = root.findall(".//db:link", NS)
    assert link.get(HREF) == "qstring.xml#obsolete"
    assert link.text == "QString"


def test_annotated_list_pairs_names_with_briefs(render_list) -> None:
    root = render_list("annotatedclasses")
    [vl] = root.findall("db:variablelist", NS)
    assert vl.get("role") == "annotatedclasses"
    entries = vl.findall("db:varlistentry", NS)
    assert [_text_of(entry.find("db:term", NS)) for entry in entries][:2] == [
        "Accel",
        "QAbstractItemModel",
    ]
    assert entries[0].findtext("db:listitem/db:para", namespaces=NS) == "Shortcuts."


def test_function_index_writes_letter_anchors(render_list) -> None:
    root = render_list("functionindex")
    [bar] = root.findall("db:simplelist", NS)
    assert bar.get("role") == "functionIndex"
    members = bar.findall("db:member", NS)
    assert len(members) == 26
    assert members[0].get(HREF) == "#a"
    items = root.findall("db:itemizedlist/db:listitem", NS)
    assert [_text_of(item).split(":")[0] for item in items] == ["arg", "size"]
    anchors = [a.get(XML_ID) for a in root.iterfind(".//db:anchor", NS)]
    assert anchors == list("abcdefghijklmnopqrs")


def test_legalese_list(render_list) -> None:
    root = render_list("legalese")
    assert "MIT licensed." in (root.text or "")
    [link] = root.findall("db:itemizedlist/db:listitem/db:para/db:link", NS)
    assert link.text == "About"
    assert link.get(HREF) == "about.xml"


def test_unknown_selectors_and_groups_warn(list_generator: DocBookGenerator, render_list) -> None:
    render_list("bogus")
    list_generator.lists.generate_group_list("nope", None)
    assert list_generator.diagnostics.messages() == [
        "Unknown generated list 'bogus'",
        "No such group 'nope'",
    ]


def test_group_members(list_generator: DocBookGenerator) -> None:
    text = Text().append("annotated-list", "widgets")
    root = _render(list_generator, lambda: list_generator.interpreter.generate_text(text, None))
    [vl] = root.findall("db:variablelist", NS)
    assert vl.get("role") == "widgets"
    terms = [_text_of(term) for term in vl.iterfind("db:varlistentry/db:term", NS)]
    assert terms == ["QString", "Accel"]
