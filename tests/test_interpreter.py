"""Tests for interpreting atom chains into DocBook."""

from __future__ import annotations

import logging
import typing as typ

import pytest

from docbookgen._constants import DB_NAMESPACE, XLINK_NAMESPACE, XML_NAMESPACE
from docbookgen.atoms import (
    FORMATTING_BOLD,
    FORMATTING_LINK,
    FORMATTING_PARAMETER,
    FORMATTING_SUBSCRIPT,
    FORMATTING_TELETYPE,
    LIST_BULLET,
    LIST_NUMERIC,
    LIST_VALUE,
    AtomKind,
    Text,
)
from docbookgen.model.nodes import (
    ClassNode,
    Doc,
    EnumItem,
    EnumNode,
    FunctionNode,
    PageNode,
    PropertyNode,
    Status,
)

if typ.TYPE_CHECKING:
    from docbookgen.generator import DocBookGenerator
    from docbookgen.model.store import NodeStore

NS = {"db": DB_NAMESPACE}
HREF = f"{{{XLINK_NAMESPACE}}}href"
XML_ID = f"{{{XML_NAMESPACE}}}id"

K = AtomKind


def _text_of(element) -> str:
    return "".join(element.itertext()).strip()


def _local_name(element) -> str:
    return element.tag.rpartition("}")[2]


def test_empty_text_generates_nothing(generator: DocBookGenerator) -> None:
    assert not generator.interpreter.generate_text(Text(), None)


def test_paragraph_is_balanced(generator: DocBookGenerator, render) -> None:
    text = Text.from_atoms((K.PARA_LEFT,), (K.STRING, "Hello world."), (K.PARA_RIGHT,))
    depths: list[int] = []

    def write() -> None:
        generator.interpreter.generate_text(text, None)
        depths.append(generator.state.writer.depth)

    root = render(write)
    assert root.findtext("db:para", namespaces=NS) == "Hello world."
    assert depths == [1]


@pytest.mark.parametrize(
    ("formatting", "xpath"),
    [
        (FORMATTING_BOLD, "db:para/db:emphasis[@role='bold']"),
        (FORMATTING_TELETYPE, "db:para/db:code"),
        (FORMATTING_PARAMETER, "db:para/db:code[@role='parameter']"),
        (FORMATTING_SUBSCRIPT, "db:para/db:sub"),
    ],
)
def test_inline_formatting(render_text, formatting: str, xpath: str) -> None:
    text = Text.from_atoms(
        (K.PARA_LEFT,),
        (K.FORMATTING_LEFT, formatting),
        (K.STRING, "word"),
        (K.FORMATTING_RIGHT, formatting),
        (K.PARA_RIGHT,),
    )
    [element] = render_text(text).xpath(xpath, namespaces=NS)
    assert element.text == "word"


def _section(level: str, heading: str) -> list[tuple[typ.Any, ...]]:
    return [
        (K.SECTION_LEFT, level),
        (K.SECTION_HEADING_LEFT,),
        (K.STRING, heading),
        (K.SECTION_HEADING_RIGHT,),
    ]


def test_sections_nest_by_level(render_text) -> None:
    text = Text.from_atoms(
        *_section("1", "Getting Started"),
        (K.PARA_LEFT,),
        (K.STRING, "Intro."),
        (K.PARA_RIGHT,),
        *_section("2", "Installing"),
        (K.SECTION_RIGHT, "2"),
        (K.SECTION_RIGHT, "1"),
        *_section("1", "Next Steps"),
        (K.SECTION_RIGHT, "1"),
    )
    root = render_text(text, PageNode("intro"))
    outer = root.findall("db:section", NS)
    assert [section.get(XML_ID) for section in outer] == ["getting-started", "next-steps"]
    assert outer[0].findtext("db:title", namespaces=NS) == "Getting Started"
    [inner] = outer[0].findall("db:section", NS)
    assert inner.findtext("db:title", namespaces=NS) == "Installing"
    assert not outer[1].findall("db:section", NS)


@pytest.mark.parametrize(("output_format", "expected"), [("DocBook", "yes"), ("HTML", "no")])
def test_conditional_branches(render_text, output_format: str, expected: str) -> None:
    text = Text.from_atoms(
        (K.FORMAT_IF, output_format),
        (K.STRING, "yes"),
        (K.FORMAT_ELSE,),
        (K.STRING, "no"),
        (K.FORMAT_ENDIF,),
    )
    assert _text_of(render_text(text)) == expected


def test_empty_docbook_branch_is_reported(generator: DocBookGenerator, render_text) -> None:
    text = Text.from_atoms((K.FORMAT_IF, "docbook"), (K.FORMAT_ENDIF,))
    root = render_text(text)
    assert root.findtext("db:emphasis[@role='bold']", namespaces=NS) == "<Missing DocBook>"
    assert generator.diagnostics.messages() == ["Output format DocBook not handled test.xml"]


def _value_list(*entries: tuple[str, str]) -> Text:
    text = Text().append(K.LIST_LEFT, LIST_VALUE)
    for name, description in entries:
        text.append(K.LIST_TAG_LEFT, LIST_VALUE).append(K.STRING, name)
        text.append(K.LIST_TAG_RIGHT, LIST_VALUE).append(K.LIST_ITEM_LEFT, LIST_VALUE)
        text.append_string(description)
        text.append(K.LIST_ITEM_RIGHT, LIST_VALUE)
    return text.append(K.LIST_RIGHT, LIST_VALUE)


def test_enum_value_table_with_descriptions(store: NodeStore, render_text) -> None:
    cls = store.add(ClassNode("QFoo"))
    enum = store.add(EnumNode("Option", items=[EnumItem("A", "0x1"), EnumItem("B")]), cls)
    root = render_text(_value_list(("A", "First option."), ("B", "")), enum)

    [table] = root.findall("db:informaltable", NS)
    headers = [th.text for th in table.findall("db:thead/db:tr/db:th", NS)]
    assert headers == ["Constant", "Value", "Description"]
    first, second = table.findall("db:tr", NS)
    cells = first.findall("db:td", NS)
    assert [_text_of(cell) for cell in cells] == ["QFoo::A", "0x1", "First option."]
    assert cells[0].find("db:para/db:code/db:emphasis/db:link", NS).get(HREF) == "qfoo.xml"
    assert [_text_of(cell) for cell in second.findall("db:td", NS)] == ["QFoo::B", "?", ""]


def test_enum_value_table_without_descriptions(render_text) -> None:
    root = render_text(_value_list(("Yes", ""), ("No", "")))
    [table] = root.findall("db:informaltable", NS)
    assert [th.text for th in table.findall("db:thead/db:tr/db:th", NS)] == ["Constant"]
    rows = table.findall("db:tr", NS)
    assert [_text_of(row) for row in rows] == ["Yes", "No"]


def test_tables_report_bad_row_attributes(generator: DocBookGenerator, render_text) -> None:
    text = Text.from_atoms(
        (K.TABLE_LEFT, "borderless", "80%"),
        (K.TABLE_HEADER_LEFT,),
        (K.TABLE_ITEM_LEFT, "1,1"),
        (K.STRING, "Name"),
        (K.TABLE_ITEM_RIGHT,),
        (K.TABLE_HEADER_RIGHT,),
        (K.TABLE_ROW_LEFT, 'class="odd" title'),
        (K.TABLE_ITEM_LEFT, "2,1"),
        (K.STRING, "Qt"),
        (K.TABLE_ITEM_RIGHT,),
        (K.TABLE_ROW_RIGHT,),
        (K.TABLE_RIGHT,),
    )
    root = render_text(text)
    [table] = root.findall("db:informaltable", NS)
    assert table.get("style") == "borderless"
    assert table.get("width") == "80%"
    assert table.findtext("db:thead/db:tr/db:th", namespaces=NS).strip() == "Name"
    [row] = table.findall("db:tr", NS)
    assert row.get("class") == "odd"
    assert row.find("db:td", NS).get("colspan") == "2"
    assert generator.diagnostics.messages() == [
        'Error when parsing attributes for the table: got "class="odd" title"'
    ]
    assert generator.state.num_table_rows == 1


def test_every_atom_kind_has_a_handler(generator: DocBookGenerator) -> None:
    assert set(generator.interpreter.handled_kinds()) == set(AtomKind)


def test_unknown_command_placeholder(render_text) -> None:
    root = render_text(Text.from_atoms((K.UNKNOWN_COMMAND, "frobnicate")))
    emphasis = root.find("db:emphasis[@role='bold']", NS)
    assert emphasis.text == "<Unknown command>"
    assert emphasis.findtext("db:code", namespaces=NS) == "frobnicate"


def test_images_are_recorded(generator: DocBookGenerator, store: NodeStore, render_text) -> None:
    store.register_image("logo.png", "images/logo.png")
    text = Text.from_atoms(
        (K.IMAGE, "logo.png"),
        (K.IMAGE_TEXT, "The Qt logo"),
        (K.IMAGE, "missing.png"),
        (K.IMAGE_TEXT, ""),
    )
    root = render_text(text)
    found, missing = root.findall("db:mediaobject", NS)
    assert found.findtext("db:alt", namespaces=NS) == "The Qt logo"
    data = found.find("db:imageobject/db:imagedata", NS)
    assert data.get("fileref") == "images/logo.png"
    assert missing.findtext("db:textobject/db:para/db:emphasis", namespaces=NS) == (
        "[Missing image missing.png]"
    )
    assert [image.as_dict() for image in generator.images] == [
        {"file": "images/logo.png", "document": "test.xml"}
    ]


def test_links_resolve_or_fall_back_to_text(store: NodeStore, render_text) -> None:
    qstring = store.add(ClassNode("QString", doc=Doc(brief=Text.from_string("Strings."))))
    store.add(FunctionNode("size"), qstring)
    text = Text.from_atoms(
        (K.PARA_LEFT,),
        (K.LINK, "QString"),
        (K.FORMATTING_LEFT, FORMATTING_LINK),
        (K.STRING, "QString"),
        (K.FORMATTING_RIGHT, FORMATTING_LINK),
        (K.STRING, " and "),
        (K.LINK, "Nowhere"),
        (K.FORMATTING_LEFT, FORMATTING_LINK),
        (K.STRING, "Nowhere"),
        (K.FORMATTING_RIGHT, FORMATTING_LINK),
        (K.STRING, " and "),
        (K.AUTO_LINK, "QString::size()"),
        (K.PARA_RIGHT,),
    )
    para = render_text(text).find("db:para", NS)
    links = para.findall("db:link", NS)
    assert [(link.get(HREF), link.text) for link in links] == [
        ("qstring.xml", "QString"),
        ("qstring.xml#size", "QString::size"),
    ]
    assert _text_of(para) == "QString and Nowhere and QString::size()"


@pytest.mark.parametrize(
    ("referrer", "linked"), [("current", False), ("obsolete", True), ("member", True)]
)
def test_auto_links_to_obsolete_targets(
    store: NodeStore, render_text, referrer: str, linked: bool
) -> None:
    target = store.add(
        ClassNode("QRegExp", status=Status.OBSOLETE, doc=Doc(brief=Text.from_string("Old.")))
    )
    match referrer:
        case "current":
            relative = store.add(ClassNode("QFoo"))
        case "obsolete":
            relative = store.add(ClassNode("QOldFoo", status=Status.OBSOLETE))
        case _:
            relative = store.add(FunctionNode("pattern"), target)
    text = Text.from_atoms((K.PARA_LEFT,), (K.AUTO_LINK, "QRegExp"), (K.PARA_RIGHT,))
    para = render_text(text, relative).find("db:para", NS)
    assert _text_of(para) == "QRegExp"
    hrefs = [link.get(HREF) for link in para.findall("db:link", NS)]
    assert hrefs == (["qregexp.xml"] if linked else [])


def test_generated_list_inside_paragraph_keeps_paragraphs_balanced(
    store: NodeStore, render_text, caplog: pytest.LogCaptureFixture
) -> None:
    store.add(
        PageNode("about.html", title="About", doc=Doc(legalese=Text.from_string("MIT licensed.")))
    )
    text = Text.from_atoms(
        (K.PARA_LEFT,),
        (K.STRING, "x"),
        (K.GENERATED_LIST, "legalese"),
        (K.STRING, "y"),
        (K.PARA_RIGHT,),
        (K.PARA_LEFT,),
        (K.STRING, "z"),
        (K.PARA_RIGHT,),
    )
    with caplog.at_level(logging.WARNING):
        root = render_text(text, PageNode("licenses"))
    first, second = root.findall("db:para", NS)
    assert first.find("db:itemizedlist", NS) is not None
    assert _text_of(first).endswith("y")
    assert _text_of(second) == "z"
    assert "still open" not in caplog.text


def test_property_brief_is_rewritten(render_text) -> None:
    prop = PropertyNode("width", doc=Doc(brief=Text.from_string("the width of the widget")))
    text = Text.from_atoms(
        (K.BRIEF_LEFT,), (K.STRING, "the width of the widget"), (K.BRIEF_RIGHT,)
    )
    root = render_text(text, prop)
    assert root.findtext("db:para", namespaces=NS) == "This property holds the width of the widget"


def test_brief_is_skipped_without_a_brief(render_text) -> None:
    text = Text.from_atoms((K.BRIEF_LEFT,), (K.STRING, "Hidden"), (K.BRIEF_RIGHT,))
    assert _text_of(render_text(text, ClassNode("Foo"))) == ""


def test_code_listings(render_text) -> None:
    text = Text.from_atoms(
        (K.CODE, "int x = 0;"),
        (K.CODE, "print(x)", "py"),
        (K.CODE_OLD, "foo(1);"),
        (K.CODE_NEW, "bar(1);"),
    )
    root = render_text(text)
    listings = root.findall("db:programlisting", NS)
    assert [(p.get("language"), p.get("role"), p.text) for p in listings] == [
        ("cpp", None, "int x = 0;"),
        ("py", None, "print(x)"),
        ("cpp", "bad", "foo(1);"),
        ("cpp", "new", "bar(1);"),
    ]
    assert [p.text for p in root.findall("db:para", NS)] == [
        "For example, if you have code like",
        "you can rewrite it as",
    ]


def test_lists_close_the_open_paragraph(render_text) -> None:
    text = Text.from_atoms(
        (K.PARA_LEFT,),
        (K.STRING, "Steps:"),
        (K.LIST_LEFT, LIST_NUMERIC),
        (K.LIST_ITEM_NUMBER, "3"),
        (K.LIST_ITEM_LEFT, LIST_NUMERIC),
        (K.STRING, "Build"),
        (K.LIST_ITEM_RIGHT, LIST_NUMERIC),
        (K.LIST_RIGHT, LIST_NUMERIC),
        (K.LIST_LEFT, LIST_BULLET),
        (K.LIST_ITEM_LEFT, LIST_BULLET),
        (K.STRING, "Run"),
        (K.LIST_ITEM_RIGHT, LIST_BULLET),
        (K.LIST_RIGHT, LIST_BULLET),
        (K.PARA_RIGHT,),
    )
    root = render_text(text)
    assert [_local_name(child) for child in root] == ["para", "orderedlist", "itemizedlist"]
    ordered = root.find("db:orderedlist", NS)
    assert ordered.get("startingnumber") == "3"
    assert ordered.get("numeration") == "arabic"
    assert _text_of(root.find("db:itemizedlist/db:listitem", NS)) == "Run"


def test_note_and_target(render_text) -> None:
    text = Text.from_atoms(
        (K.TARGET, "Getting Started"),
        (K.NOTE_LEFT,),
        (K.STRING, "Careful."),
        (K.NOTE_RIGHT,),
    )
    root = render_text(text)
    assert root.find("db:anchor", NS).get(XML_ID) == "getting-started"
    assert root.findtext("db:note/db:para", namespaces=NS) == "Careful."
