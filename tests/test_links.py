"""Tests for cross-reference links between documented entities."""

from __future__ import annotations

import typing as typ

from docbookgen._constants import DB_NAMESPACE, XLINK_NAMESPACE
from docbookgen.atoms import Text
from docbookgen.model import (
    Access,
    ClassNode,
    Doc,
    FunctionNode,
    PageNode,
    QmlTypeNode,
    RelatedClass,
    Status,
)

if typ.TYPE_CHECKING:
    from docbookgen.generator import DocBookGenerator
    from docbookgen.model import NodeStore

NS = {"db": DB_NAMESPACE}
HREF = f"{{{XLINK_NAMESPACE}}}href"
ROLE = f"{{{XLINK_NAMESPACE}}}role"


def _documented() -> Doc:
    return Doc(brief=Text.from_string("Documented."))


def test_link_closes_before_call_parenthesis(generator: DocBookGenerator, render) -> None:
    def write() -> None:
        generator.links.begin_link("qstring.xml#size", None, None)
        generator.links.generate_link("size()")
        generator.links.end_link()

    root = render(write)
    [link] = root.findall("db:link", NS)
    assert link.text == "size"
    assert link.tail == "()"
    assert not generator.state.in_link


def test_link_text_without_parenthesis_stays_inside(
    generator: DocBookGenerator, render
) -> None:
    def write() -> None:
        generator.links.begin_link("qstring.xml", None, None)
        generator.links.generate_link("QString")
        generator.links.end_link()

    root = render(write)
    assert root.findtext("db:link", namespaces=NS) == "QString"


def test_obsolete_targets_are_marked_unless_relative_shares_status(
    generator: DocBookGenerator, render, store: NodeStore
) -> None:
    old = store.add(ClassNode("QRegExp", status=Status.OBSOLETE))
    older = store.add(ClassNode("QRegExpValidator", status=Status.OBSOLETE))
    current = store.add(ClassNode("QRegularExpression"))

    def write() -> None:
        for relative in (current, older):
            generator.links.begin_link("qregexp.xml", old, relative)
            generator.links.generate_link("QRegExp")
            generator.links.end_link()

    root = render(write)
    assert [link.get("role") for link in root.findall("db:link", NS)] == ["obsolete", None]


def test_simple_link_without_href_writes_text(generator: DocBookGenerator, render) -> None:
    def write() -> None:
        generator.links.generate_simple_link("", "nowhere")
        generator.links.generate_simple_link("https://qt.io", "Qt")

    root = render(write)
    assert root.text == "nowhere"
    [link] = root.findall("db:link", NS)
    assert link.get(HREF) == "https://qt.io"


def test_full_name_link(generator: DocBookGenerator, render, store: NodeStore) -> None:
    cls = store.add(ClassNode("QString"))
    size = store.add(FunctionNode("size"), cls)
    root = render(lambda: generator.links.generate_full_name(size, None))
    link = root.find("db:link", NS)
    assert link.text == "QString::size"
    assert link.get(HREF) == "qstring.xml#size"
    assert link.get(ROLE) == "function"


def test_inherits_marks_non_public_bases(
    generator: DocBookGenerator, render, store: NodeStore
) -> None:
    first = store.add(ClassNode("QObject"))
    second = store.add(ClassNode("QPaintDevice"))
    widget = store.add(ClassNode("QWidget"))
    widget.bases.extend(
        [RelatedClass(first.node_id), RelatedClass(second.node_id, Access.PROTECTED)]
    )
    root = render(lambda: generator.links.generate_inherits(widget))
    assert "".join(root.itertext()) == "QObject and QPaintDevice (protected)"
    assert [link.get(HREF) for link in root.findall("db:link", NS)] == [
        "qobject.xml",
        "qpaintdevice.xml",
    ]


def test_sorted_names_skip_undocumented_and_private(
    generator: DocBookGenerator, render, store: NodeStore
) -> None:
    base = store.add(ClassNode("QAbstractButton", doc=_documented()))
    names = ("QRadioButton", "QCheckBox", "QPushButton")
    for name in names:
        derived = store.add(ClassNode(name, doc=_documented()))
        base.derived.append(RelatedClass(derived.node_id))
    hidden = store.add(ClassNode("QHidden", access=Access.PRIVATE, doc=_documented()))
    bare = store.add(ClassNode("QBare"))
    base.derived.extend([RelatedClass(hidden.node_id), RelatedClass(bare.node_id)])

    root = render(lambda: generator.links.generate_sorted_names(base, base.derived))
    assert "".join(root.itertext()) == "QCheckBox, QPushButton, and QRadioButton"


def test_sorted_qml_names_keep_qt_quick_subclasses_local(
    generator: DocBookGenerator, render, store: NodeStore
) -> None:
    item = store.add(QmlTypeNode("Item", logical_module_name="QtQuick"))
    rect = store.add(QmlTypeNode("Rectangle", logical_module_name="QtQuick"))
    chart = store.add(QmlTypeNode("ChartView", logical_module_name="QtCharts"))
    root = render(lambda: generator.links.generate_sorted_qml_names(item, [rect, chart]))
    assert "".join(root.itertext()) == "Rectangle"


def test_node_for_string_matches_locations_names_and_titles(
    generator: DocBookGenerator, store: NodeStore
) -> None:
    cls = store.add(ClassNode("QString"))
    size = store.add(FunctionNode("size"), cls)
    page = store.add(PageNode("intro.html", title="Introduction"))
    assert generator.links.node_for_string("qstring.xml#size") is size
    assert generator.links.node_for_string("QString") is cls
    assert generator.links.node_for_string("Introduction") is page
    assert generator.links.node_for_string("nothing") is None
