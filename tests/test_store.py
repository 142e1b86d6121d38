"""Tests for node lookups, file names and link resolution."""

from __future__ import annotations

import pytest

from docbookgen.atoms import Text
from docbookgen.model import (
    Access,
    ClassNode,
    CollectionNode,
    Doc,
    EnumNode,
    ExampleNode,
    FunctionNode,
    NamespaceNode,
    NodeKind,
    NodeStore,
    PageNode,
    QmlTypeNode,
    Status,
    ThreadSafeness,
)


def _documented(text: str = "Documented.") -> Doc:
    return Doc(brief=Text.from_string(text))


@pytest.fixture
def qt_store() -> NodeStore:
    store = NodeStore()
    core = store.add(NamespaceNode("Qt", doc=_documented()))
    store.add(EnumNode("AlignmentFlag", doc=_documented()), core)
    qstring = store.add(ClassNode("QString", doc=_documented()))
    store.add(FunctionNode("size", doc=_documented()), qstring)
    store.add(FunctionNode("arg", overload_number=2, doc=_documented()), qstring)
    store.add(FunctionNode("secret", access=Access.PRIVATE, doc=_documented()), qstring)
    return store


@pytest.mark.parametrize(
    ("node", "expected"),
    [
        (ClassNode("QString"), "qstring.xml"),
        (NamespaceNode("Qt"), "qt.xml"),
        (QmlTypeNode("Item", logical_module_name="QtQuick"), "qml-qtquick-item.xml"),
        (CollectionNode("QtCore", kind=NodeKind.COLLECTION_MODULE), "qtcore-module.xml"),
        (CollectionNode("QtQuick", kind=NodeKind.COLLECTION_QML_MODULE), "qtquick-qmlmodule.xml"),
        (ExampleNode("widgets/analogclock"), "widgets-analogclock-example.xml"),
        (PageNode("overview.html"), "overview.xml"),
    ],
)
def test_file_names(node, expected: str) -> None:
    store = NodeStore()
    store.add(node)
    assert store.file_name(node) == expected


def test_members_live_in_their_page(qt_store: NodeStore) -> None:
    size = qt_store.find_node("QString::size")
    assert qt_store.file_name(size) == "qstring.xml"
    assert qt_store.full_document_location(size) == "qstring.xml#size"
    arg = qt_store.find_node("QString::arg")
    assert qt_store.anchor(arg) == "arg-2"


def test_tree_accessors_return_nodes(qt_store: NodeStore) -> None:
    qstring = qt_store.find_class("QString")
    assert qt_store.parent(qt_store.root) is None
    assert qt_store.parent(qstring) is qt_store.root
    assert [child.name for child in qt_store.children(qstring)] == ["size", "arg", "secret"]
    assert qt_store.children(qt_store.find_node("QString::size")) == []
    group = qt_store.add(CollectionNode("strings", members=[qstring.node_id]))
    assert qt_store.members(group) == [qstring]


def test_link_for_node_skips_private_and_self(qt_store: NodeStore) -> None:
    qstring = qt_store.find_class("QString")
    size = qt_store.find_node("QString::size")
    secret = qt_store.find_node("QString::secret")
    assert qt_store.link_for_node(size, qstring) == "qstring.xml#size"
    assert qt_store.link_for_node(size, size) == ""
    assert qt_store.link_for_node(secret, qstring) == ""
    assert qt_store.link_for_node(qstring, None) == "qstring.xml"


def test_link_for_node_uses_output_subdirectories() -> None:
    store = NodeStore(use_output_subdirs=True)
    widget = store.add(ClassNode("QWidget", output_subdirectory="qtwidgets"))
    item = store.add(QmlTypeNode("Item", output_subdirectory="qtquick"))
    assert store.link_for_node(widget, item) == "../qtwidgets/qwidget.xml"
    assert store.link_for_node(item, item) == "qml-item.xml"


def test_resolve_link_by_scope_and_anchor(qt_store: NodeStore) -> None:
    qstring = qt_store.find_class("QString")
    node, href = qt_store.resolve_link("size()", qstring)
    assert node is qt_store.find_node("QString::size")
    assert href == "qstring.xml#size"
    node, href = qt_store.resolve_link("Qt::AlignmentFlag", None)
    assert href == "qt.xml#AlignmentFlag-enum"
    node, href = qt_store.resolve_link("QString#details", None)
    assert href == "qstring.xml#details"


def test_resolve_link_targets_and_urls(qt_store: NodeStore) -> None:
    page = qt_store.add(PageNode("intro.html", title="Introduction"))
    qt_store.add_target(page, "Getting Started")
    node, href = qt_store.resolve_link("Getting Started", None)
    assert node is page
    assert href == "intro.xml#getting-started"
    assert qt_store.resolve_link("Introduction", None) == (page, "intro.xml")
    assert qt_store.resolve_link("https://qt.io", None) == (None, "https://qt.io")
    assert qt_store.resolve_link("NoSuchThing", None) == (None, "")


def test_find_type_node_searches_outer_scopes(qt_store: NodeStore) -> None:
    qt = qt_store.find_node("Qt")
    enum = qt_store.find_node("Qt::AlignmentFlag")
    assert qt_store.find_type_node("AlignmentFlag", enum) is enum
    assert qt_store.find_type_node("AlignmentFlag", qt) is enum
    assert qt_store.find_type_node("AlignmentFlag", None) is None


def test_thread_safeness_hides_inherited_value() -> None:
    store = NodeStore()
    cls = store.add(ClassNode("Foo", thread_safeness=ThreadSafeness.REENTRANT))
    same = store.add(FunctionNode("a", thread_safeness=ThreadSafeness.REENTRANT), cls)
    unset = store.add(FunctionNode("b"), cls)
    safe = store.add(FunctionNode("c", thread_safeness=ThreadSafeness.THREAD_SAFE), cls)
    assert store.thread_safeness(same) is ThreadSafeness.UNSPECIFIED
    assert store.inherited_thread_safeness(unset) is ThreadSafeness.REENTRANT
    assert store.thread_safeness(safe) is ThreadSafeness.THREAD_SAFE


def test_class_listings_split_obsolete(qt_store: NodeStore) -> None:
    qt_store.add(ClassNode("QRegExp", status=Status.OBSOLETE, doc=_documented()))
    qt_store.add(ClassNode("QUndocumented"))
    assert [name for name, _ in qt_store.cpp_classes()] == ["QString"]
    assert [name for name, _ in qt_store.obsolete_classes()] == ["QRegExp"]
    assert [name for name, _ in qt_store.namespaces()] == ["Qt"]


def test_function_index_groups_overloads_by_parent(qt_store: NodeStore) -> None:
    other = qt_store.add(ClassNode("QByteArray", doc=_documented()))
    qt_store.add(FunctionNode("size", doc=_documented()), other)
    index = qt_store.function_index()
    assert list(index) == ["arg", "size"]
    assert list(index["size"]) == ["QByteArray", "QString"]


def test_legalese_groups_identical_texts() -> None:
    store = NodeStore()
    licence = "Licensed under the MIT license."
    first = store.add(PageNode("a", doc=Doc(legalese=Text.from_string(licence))))
    second = store.add(PageNode("b", doc=Doc(legalese=Text.from_string(licence))))
    [(text, nodes)] = store.legalese_texts()
    assert text.to_plain() == licence
    assert nodes == [first, second]


def test_doc_must_be_generated() -> None:
    store = NodeStore()
    page = store.add(PageNode("a"))
    external = store.add(PageNode("b", kind=NodeKind.EXTERNAL_PAGE))
    remote = store.add(PageNode("c", url="https://example.org/c"))
    function = store.add(FunctionNode("f"))
    bare = store.add(ClassNode("QBare"))
    hidden = store.add(ClassNode("QHidden", access=Access.PRIVATE, doc=_documented()))
    assert store.doc_must_be_generated(page)
    assert not store.doc_must_be_generated(external)
    assert not store.doc_must_be_generated(remote)
    assert not store.doc_must_be_generated(function)
    assert not store.doc_must_be_generated(bare)
    assert not store.doc_must_be_generated(hidden)
