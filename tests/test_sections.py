"""Tests for grouping aggregate members into details sections."""

from __future__ import annotations

from docbookgen.model import (
    ClassNode,
    EnumNode,
    FunctionNode,
    Metaness,
    NamespaceNode,
    NodeKind,
    NodeStore,
    PropertyNode,
    QmlPropertyNode,
    QmlTypeNode,
    Sections,
    SharedCommentNode,
    Status,
    TypedefNode,
    VariableNode,
)


def _names(section) -> list[str]:
    return [member.name for member in section.members]


def test_class_members_are_grouped_in_declaration_order() -> None:
    store = NodeStore()
    cls = store.add(ClassNode("QWidget"))
    enum = store.add(EnumNode("Policy"), cls)
    store.add(TypedefNode("Policies", associated_enum_id=enum.node_id), cls)
    store.add(PropertyNode("width"), cls)
    store.add(FunctionNode("show"), cls)
    store.add(FunctionNode("hide"), cls)
    store.add(VariableNode("staticMetaObject"), cls)
    store.add(FunctionNode("qHash", related_nonmember=True), cls)
    store.add(FunctionNode("Q_OBJECT", metaness=Metaness.MACRO), cls)
    store.add(FunctionNode("repaint", status=Status.OBSOLETE), cls)
    store.add(FunctionNode("debug", status=Status.INTERNAL), cls)

    types, properties, functions, variables, related, macros = Sections(store, cls).details
    assert types.title == "Member Type Documentation"
    assert _names(types) == ["Policy"]
    assert _names(properties) == ["width"]
    assert _names(functions) == ["show", "hide"]
    assert [m.name for m in functions.obsolete_members] == ["repaint"]
    assert _names(variables) == ["staticMetaObject"]
    assert _names(related) == ["qHash"]
    assert _names(macros) == ["Q_OBJECT"]


def test_internal_members_shown_on_request() -> None:
    store = NodeStore()
    cls = store.add(ClassNode("Foo"))
    store.add(FunctionNode("debug", status=Status.INTERNAL), cls)
    assert Sections(store, cls).details[2].is_empty
    assert _names(Sections(store, cls, show_internal=True).details[2]) == ["debug"]


def test_shared_comment_represents_its_members() -> None:
    store = NodeStore()
    cls = store.add(ClassNode("Foo"))
    first = store.add(FunctionNode("x"), cls)
    second = store.add(FunctionNode("y"), cls)
    shared = store.add(SharedCommentNode("x", collective=[first.node_id, second.node_id]), cls)
    first.shared_comment_id = second.shared_comment_id = shared.node_id

    functions = Sections(store, cls).details[2]
    assert functions.members == [shared]


def test_namespace_sections() -> None:
    store = NodeStore()
    ns = store.add(NamespaceNode("Qt"))
    store.add(NamespaceNode("Literals"), ns)
    store.add(ClassNode("QFlag"), ns)
    store.add(FunctionNode("qHash"), ns)
    sections = Sections(store, ns)
    assert [section.title for section in sections.details if not section.is_empty] == [
        "Namespaces",
        "Classes",
        "Function Documentation",
    ]


def test_qml_sections_split_attached_members() -> None:
    store = NodeStore()
    item = store.add(QmlTypeNode("Item"))
    store.add(QmlPropertyNode("x"), item)
    store.add(QmlPropertyNode("index", is_attached=True), item)
    store.add(FunctionNode("clicked", metaness=Metaness.QML_SIGNAL), item)
    store.add(FunctionNode("forceActiveFocus", metaness=Metaness.QML_METHOD), item)
    group = store.add(SharedCommentNode("anchors", kind=NodeKind.PROPERTY_GROUP), item)

    details = Sections(store, item).details
    assert details[0].members == [store.children(item)[0], group]
    assert _names(details[1]) == ["index"]
    assert _names(details[2]) == ["clicked"]
    assert _names(details[4]) == ["forceActiveFocus"]


def test_obsolete_sections() -> None:
    store = NodeStore()
    cls = store.add(ClassNode("Foo"))
    store.add(FunctionNode("old", status=Status.OBSOLETE), cls)
    sections = Sections(store, cls)
    assert sections.has_obsolete_members()
    assert [s.title for s in sections.obsolete_sections()] == ["Member Function Documentation"]
