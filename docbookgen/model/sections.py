"""Group an aggregate's members into the categories of its details output."""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

from docbookgen.model.nodes import (
    Aggregate,
    ClassNode,
    EnumNode,
    FunctionNode,
    Metaness,
    NamespaceNode,
    Node,
    PropertyNode,
    QmlBasicTypeNode,
    QmlPropertyNode,
    QmlTypeNode,
    SharedCommentNode,
    TypedefNode,
    VariableNode,
)

if typ.TYPE_CHECKING:
    from docbookgen.model.store import NodeStore

_QML_SIGNALS = frozenset({Metaness.QML_SIGNAL, Metaness.QML_SIGNAL_HANDLER})


class SectionStyle(enum.Enum):
    """How members of a section are rendered by the synopsis renderer."""

    SUMMARY = "summary"
    DETAILS = "details"
    ALL_MEMBERS = "all-members"
    ACCESSORS = "accessors"


@dc.dataclass(slots=True)
class Section:
    """One titled category of members.

    ``inherited_members`` pairs a base aggregate with the number of members
    of this category inherited from it.
    """

    title: str
    singular: str
    plural: str
    style: SectionStyle = SectionStyle.DETAILS
    members: list[Node] = dc.field(default_factory=list)
    obsolete_members: list[Node] = dc.field(default_factory=list)
    inherited_members: list[tuple[Aggregate, int]] = dc.field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.members and not self.obsolete_members

    def insert(self, node: Node) -> None:
        if node.is_obsolete:
            self.obsolete_members.append(node)
        else:
            self.members.append(node)


def _cpp_class_sections() -> list[Section]:
    return [
        Section("Member Type Documentation", "member", "members"),
        Section("Property Documentation", "member", "members"),
        Section("Member Function Documentation", "member", "members"),
        Section("Member Variable Documentation", "member", "members"),
        Section("Related Non-Members", "member", "members"),
        Section("Macro Documentation", "member", "members"),
    ]


def _namespace_sections() -> list[Section]:
    return [
        Section("Namespaces", "namespace", "namespaces"),
        Section("Classes", "class", "classes"),
        Section("Type Documentation", "type", "types"),
        Section("Variable Documentation", "variable", "variables"),
        Section("Function Documentation", "function", "functions"),
        Section("Macro Documentation", "macro", "macros"),
    ]


def _qml_type_sections() -> list[Section]:
    return [
        Section("Property Documentation", "member", "members"),
        Section("Attached Property Documentation", "member", "members"),
        Section("Signal Documentation", "signal", "signals"),
        Section("Attached Signal Documentation", "signal", "signals"),
        Section("Method Documentation", "member", "members"),
        Section("Attached Method Documentation", "member", "members"),
    ]


class Sections:
    """Details sections of one aggregate.

    Members keep the aggregate's declaration order. Members that share a
    comment are represented by their shared comment node; typedefs naming
    an enum's flags are documented with the enum and are left out.

    Examples
    --------
    >>> from docbookgen.model.store import NodeStore
    >>> from docbookgen.model.nodes import ClassNode, FunctionNode, Status
    >>> store = NodeStore()
    >>> cls = store.add(ClassNode("Foo"))
    >>> _ = store.add(FunctionNode("bar"), cls)
    >>> _ = store.add(FunctionNode("baz", status=Status.OBSOLETE), cls)
    >>> section = Sections(store, cls).details[2]
    >>> [m.name for m in section.members], [m.name for m in section.obsolete_members]
    (['bar'], ['baz'])
    """

    def __init__(
        self, store: NodeStore, aggregate: Aggregate, *, show_internal: bool = False
    ) -> None:
        self.store = store
        self.aggregate = aggregate
        self.show_internal = show_internal
        match aggregate:
            case ClassNode():
                self.details = _cpp_class_sections()
                place = self._place_class_member
            case QmlTypeNode() | QmlBasicTypeNode():
                self.details = _qml_type_sections()
                place = self._place_qml_member
            case _:
                self.details = _namespace_sections()
                place = self._place_namespace_member
        for child in store.children(aggregate):
            if not self._is_relevant(child):
                continue
            index = place(child)
            if index is not None:
                self.details[index].insert(child)

    def _is_relevant(self, node: Node) -> bool:
        if node.is_sharing_comment:
            return False
        if node.is_internal and not self.show_internal:
            return False
        return not (isinstance(node, TypedefNode) and node.associated_enum_id is not None)

    def _representative(self, node: Node) -> Node:
        if isinstance(node, SharedCommentNode) and node.collective:
            return self.store.get(node.collective[0])
        return node

    def _place_class_member(self, node: Node) -> int | None:
        node = self._representative(node)
        if node.related_nonmember:
            return 4
        match node:
            case FunctionNode() if node.is_macro:
                return 5
            case FunctionNode():
                return 2
            case EnumNode() | TypedefNode():
                return 0
            case PropertyNode():
                return 1
            case VariableNode():
                return 3
            case _:
                return None

    def _place_namespace_member(self, node: Node) -> int | None:
        match self._representative(node):
            case NamespaceNode():
                return 0
            case ClassNode():
                return 1
            case EnumNode() | TypedefNode():
                return 2
            case VariableNode():
                return 3
            case FunctionNode() as function if function.is_macro:
                return 5
            case FunctionNode():
                return 4
            case _:
                return None

    def _place_qml_member(self, node: Node) -> int | None:
        if isinstance(node, SharedCommentNode) and node.is_property_group:
            return 0
        node = self._representative(node)
        match node:
            case QmlPropertyNode():
                return 1 if node.is_attached else 0
            case FunctionNode() if node.metaness in _QML_SIGNALS:
                return 3 if node.is_attached else 2
            case FunctionNode() if node.is_qml:
                return 5 if node.is_attached else 4
            case _:
                return None

    def has_obsolete_members(self) -> bool:
        return any(section.obsolete_members for section in self.details)

    def obsolete_sections(self) -> list[Section]:
        return [section for section in self.details if section.obsolete_members]


__all__ = ["Section", "SectionStyle", "Sections"]
