"""Typed documentation entities consumed by the DocBook generator.

Entities form a tree stored in a :class:`~docbookgen.model.store.NodeStore`
arena. Parent, child, base-class and accessor relationships are integer ids
into that arena so that no node owns another.
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

from docbookgen.atoms import Text
from docbookgen.diagnostics import Location


class NodeKind(enum.Enum):
    """Closed set of entity kinds."""

    CLASS = "class"
    COLLECTION_GROUP = "group"
    COLLECTION_MODULE = "module"
    COLLECTION_QML_MODULE = "qml-module"
    ENUM = "enum"
    EXAMPLE = "example"
    EXTERNAL_PAGE = "external-page"
    FUNCTION = "function"
    HEADER = "header"
    NAMESPACE = "namespace"
    PAGE = "page"
    PROPERTY = "property"
    PROPERTY_GROUP = "property-group"
    PROXY = "proxy"
    QML_BASIC_TYPE = "qml-basic-type"
    QML_PROPERTY = "qml-property"
    QML_TYPE = "qml-type"
    SHARED_COMMENT = "shared-comment"
    STRUCT = "struct"
    TYPEDEF = "typedef"
    UNION = "union"
    VARIABLE = "variable"


class Access(enum.Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


class Status(enum.Enum):
    ACTIVE = "active"
    PRELIMINARY = "preliminary"
    DEPRECATED = "deprecated"
    OBSOLETE = "obsolete"
    INTERNAL = "internal"


class ThreadSafeness(enum.Enum):
    UNSPECIFIED = "unspecified"
    NON_REENTRANT = "non-reentrant"
    REENTRANT = "reentrant"
    THREAD_SAFE = "thread-safe"


class Metaness(enum.Enum):
    """Role of a function; values match the metaness strings of index files."""

    PLAIN = "plain"
    SIGNAL = "signal"
    SLOT = "slot"
    CTOR = "constructor"
    COPY_CTOR = "copy-constructor"
    MOVE_CTOR = "move-constructor"
    DTOR = "destructor"
    MACRO = "macro"
    MACRO_WITH_PARAMS = "macrowithparams"
    MACRO_WITHOUT_PARAMS = "macrowithoutparams"
    COPY_ASSIGN = "copy-assign"
    MOVE_ASSIGN = "move-assign"
    NATIVE = "native"
    QML_SIGNAL = "qmlsignal"
    QML_SIGNAL_HANDLER = "qmlsignalhandler"
    QML_METHOD = "qmlmethod"


class Virtualness(enum.Enum):
    NON_VIRTUAL = "non"
    VIRTUAL = "virtual"
    PURE_VIRTUAL = "pure"


_QML_METANESS = frozenset(
    {Metaness.QML_SIGNAL, Metaness.QML_SIGNAL_HANDLER, Metaness.QML_METHOD}
)
_MACRO_METANESS = frozenset(
    {Metaness.MACRO, Metaness.MACRO_WITH_PARAMS, Metaness.MACRO_WITHOUT_PARAMS}
)


@dc.dataclass(slots=True)
class Doc:
    """Parsed documentation comment attached to a node.

    Attributes
    ----------
    body : Text
        Full comment body, including any brief region.
    brief : Text
        Brief description, also used for abstracts and annotated lists.
    also_list : list[Text]
        Entries of the "See also" list.
    legalese : Text
        License text collected into legalese listings.
    location : Location
        Where the comment was found; diagnostics point here.
    enum_item_names : list[str]
        Enum values documented in the comment, in documentation order.
    omitted_enum_item_names : list[str]
        Enum values explicitly left out of summaries.
    metadata : dict[str, list[str]]
        Meta commands such as ``maintainer``.
    """

    body: Text = dc.field(default_factory=Text)
    brief: Text = dc.field(default_factory=Text)
    also_list: list[Text] = dc.field(default_factory=list)
    legalese: Text = dc.field(default_factory=Text)
    location: Location = Location()
    enum_item_names: list[str] = dc.field(default_factory=list)
    omitted_enum_item_names: list[str] = dc.field(default_factory=list)
    metadata: dict[str, list[str]] = dc.field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.body.is_empty and self.brief.is_empty

    def meta(self, key: str) -> list[str]:
        """Return the arguments recorded for meta command ``key``."""
        return list(self.metadata.get(key, ()))


@dc.dataclass(slots=True)
class Parameter:
    """One function parameter."""

    type: str = ""
    name: str = ""
    default_value: str = ""

    def signature(self, *, include_value: bool = False) -> str:
        if not self.name:
            text = self.type
        elif self.type.endswith(("*", "&", " ")) or not self.type:
            text = f"{self.type}{self.name}"
        else:
            text = f"{self.type} {self.name}"
        if include_value and self.default_value:
            text += f" = {self.default_value}"
        return text


@dc.dataclass(slots=True)
class RelatedClass:
    """A base or derived class reference; ``node_id`` is unset when unresolved."""

    node_id: int | None
    access: Access = Access.PUBLIC
    path: str = ""

    @property
    def is_private(self) -> bool:
        return self.access is Access.PRIVATE


@dc.dataclass(slots=True)
class EnumItem:
    name: str
    value: str = ""
    since: str = ""


@dc.dataclass(frozen=True, slots=True)
class NavLink:
    """A navigation target named in the comment (previous, next, start)."""

    target: str
    title: str


@dc.dataclass(slots=True, eq=False)
class Node:
    """Common state of every documented entity."""

    name: str
    kind: NodeKind = NodeKind.PAGE
    node_id: int = -1
    parent_id: int | None = None
    doc: Doc = dc.field(default_factory=Doc)
    access: Access = Access.PUBLIC
    status: Status = Status.ACTIVE
    thread_safeness: ThreadSafeness = ThreadSafeness.UNSPECIFIED
    since: str = ""
    physical_module: str = ""
    groups: list[str] = dc.field(default_factory=list)
    url: str = ""
    file_name: str = ""
    title: str = ""
    subtitle: str = ""
    nav_links: dict[str, NavLink] = dc.field(default_factory=dict)
    targets: list[str] = dc.field(default_factory=list)
    shared_comment_id: int | None = None
    related_nonmember: bool = False
    is_index_node: bool = False
    output_subdirectory: str = ""

    @property
    def location(self) -> Location:
        return self.doc.location

    @property
    def has_doc(self) -> bool:
        return not self.doc.is_empty

    @property
    def is_obsolete(self) -> bool:
        return self.status is Status.OBSOLETE

    @property
    def is_internal(self) -> bool:
        return self.status is Status.INTERNAL

    @property
    def is_private(self) -> bool:
        return self.access is Access.PRIVATE

    @property
    def is_sharing_comment(self) -> bool:
        return self.shared_comment_id is not None

    @property
    def is_aggregate(self) -> bool:
        return False

    @property
    def is_page_node(self) -> bool:
        return False

    @property
    def plain_name(self) -> str:
        return self.name

    @property
    def full_title(self) -> str:
        return self.title or self.name


@dc.dataclass(slots=True, eq=False)
class Aggregate(Node):
    """An entity owning member entities."""

    children: list[int] = dc.field(default_factory=list)
    include_files: list[str] = dc.field(default_factory=list)

    @property
    def is_aggregate(self) -> bool:
        return True

    @property
    def is_page_node(self) -> bool:
        return True


@dc.dataclass(slots=True, eq=False)
class ClassNode(Aggregate):
    kind: NodeKind = NodeKind.CLASS
    bases: list[RelatedClass] = dc.field(default_factory=list)
    derived: list[RelatedClass] = dc.field(default_factory=list)
    qml_element_id: int | None = None
    is_abstract: bool = False


@dc.dataclass(slots=True, eq=False)
class NamespaceNode(Aggregate):
    kind: NodeKind = NodeKind.NAMESPACE
    documented_in_id: int | None = None


@dc.dataclass(slots=True, eq=False)
class HeaderNode(Aggregate):
    kind: NodeKind = NodeKind.HEADER


@dc.dataclass(slots=True, eq=False)
class ProxyNode(Aggregate):
    kind: NodeKind = NodeKind.PROXY


@dc.dataclass(slots=True, eq=False)
class QmlTypeNode(Aggregate):
    kind: NodeKind = NodeKind.QML_TYPE
    logical_module_name: str = ""
    logical_module_version: str = ""
    qml_base_id: int | None = None
    class_node_id: int | None = None
    is_abstract: bool = False


@dc.dataclass(slots=True, eq=False)
class QmlBasicTypeNode(Aggregate):
    kind: NodeKind = NodeKind.QML_BASIC_TYPE
    logical_module_name: str = ""
    logical_module_version: str = ""


@dc.dataclass(slots=True, eq=False)
class PageNode(Node):
    kind: NodeKind = NodeKind.PAGE
    is_attribution: bool = False

    @property
    def is_page_node(self) -> bool:
        return True


@dc.dataclass(slots=True, eq=False)
class ExampleNode(PageNode):
    kind: NodeKind = NodeKind.EXAMPLE
    files: list[str] = dc.field(default_factory=list)
    images: list[str] = dc.field(default_factory=list)
    no_auto_list: bool = False


@dc.dataclass(slots=True, eq=False)
class CollectionNode(PageNode):
    """A group, C++ module or QML module."""

    kind: NodeKind = NodeKind.COLLECTION_GROUP
    members: list[int] = dc.field(default_factory=list)
    logical_module_name: str = ""
    logical_module_version: str = ""
    qt_variable: str = ""
    was_seen: bool = True
    is_generic: bool = False
    no_auto_list: bool = False

    @property
    def is_group(self) -> bool:
        return self.kind is NodeKind.COLLECTION_GROUP

    @property
    def is_module(self) -> bool:
        return self.kind is NodeKind.COLLECTION_MODULE

    @property
    def is_qml_module(self) -> bool:
        return self.kind is NodeKind.COLLECTION_QML_MODULE


@dc.dataclass(slots=True, eq=False)
class FunctionNode(Node):
    kind: NodeKind = NodeKind.FUNCTION
    metaness: Metaness = Metaness.PLAIN
    return_type: str = ""
    parameters: list[Parameter] = dc.field(default_factory=list)
    virtualness: Virtualness = Virtualness.NON_VIRTUAL
    is_const: bool = False
    is_static: bool = False
    is_final: bool = False
    is_override: bool = False
    is_default: bool = False
    is_invokable: bool = False
    is_private_signal: bool = False
    is_attached: bool = False
    is_marked_reimp: bool = False
    overload_number: int = 0
    ref_ness: int = 0
    reimplemented_from_id: int | None = None
    associated_property_ids: list[int] = dc.field(default_factory=list)

    @property
    def plain_name(self) -> str:
        return f"{self.name}()"

    @property
    def is_ctor(self) -> bool:
        return self.metaness is Metaness.CTOR

    @property
    def is_dtor(self) -> bool:
        return self.metaness is Metaness.DTOR

    @property
    def is_macro(self) -> bool:
        return self.metaness in _MACRO_METANESS

    @property
    def is_macro_without_params(self) -> bool:
        return self.metaness is Metaness.MACRO_WITHOUT_PARAMS

    @property
    def is_signal(self) -> bool:
        return self.metaness is Metaness.SIGNAL

    @property
    def is_slot(self) -> bool:
        return self.metaness is Metaness.SLOT

    @property
    def is_qml(self) -> bool:
        return self.metaness in _QML_METANESS

    @property
    def is_overload(self) -> bool:
        return self.overload_number > 0

    @property
    def is_virtual(self) -> bool:
        return self.virtualness is not Virtualness.NON_VIRTUAL

    @property
    def is_pure_virtual(self) -> bool:
        return self.virtualness is Virtualness.PURE_VIRTUAL

    def signature(self, *, include_values: bool = False, no_return: bool = False) -> str:
        """Return the textual C++ signature of the function.

        Examples
        --------
        >>> fn = FunctionNode(
        ...     "arg",
        ...     return_type="QString",
        ...     parameters=[Parameter("int", "a"), Parameter("int", "width", "0")],
        ...     is_const=True,
        ... )
        >>> fn.signature()
        'QString arg(int a, int width) const'
        >>> fn.signature(include_values=True, no_return=True)
        'arg(int a, int width = 0) const'
        """
        result = ""
        if not no_return and self.return_type:
            result = f"{self.return_type} "
        result += self.name
        if not self.is_macro_without_params:
            params = ", ".join(
                p.signature(include_value=include_values) for p in self.parameters
            )
            result += f"({params})"
            if self.is_macro:
                return result
        if self.is_const:
            result += " const"
        if self.ref_ness == 1:
            result += " &"
        elif self.ref_ness == 2:
            result += " &&"
        return result


@dc.dataclass(slots=True, eq=False)
class EnumNode(Node):
    kind: NodeKind = NodeKind.ENUM
    items: list[EnumItem] = dc.field(default_factory=list)
    flags_type_id: int | None = None
    is_scoped: bool = False

    def item_value(self, name: str) -> str:
        """Return the value of item ``name`` or an empty string."""
        for item in self.items:
            if item.name == name:
                return item.value
        return ""


@dc.dataclass(slots=True, eq=False)
class TypedefNode(Node):
    kind: NodeKind = NodeKind.TYPEDEF
    underlying_type: str = ""
    associated_enum_id: int | None = None


@dc.dataclass(slots=True, eq=False)
class PropertyNode(Node):
    kind: NodeKind = NodeKind.PROPERTY
    data_type: str = ""
    getter_ids: list[int] = dc.field(default_factory=list)
    setter_ids: list[int] = dc.field(default_factory=list)
    resetter_ids: list[int] = dc.field(default_factory=list)
    notifier_ids: list[int] = dc.field(default_factory=list)

    def role(self, function_id: int) -> str:
        """Return how the function with ``function_id`` serves this property."""
        for role, ids in (
            ("getter", self.getter_ids),
            ("setter", self.setter_ids),
            ("resetter", self.resetter_ids),
            ("notifier", self.notifier_ids),
        ):
            if function_id in ids:
                return role
        return ""


@dc.dataclass(slots=True, eq=False)
class VariableNode(Node):
    kind: NodeKind = NodeKind.VARIABLE
    left_type: str = ""
    right_type: str = ""
    is_static: bool = False

    @property
    def data_type(self) -> str:
        return self.left_type + self.right_type


@dc.dataclass(slots=True, eq=False)
class QmlPropertyNode(Node):
    kind: NodeKind = NodeKind.QML_PROPERTY
    data_type: str = ""
    is_read_only: bool = False
    is_default: bool = False
    is_attached: bool = False
    is_required: bool = False

    @property
    def is_writable(self) -> bool:
        return not self.is_read_only


@dc.dataclass(slots=True, eq=False)
class SharedCommentNode(Node):
    """One comment documenting several entities, or a QML property group."""

    kind: NodeKind = NodeKind.SHARED_COMMENT
    collective: list[int] = dc.field(default_factory=list)

    @property
    def is_property_group(self) -> bool:
        return self.kind is NodeKind.PROPERTY_GROUP


AnyNode: typ.TypeAlias = (
    ClassNode
    | NamespaceNode
    | HeaderNode
    | ProxyNode
    | QmlTypeNode
    | QmlBasicTypeNode
    | PageNode
    | ExampleNode
    | CollectionNode
    | FunctionNode
    | EnumNode
    | TypedefNode
    | PropertyNode
    | VariableNode
    | QmlPropertyNode
    | SharedCommentNode
)


__all__ = [
    "Access",
    "Aggregate",
    "AnyNode",
    "ClassNode",
    "CollectionNode",
    "Doc",
    "EnumItem",
    "EnumNode",
    "ExampleNode",
    "FunctionNode",
    "HeaderNode",
    "Metaness",
    "NamespaceNode",
    "NavLink",
    "Node",
    "NodeKind",
    "PageNode",
    "Parameter",
    "PropertyNode",
    "ProxyNode",
    "QmlBasicTypeNode",
    "QmlPropertyNode",
    "QmlTypeNode",
    "RelatedClass",
    "SharedCommentNode",
    "Status",
    "ThreadSafeness",
    "TypedefNode",
    "VariableNode",
    "Virtualness",
]
