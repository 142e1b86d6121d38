"""Pure naming helpers shared by the interpreter and the page composer.

These functions turn human titles and entity names into identifiers that
are valid as ``xml:id`` values and render the small pieces of glue text
(commas in name lists, "since" notes, entity type words).

Examples
--------
>>> canonical_title("Detailed Description")
'detailed-description'
>>> clean_ref("operator<=")
'operator-lt-eq'
>>> [comma(i, 3) for i in range(3)]
[', ', ', and ', '']
"""

from __future__ import annotations

import re
import typing as typ

from docbookgen.model.nodes import (
    EnumNode,
    FunctionNode,
    Metaness,
    NodeKind,
    PropertyNode,
    QmlPropertyNode,
    SharedCommentNode,
    TypedefNode,
    VariableNode,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from docbookgen.model.nodes import Node

_REF_REPLACEMENTS = {"!": "-not", "&": "-and", "<": "-lt", "=": "-eq", ">": "-gt", "#": "#"}
_REF_KEPT = frozenset("-_:.")

_TYPE_WORDS: dict[NodeKind, str] = {
    NodeKind.NAMESPACE: "namespace",
    NodeKind.CLASS: "class",
    NodeKind.STRUCT: "struct",
    NodeKind.UNION: "union",
    NodeKind.HEADER: "header",
    NodeKind.QML_TYPE: "type",
    NodeKind.QML_BASIC_TYPE: "type",
    NodeKind.PAGE: "documentation",
    NodeKind.EXAMPLE: "documentation",
    NodeKind.ENUM: "enum",
    NodeKind.TYPEDEF: "typedef",
    NodeKind.PROPERTY: "property",
    NodeKind.QML_PROPERTY: "property",
    NodeKind.VARIABLE: "variable",
    NodeKind.COLLECTION_MODULE: "module",
    NodeKind.COLLECTION_QML_MODULE: "module",
    NodeKind.COLLECTION_GROUP: "group",
    NodeKind.PROPERTY_GROUP: "property group",
}

_TARGET_TYPES: dict[NodeKind, str] = {
    NodeKind.NAMESPACE: "namespace",
    NodeKind.CLASS: "class",
    NodeKind.STRUCT: "class",
    NodeKind.UNION: "class",
    NodeKind.PAGE: "page",
    NodeKind.EXAMPLE: "page",
    NodeKind.ENUM: "enum",
    NodeKind.TYPEDEF: "typedef",
    NodeKind.PROPERTY: "property",
    NodeKind.FUNCTION: "function",
    NodeKind.VARIABLE: "variable",
    NodeKind.COLLECTION_MODULE: "module",
}

_FUNCTION_WORDS: dict[Metaness, str] = {
    Metaness.QML_SIGNAL: "signal",
    Metaness.QML_SIGNAL_HANDLER: "signal handler",
    Metaness.QML_METHOD: "method",
}

_OFFSET_TWO = frozenset(
    {
        NodeKind.NAMESPACE,
        NodeKind.CLASS,
        NodeKind.STRUCT,
        NodeKind.UNION,
        NodeKind.HEADER,
        NodeKind.COLLECTION_MODULE,
    }
)
_OFFSET_ONE = frozenset(
    {
        NodeKind.COLLECTION_QML_MODULE,
        NodeKind.COLLECTION_GROUP,
        NodeKind.QML_BASIC_TYPE,
        NodeKind.QML_TYPE,
        NodeKind.PAGE,
        NodeKind.EXAMPLE,
    }
)


def canonical_title(title: str) -> str:
    """Convert a human title into a lowercase hyphen-separated identifier."""
    return re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")


def _is_ascii_alnum(char: str) -> bool:
    return char.isascii() and char.isalnum()


def clean_ref(ref: str) -> str:
    """Return ``ref`` rewritten into characters that are valid in an anchor.

    The first character must be alphanumeric; a leading ``~`` becomes
    ``dtor.`` and a leading underscore becomes ``underscore.``. Operators
    that commonly appear in function names are spelled out and any other
    character is replaced by its hexadecimal code point.

    Examples
    --------
    >>> clean_ref("~QString")
    'dtor.QString'
    >>> clean_ref("operator!=")
    'operator-not-eq'
    >>> clean_ref("a b+c")
    'a-b-2bc'
    """
    if not ref:
        return ""
    first = ref[0]
    if _is_ascii_alnum(first):
        parts = [first]
    elif first == "~":
        parts = ["dtor."]
    elif first == "_":
        parts = ["underscore."]
    else:
        parts = ["A"]
    for char in ref[1:]:
        if _is_ascii_alnum(char) or char in _REF_KEPT:
            parts.append(char)
        elif char.isspace():
            parts.append("-")
        elif char in _REF_REPLACEMENTS:
            parts.append(_REF_REPLACEMENTS[char])
        else:
            parts.append(f"-{ord(char):x}")
    return "".join(parts)


def ref_for_node(
    node: Node, lookup: cabc.Callable[[int], Node] | None = None
) -> str:
    """Return the raw (uncleaned) anchor reference for ``node``.

    ``lookup`` maps node ids to nodes; it lets a typedef that names an enum's
    flags share the enum's reference. Pages and aggregates have no anchor and
    yield an empty string.
    """
    match node:
        case EnumNode():
            return f"{node.name}-enum"
        case TypedefNode():
            if node.associated_enum_id is not None and lookup is not None:
                return ref_for_node(lookup(node.associated_enum_id), lookup)
            return f"{node.name}-typedef"
        case FunctionNode():
            return _function_ref(node)
        case QmlPropertyNode():
            if node.is_attached:
                return f"{node.name}-attached-prop"
            return f"{node.name}-prop"
        case PropertyNode():
            return f"{node.name}-prop"
        case SharedCommentNode() if node.is_property_group:
            return f"{node.name}-prop"
        case VariableNode():
            return f"{node.name}-var"
        case _:
            return ""


def _function_ref(node: FunctionNode) -> str:
    match node.metaness:
        case Metaness.QML_SIGNAL:
            return f"{node.name}-signal"
        case Metaness.QML_SIGNAL_HANDLER:
            return f"{node.name}-signal-handler"
        case _:
            suffix = f"-{node.overload_number}" if node.overload_number else ""
            if node.metaness is Metaness.QML_METHOD:
                return f"{node.name}-method{suffix}"
            return f"{node.name}{suffix}"


def comma(position: int, count: int) -> str:
    """Return the separator following word ``position`` of ``count`` words."""
    if position == count - 1:
        return ""
    if count == 2:
        return " and "
    if position == 0 or position < count - 2:
        return ", "
    return ", and "


def type_string(node: Node) -> str:
    """Return the noun used in sentences such as "This class is obsolete."."""
    if isinstance(node, FunctionNode):
        return _FUNCTION_WORDS.get(node.metaness, "function")
    return _TYPE_WORDS.get(node.kind, "documentation")


def format_since(since: str, project: str = "") -> str:
    """Return the version note for a ``since`` value.

    A single token is taken to be a version of ``project``; anything longer
    already names its product and is returned unchanged.

    Examples
    --------
    >>> format_since("5.15", "Qt")
    'Qt 5.15'
    >>> format_since("QtCreator 4.2", "Qt")
    'QtCreator 4.2'
    """
    if len(since.split(" ")) == 1 and project:
        return f"{project} {since}"
    return since


def target_type(node: Node) -> str:
    """Return the link ``type`` attribute describing what ``node`` is."""
    return _TARGET_TYPES.get(node.kind, "page")


def hierarchy_offset(node: Node | None) -> int:
    """Return the heading depth added to section atoms documented on ``node``."""
    if node is None:
        return 3
    if node.kind in _OFFSET_TWO:
        return 2
    if node.kind in _OFFSET_ONE:
        return 1
    return 3


__all__ = [
    "canonical_title",
    "clean_ref",
    "comma",
    "format_since",
    "hierarchy_offset",
    "ref_for_node",
    "target_type",
    "type_string",
]
