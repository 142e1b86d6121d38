"""Signatures of documented entities, as text and as DocBook synopsis metadata."""

from __future__ import annotations

import logging
import re
import typing as typ

from docbookgen import naming
from docbookgen.generator.base import GeneratorComponent
from docbookgen.model.nodes import (
    Aggregate,
    ClassNode,
    CollectionNode,
    EnumNode,
    FunctionNode,
    HeaderNode,
    Metaness,
    NamespaceNode,
    NodeKind,
    PropertyNode,
    ProxyNode,
    QmlBasicTypeNode,
    QmlPropertyNode,
    QmlTypeNode,
    TypedefNode,
    VariableNode,
)
from docbookgen.model.sections import SectionStyle

if typ.TYPE_CHECKING:
    from docbookgen.model.nodes import Node, Parameter

logger = logging.getLogger(__name__)

MAX_ENUM_VALUES = 6
ELLIPSIS = "…"

_TYPE_WORD = re.compile(r"[A-Za-z0-9_:]+")
_SUBSCRIPT = re.compile(r"([a-z]+)_([0-9]+|n)")

_QML_KINDS = frozenset(
    {NodeKind.QML_TYPE, NodeKind.QML_BASIC_TYPE, NodeKind.QML_PROPERTY}
)
_CONSTRUCTORS = frozenset({Metaness.CTOR, Metaness.COPY_CTOR, Metaness.MOVE_CTOR})
_STATUS_PREFIXES = {
    "preliminary": "(preliminary) ",
    "deprecated": "(deprecated) ",
    "obsolete": "(obsolete) ",
}


def is_qml_node(node: Node) -> bool:
    if isinstance(node, FunctionNode):
        return node.is_qml
    return node.kind in _QML_KINDS


def tagged_name(node: Node) -> str:
    """Return the display name of ``node`` with any ``QML:`` marker removed."""
    if isinstance(node, QmlTypeNode):
        return node.name.removeprefix("QML:")
    return node.name


def synopsis_tag(node: Node) -> str | None:
    """Return the DocBook synopsis element for ``node``, or ``None`` for pages.

    Examples
    --------
    >>> synopsis_tag(FunctionNode("~Foo", metaness=Metaness.DTOR))
    'destructorsynopsis'
    >>> synopsis_tag(EnumNode("Flag"))
    'enumsynopsis'
    """
    match node:
        case ClassNode() | QmlTypeNode() | QmlBasicTypeNode():
            return "classsynopsis"
        case NamespaceNode():
            return "namespacesynopsis"
        case _ if node.is_page_node:
            return None
        case EnumNode():
            return "enumsynopsis"
        case TypedefNode():
            return "typedefsynopsis"
        case FunctionNode() if node.metaness in _CONSTRUCTORS:
            return "constructorsynopsis"
        case FunctionNode() if node.is_dtor:
            return "destructorsynopsis"
        case FunctionNode():
            return "methodsynopsis"
        case PropertyNode() | VariableNode() | QmlPropertyNode():
            return "fieldsynopsis"
        case _:
            return ""


def documented_enum_items(node: EnumNode) -> list[str]:
    """Return the enum item names shown in a summary, eliding long lists.

    Examples
    --------
    >>> from docbookgen.model.nodes import EnumItem
    >>> enum = EnumNode("E", items=[EnumItem(c) for c in "ABCDEFGH"])
    >>> documented_enum_items(enum)
    ['A', 'B', 'C', 'D', 'E', '…', 'H']
    """
    items = list(node.doc.enum_item_names) or [item.name for item in node.items]
    omitted = set(node.doc.omitted_enum_item_names)
    items = [item for item in items if item not in omitted]
    if len(items) > MAX_ENUM_VALUES:
        items = [*items[: MAX_ENUM_VALUES - 1], ELLIPSIS, items[-1]]
    return items


class SynopsisRenderer(GeneratorComponent):
    """Write entity signatures in each section style and the DocBook synopsis."""

    # Textual synopsis

    def typified(
        self,
        value: str,
        relative: Node | None,
        *,
        trailing_space: bool = False,
        generate_type: bool = True,
    ) -> None:
        """Write ``value`` with each type word wrapped in a ``type`` element.

        Type words that resolve to a documented type become links. ``const``
        is never treated as a type.
        """
        writer = self.writer
        position = 0
        for match in _TYPE_WORD.finditer(value):
            writer.characters(value[position : match.start()])
            word = match.group()
            if generate_type and word != "const":
                writer.start_element("type")
                self.generator.links.generate_simple_link(self._type_href(word, relative), word)
                writer.end_element()  # type
            else:
                writer.characters(word)
            position = match.end()
        writer.characters(value[position:])
        if trailing_space and value and not value.endswith(("*", "&")):
            writer.characters(" ")

    def _type_href(self, word: str, relative: Node | None) -> str:
        node = self.store.find_type_node(word, relative)
        if node is None:
            return ""
        # QML basic types only link from QML documentation.
        if isinstance(node, QmlBasicTypeNode) and (
            relative is None or not is_qml_node(relative)
        ):
            return ""
        return self.store.link_for_node(node, relative)

    def generate_synopsis_name(self, node: Node, relative: Node | None, *, link: bool) -> None:
        name = tagged_name(node)
        if not link:
            self.writer.characters(name)
            return
        self.writer.start_element("emphasis", {"role": "bold"})
        self.generator.links.generate_simple_link(self.store.link_for_node(node, relative), name)
        self.writer.end_element()  # emphasis

    def generate_parameter(
        self, parameter: Parameter, relative: Node | None, *, extra: bool, generate_type: bool
    ) -> None:
        """Write one parameter; ``p_1`` style names render with a subscript."""
        writer = self.writer
        if parameter.name:
            self.typified(
                parameter.type, relative, trailing_space=True, generate_type=generate_type
            )
            name = parameter.name
        else:
            name = parameter.type
        if extra or not parameter.name:
            writer.start_element("emphasis")
            match = _SUBSCRIPT.search(name)
            if match is None:
                writer.characters(name)
            else:
                writer.characters(name[: match.start()] + match.group(1))
                writer.text_element("sub", match.group(2))
                writer.characters(name[match.end() :])
            writer.end_element()  # emphasis
        if extra and parameter.default_value:
            writer.characters(f" = {parameter.default_value}")

    def generate_synopsis(self, node: Node, relative: Node | None, style: SectionStyle) -> None:
        """Write the signature of ``node`` as it appears in a ``style`` listing."""
        extra = style is not SectionStyle.ALL_MEMBERS
        generate_type = style is not SectionStyle.DETAILS
        name_link = style is not SectionStyle.DETAILS
        writer = self.writer

        if extra:
            if isinstance(node, FunctionNode) and style not in (
                SectionStyle.SUMMARY,
                SectionStyle.ACCESSORS,
            ):
                bracketed = _bracketed_qualifiers(node)
                if bracketed:
                    writer.characters(f"[{' '.join(bracketed)}] ")
            if style is SectionStyle.SUMMARY:
                writer.characters(_STATUS_PREFIXES.get(node.status.value, ""))

        if style is SectionStyle.DETAILS:
            parent = self.store.parent(node)
            if (
                parent is not None
                and parent.name
                and not node.related_nonmember
                and not isinstance(node, ProxyNode | PropertyNode)
                and not isinstance(parent, HeaderNode)
                and not is_qml_node(node)
            ):
                writer.characters(f"{tagged_name(parent)}::")

        match node:
            case NamespaceNode():
                writer.characters("namespace ")
                self.generate_synopsis_name(node, relative, link=name_link)
            case ClassNode():
                writer.characters("class ")
                self.generate_synopsis_name(node, relative, link=name_link)
            case FunctionNode():
                self._function_synopsis(
                    node, relative, style, extra=extra, generate_type=generate_type
                )
            case EnumNode():
                writer.characters("enum ")
                self.generate_synopsis_name(node, relative, link=name_link)
                if style is SectionStyle.SUMMARY:
                    items = documented_enum_items(node)
                    inner = f"{', '.join(items)} " if items else ""
                    writer.characters(f" {{ {inner}}}")
            case TypedefNode():
                writer.characters("flags " if node.associated_enum_id is not None else "typedef ")
                self.generate_synopsis_name(node, relative, link=name_link)
            case PropertyNode():
                self.generate_synopsis_name(node, relative, link=name_link)
                writer.characters(" : ")
                self.typified(node.data_type, relative, generate_type=generate_type)
            case VariableNode() if style is SectionStyle.ALL_MEMBERS:
                self.generate_synopsis_name(node, relative, link=name_link)
                writer.characters(" : ")
                self.typified(node.data_type, relative, generate_type=generate_type)
            case VariableNode():
                self.typified(node.left_type, relative, generate_type=generate_type)
                writer.characters(" ")
                self.generate_synopsis_name(node, relative, link=name_link)
                writer.characters(node.right_type)
            case _:
                self.generate_synopsis_name(node, relative, link=name_link)

    def _function_synopsis(
        self,
        node: FunctionNode,
        relative: Node | None,
        style: SectionStyle,
        *,
        extra: bool,
        generate_type: bool,
    ) -> None:
        writer = self.writer
        compact = style in (SectionStyle.SUMMARY, SectionStyle.ACCESSORS)
        if compact and node.is_virtual:
            writer.characters("virtual ")
        if style is not SectionStyle.ALL_MEMBERS and node.return_type:
            self.typified(
                node.return_type, relative, trailing_space=True, generate_type=generate_type
            )
        self.generate_synopsis_name(node, relative, link=style is not SectionStyle.DETAILS)
        if not node.is_macro_without_params:
            writer.characters("(")
            for index, parameter in enumerate(node.parameters):
                if index:
                    writer.characters(", ")
                self.generate_parameter(
                    parameter, relative, extra=extra, generate_type=generate_type
                )
            writer.characters(")")
        if node.is_const:
            writer.characters(" const")

        suffix = ""
        if compact:
            if node.is_final:
                suffix += " final"
            if node.is_override:
                suffix += " override"
            if node.is_pure_virtual:
                suffix += " = 0"
        elif style is SectionStyle.ALL_MEMBERS:
            if node.return_type and node.return_type != "void":
                writer.characters(" : ")
                self.typified(node.return_type, relative, generate_type=generate_type)
            return
        if node.ref_ness == 1:
            suffix += " &"
        elif node.ref_ness == 2:
            suffix += " &&"
        writer.characters(suffix)

    def generate_enum_value(self, value: str, relative: Node | None) -> None:
        """Write an enum value qualified with the scopes enclosing its enum."""
        if not isinstance(relative, EnumNode):
            self.writer.characters(value)
            return
        scopes: list[Node] = []
        node = self.store.parent(relative)
        while node is not None and self.store.parent(node) is not None:
            scopes.insert(0, node)
            parent = self.store.parent(node)
            if parent is relative or not parent.name:
                break
            node = parent
        self.writer.start_element("code")
        for scope in scopes:
            self.generate_synopsis_name(scope, relative, link=True)
            self.writer.characters("::")
        self.writer.characters(value)
        self.writer.end_element()  # code

    # DocBook synopsis metadata

    def _info(self, role: str, value: str) -> None:
        self.writer.text_element("synopsisinfo", value, {"role": role})
        self.writer.new_line()

    def _modifier(self, value: str) -> None:
        self.writer.text_element("modifier", value)
        self.writer.new_line()

    def _text(self, tag: str, value: str) -> None:
        self.writer.text_element(tag, value)
        self.writer.new_line()

    def generate_docbook_synopsis(self, node: Node | None) -> None:
        """Write machine-readable synopsis metadata for a reference entity.

        Only produced when the ``docbook_extensions`` option is enabled.
        Collections, property groups and pages have no synopsis.
        """
        if node is None or not self.config.docbook_extensions:
            return
        if isinstance(node, CollectionNode) or node.kind is NodeKind.PROPERTY_GROUP:
            return
        tag = synopsis_tag(node)
        if tag is None:
            return
        if not tag:
            self.warn(node, f"Unknown node tag {node.kind.value}")
            tag = "synopsis"

        writer = self.writer
        writer.start_element(tag)
        writer.new_line()
        self._synopsis_contents(node)
        self._info("access", node.access.value)
        if isinstance(node, ClassNode | QmlTypeNode) and node.is_abstract:
            self._info("abstract", "true")
        self._info("status", node.status.value)
        if isinstance(node, Aggregate):
            self._aggregate_info(node)
        if isinstance(node, QmlTypeNode):
            self._qml_type_info(node)
        self._info("threadsafeness", _THREAD_SAFENESS_WORDS[node.thread_safeness.value])
        if node.physical_module:
            self._info("module", node.physical_module)
        if isinstance(node, ClassNode | QmlTypeNode) and node.groups:
            self._info("groups", ",".join(node.groups))
        if isinstance(node, PropertyNode):
            self._property_info(node)
        if isinstance(node, EnumNode):
            for item in node.items:
                writer.start_element("enumitem")
                writer.new_line()
                self._text("enumidentifier", item.name)
                self._text("enumvalue", item.value)
                writer.end_element()  # enumitem
                writer.new_line()
        writer.end_element()  # synopsis element
        writer.new_line()

        if isinstance(node, EnumNode):
            flags = self.store.flags_typedef(node)
            if flags is not None:
                writer.start_element("typedefsynopsis")
                writer.new_line()
                self._text("typedefname", self.store.plain_full_name(flags))
                writer.end_element()  # typedefsynopsis
                writer.new_line()

    def _synopsis_contents(self, node: Node) -> None:
        writer = self.writer
        match node:
            case ClassNode() | QmlTypeNode() | QmlBasicTypeNode():
                writer.start_element("ooclass")
                writer.text_element("classname", node.plain_name)
                writer.end_element()  # ooclass
                writer.new_line()
            case NamespaceNode():
                self._text("namespacename", node.plain_name)
            case PropertyNode():
                self._modifier("(Qt property)")
                self._text("type", node.data_type)
                self._text("varname", node.plain_name)
            case VariableNode():
                if node.is_static:
                    self._modifier("static")
                self._text("type", node.data_type)
                self._text("varname", node.plain_name)
            case EnumNode():
                self._text("enumname", node.plain_name)
            case TypedefNode():
                self._text("typedefname", node.plain_name)
            case QmlPropertyNode():
                self._qml_property_contents(node)
            case FunctionNode():
                self._function_contents(node)
            case _:
                self.warn(node, f"Unexpected node type in synopsis: {node.kind.value}")

    def _qml_property_contents(self, node: QmlPropertyNode) -> None:
        name = node.name
        if node.is_attached:
            parent = self.store.parent(node)
            if parent is not None:
                name = f"{parent.name}.{name}"
        self._text("type", node.data_type)
        self._text("varname", name)
        if node.is_attached:
            self._modifier("attached")
        if node.is_writable:
            self._modifier("writable")
        if node.is_read_only:
            self._modifier("[read-only]")
        if node.is_default:
            self._modifier("[default]")

    def _function_contents(self, node: FunctionNode) -> None:
        writer = self.writer
        if node.is_virtual:
            self._modifier("virtual")
        if node.is_const:
            self._modifier("const")
        if node.is_static:
            self._modifier("static")
        if not node.is_macro:
            if node.return_type == "void":
                writer.empty_element("void")
            else:
                writer.text_element("type", node.return_type)
            writer.new_line()
        self._text("methodname", node.name)
        for flag, word in (
            (node.is_overload, "overload"),
            (node.is_default, "default"),
            (node.is_final, "final"),
            (node.is_override, "override"),
        ):
            if flag:
                self._modifier(word)
        if not node.is_macro and not node.parameters:
            writer.empty_element("void")
            writer.new_line()
        for parameter in node.parameters:
            writer.start_element("methodparam")
            writer.new_line()
            self._text("type", parameter.type)
            self._text("parameter", parameter.name)
            if parameter.default_value:
                self._text("initializer", parameter.default_value)
            writer.end_element()  # methodparam
            writer.new_line()

        self._info("meta", node.metaness.value)
        if node.is_overload:
            self._info("overload-number", str(node.overload_number))
        if node.ref_ness in (1, 2):
            self._info("refness", str(node.ref_ness))
        if node.associated_property_ids:
            names = sorted(self.store.get(pid).name for pid in node.associated_property_ids)
            self._info("associated-property", ",".join(names))

        signature = node.signature()
        if node.is_final:
            signature += " final"
        if node.is_override:
            signature += " override"
        if node.is_pure_virtual:
            signature += " = 0"
        elif node.is_default:
            signature += " = default"
        self._info("signature", signature)

    def _aggregate_info(self, node: Aggregate) -> None:
        writer = self.writer
        links = self.generator.links
        for include in node.include_files:
            self._info("headers", include)
        if node.since and not isinstance(node, QmlTypeNode):
            self._info("since", naming.format_since(node.since, self.config.project))
        if isinstance(node, ClassNode | NamespaceNode) and node.physical_module:
            module = self.store.collection(node.physical_module, NodeKind.COLLECTION_MODULE)
            if module is not None and module.qt_variable:
                self._info("qmake", f"QT += {module.qt_variable}")
        if not isinstance(node, ClassNode):
            return
        if node.qml_element_id is not None and not node.is_internal:
            element = self.store.get(node.qml_element_id)
            writer.start_element("synopsisinfo", {"role": "instantiatedBy"})
            links.generate_simple_link(self.store.link_for_node(element, node), element.name)
            writer.end_element()  # synopsisinfo
            writer.new_line()
        if node.bases:
            writer.start_element("synopsisinfo", {"role": "inherits"})
            links.generate_inherits(node)
            writer.end_element()  # synopsisinfo
            writer.new_line()
        if node.derived:
            writer.start_element("synopsisinfo", {"role": "inheritedBy"})
            links.generate_sorted_names(node, node.derived)
            writer.end_element()  # synopsisinfo
            writer.new_line()

    def _qml_type_info(self, node: QmlTypeNode) -> None:
        writer = self.writer
        links = self.generator.links
        self._info("import", f"import {node.logical_module_name} {self.qml_module_version(node)}")
        if node.since:
            self._info("since", naming.format_since(node.since, self.config.project))
        subclasses = self.store.qml_subclasses(node)
        if subclasses:
            writer.start_element("synopsisinfo", {"role": "inheritedBy"})
            links.generate_sorted_qml_names(node, subclasses)
            writer.end_element()  # synopsisinfo
            writer.new_line()
        base = self.documented_qml_base(node)
        if base is not None:
            writer.start_element("synopsisinfo", {"role": "inherits"})
            links.generate_simple_link(self.store.link_for_node(base, node), base.name)
            writer.end_element()  # synopsisinfo
            writer.new_line()
        if node.class_node_id is not None:
            class_node = self.store.get(node.class_node_id)
            if not class_node.is_internal:
                writer.start_element("synopsisinfo", {"role": "instantiates"})
                links.generate_simple_link(
                    self.store.link_for_node(class_node, node), class_node.name
                )
                writer.end_element()  # synopsisinfo
                writer.new_line()

    def _property_info(self, node: PropertyNode) -> None:
        for role, ids in (
            ("getter", node.getter_ids),
            ("setter", node.setter_ids),
            ("resetter", node.resetter_ids),
            ("notifier", node.notifier_ids),
        ):
            for function_id in ids:
                self._info(role, self.store.get(function_id).name)

    # Helpers shared with the page composer

    def qml_module_version(self, node: QmlTypeNode) -> str:
        """Return the import version, preferring the QML module's own version."""
        module = self.store.collection(node.logical_module_name, NodeKind.COLLECTION_QML_MODULE)
        if module is not None and module.logical_module_version:
            return module.logical_module_version
        return node.logical_module_version

    def documented_qml_base(self, node: QmlTypeNode) -> QmlTypeNode | None:
        """Return the nearest QML base type that is not internal."""
        base_id = node.qml_base_id
        while base_id is not None:
            base = self.store.get(base_id)
            if not base.is_internal:
                return base
            base_id = base.qml_base_id
        return None


_THREAD_SAFENESS_WORDS = {
    "unspecified": "unspecified",
    "non-reentrant": "non-reentrant",
    "reentrant": "reentrant",
    "thread-safe": "thread safe",
}


def _bracketed_qualifiers(node: FunctionNode) -> list[str]:
    bracketed: list[str] = []
    if node.is_static:
        bracketed.append("static")
    elif node.is_virtual:
        if node.is_final:
            bracketed.append("final")
        if node.is_override:
            bracketed.append("override")
        if node.is_pure_virtual:
            bracketed.append("pure")
        bracketed.append("virtual")
    if node.access.value in ("protected", "private"):
        bracketed.append(node.access.value)
    if node.is_signal:
        bracketed.append("signal")
    elif node.is_slot:
        bracketed.append("slot")
    return bracketed


__all__ = [
    "ELLIPSIS",
    "MAX_ENUM_VALUES",
    "SynopsisRenderer",
    "documented_enum_items",
    "is_qml_node",
    "synopsis_tag",
    "tagged_name",
]
