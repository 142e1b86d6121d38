"""Generated listings: annotated, compact, hierarchy, index and legalese lists."""

from __future__ import annotations

import enum
import logging
import string
import typing as typ

from docbookgen import naming
from docbookgen.generator.base import GeneratorComponent
from docbookgen.model.nodes import ClassNode, CollectionNode, NodeKind, QmlTypeNode

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from docbookgen.model.nodes import Node
    from docbookgen.model.store import NodeMultiMap

logger = logging.getLogger(__name__)

# "0" to "9", "A" to "Z", then everything else.
COMPACT_BUCKETS = 37

_COLLECTION_SELECTORS = {
    "overviews": NodeKind.COLLECTION_GROUP,
    "cpp-modules": NodeKind.COLLECTION_MODULE,
    "qml-modules": NodeKind.COLLECTION_QML_MODULE,
}


class ListType(enum.Enum):
    GENERIC = "generic"
    OBSOLETE = "obsolete"


def compact_bucket(key: str) -> int:
    """Return the compact-list bucket for a lowercased sort key.

    Examples
    --------
    >>> compact_bucket("3d"), compact_bucket("accel"), compact_bucket("_private")
    (3, 10, 36)
    """
    if not key:
        return COMPACT_BUCKETS - 1
    first = key[0]
    if first in string.digits:
        return int(first)
    if first in string.ascii_lowercase:
        return 10 + ord(first) - ord("a")
    return COMPACT_BUCKETS - 1


def compact_key(name: str, common_prefix: str = "") -> str:
    """Return the sort key of ``name`` once its scope and common prefix are removed.

    The prefix is stripped only when the last ``::`` component starts with
    it, compared without regard to case.

    Examples
    --------
    >>> compact_key("QtConcurrent::QFuture", "Q")
    'future'
    >>> compact_key("Accel", "Q")
    'accel'
    """
    last = name.split("::")[-1]
    if common_prefix and last.lower().startswith(common_prefix.lower()):
        last = last[len(common_prefix) :]
    return last.lower()


class ListRenderer(GeneratorComponent):
    """Write the lists requested by generated-list and annotated-list atoms."""

    def generate_selected_list(self, selector: str, relative: Node | None) -> None:
        """Dispatch a generated-list atom payload to the matching list."""
        store = self.store
        match selector:
            case "annotatedclasses":
                self.generate_annotated_list(relative, store.cpp_classes(), selector)
            case "attributions":
                self.generate_annotated_list(relative, store.attributions(), selector)
            case "namespaces":
                self.generate_annotated_list(relative, store.namespaces(), selector)
            case "annotatedexamples":
                self.generate_annotated_lists(relative, store.examples(), selector)
            case "annotatedattributions":
                self.generate_annotated_lists(relative, store.attributions(), selector)
            case "classes":
                self.generate_compact_list(
                    ListType.GENERIC, relative, store.cpp_classes(), "", selector
                )
            case "qmlbasictypes":
                self.generate_compact_list(
                    ListType.GENERIC, relative, store.qml_basic_types(), "", selector
                )
            case "qmltypes":
                self.generate_compact_list(
                    ListType.GENERIC, relative, store.qml_types(), "", selector
                )
            case "classhierarchy":
                self.generate_class_hierarchy(relative, store.cpp_classes())
            case "functionindex":
                self.generate_function_index(relative)
            case "legalese":
                self.generate_legalese_list(relative)
            case "overviews" | "cpp-modules" | "qml-modules" | "related":
                self.generate_list(relative, selector)
            case _ if selector.startswith(("examplefiles", "exampleimages")):
                # Example files are listed by the example page itself.
                logger.debug("ignoring %s list in %s", selector, self.state.file_name)
            case _ if "bymodule" in selector:
                self._generate_by_module(relative, selector)
            case _ if selector.startswith("obsolete"):
                self._generate_obsolete_list(relative, selector)
            case _ if "classes " in selector:
                root = selector[selector.index("classes") + len("classes") :].strip()
                self.generate_compact_list(
                    ListType.GENERIC, relative, store.cpp_classes(), root, selector
                )
            case _:
                self.warn(relative, f"Unknown generated list '{selector}'")

    def generate_group_list(self, name: str, relative: Node | None) -> None:
        """Write the members of group ``name`` as an annotated list."""
        group = self.store.collection(name, NodeKind.COLLECTION_GROUP)
        if group is None:
            self.warn(relative, f"No such group '{name}'")
            return
        self.generate_list(group, name)

    def _generate_by_module(self, relative: Node | None, selector: str) -> None:
        prefix, _, module_name = selector.partition("bymodule")
        kind = (
            NodeKind.COLLECTION_QML_MODULE
            if prefix.startswith("qml")
            else NodeKind.COLLECTION_MODULE
        )
        module = self.store.collection(module_name.strip(), kind)
        if module is None:
            return
        members = self.store.members(module)
        if kind is NodeKind.COLLECTION_MODULE:
            classes = sorted(
                (node for node in members if isinstance(node, ClassNode)),
                key=lambda node: node.name,
            )
            if classes:
                self.generate_annotated_list(relative, classes, selector)
        else:
            self.generate_annotated_list(relative, members, selector)

    def _generate_obsolete_list(self, relative: Node | None, selector: str) -> None:
        list_type = ListType.OBSOLETE if selector.endswith("members") else ListType.GENERIC
        prefix = "Q" if "cpp" in selector else ""
        store = self.store
        match selector:
            case "obsoleteclasses":
                nodes = store.obsolete_classes()
            case "obsoleteqmltypes":
                nodes = store.obsolete_qml_types()
            case "obsoletecppmembers":
                nodes = store.classes_with_obsolete_members()
            case _:
                nodes = store.qml_types_with_obsolete_members()
        self.generate_compact_list(list_type, relative, nodes, prefix, selector)

    def generate_list(self, relative: Node | None, selector: str) -> None:
        """Write collections of one kind, or the members of the ``relative`` collection."""
        kind = _COLLECTION_SELECTORS.get(selector)
        if kind is not None:
            self.generate_annotated_list(
                relative, self.store.merge_collections(kind), selector
            )
            return
        if not isinstance(relative, CollectionNode):
            self.warn(relative, f"'{selector}' lists are only allowed in collections")
            return
        self.generate_annotated_list(relative, self.store.members(relative), selector)

    # Annotated lists

    def generate_annotated_list(
        self,
        relative: Node | None,
        nodes: NodeMultiMap | cabc.Sequence[Node],
        selector: str,
    ) -> None:
        """Write a ``variablelist`` pairing each linked name with its brief."""
        entries = [item[1] if isinstance(item, tuple) else item for item in nodes]
        if not entries:
            return
        writer = self.writer
        writer.start_element("variablelist", {"role": selector})
        writer.new_line()
        for node in entries:
            writer.start_element("varlistentry")
            writer.new_line()
            writer.start_element("term")
            self.generator.links.generate_full_name(node, relative)
            writer.end_element()  # term
            writer.new_line()
            writer.start_element("listitem")
            writer.new_line()
            writer.text_element("para", node.doc.brief.to_plain())
            writer.new_line()
            writer.end_element()  # listitem
            writer.new_line()
            writer.end_element()  # varlistentry
            writer.new_line()
        writer.end_element()  # variablelist
        writer.new_line()

    def generate_annotated_lists(
        self, relative: Node | None, nodes: NodeMultiMap, selector: str
    ) -> None:
        """Write one annotated list per key, in a titled section when the key is set."""
        grouped: dict[str, list[Node]] = {}
        for key, node in nodes:
            grouped.setdefault(key, []).append(node)
        for key, members in grouped.items():
            if key:
                self.writer.start_section(self.state.refs.register(key.lower()), key)
            self.generate_annotated_list(relative, members, selector)
            if key:
                self.writer.end_section()

    # Compact lists

    def generate_compact_list(
        self,
        list_type: ListType,
        relative: Node | None,
        nodes: NodeMultiMap,
        common_prefix: str,
        selector: str,
    ) -> None:
        """Write ``nodes`` bucketed by the first letter of their unprefixed name.

        Each non-empty bucket becomes a ``variablelist`` whose term is the
        bucket letter. Generic lists link to the entity; obsolete lists link
        to the obsolete members section of the entity's page.
        """
        if not nodes:
            return
        buckets: list[list[tuple[str, Node]]] = [[] for _ in range(COMPACT_BUCKETS)]
        labels = [""] * COMPACT_BUCKETS
        for name, node in nodes:
            key = compact_key(name, common_prefix)
            index = compact_bucket(key)
            labels[index] = key[:1].upper()
            buckets[index].append((name, node))

        writer = self.writer
        self.state.num_table_rows = 0
        for label, bucket in zip(labels, buckets, strict=True):
            if not bucket:
                continue
            writer.start_element("variablelist", {"role": selector})
            writer.new_line()
            writer.start_element("varlistentry")
            writer.new_line()
            writer.start_element("term")
            writer.text_element("emphasis", label, {"role": "bold"})
            writer.end_element()  # term
            writer.new_line()
            writer.start_element("listitem")
            writer.new_line()
            duplicates = _duplicate_qml_names(bucket)
            for _, node in bucket:
                writer.start_element("para")
                self._compact_entry(list_type, node, relative, duplicates)
                writer.end_element()  # para
                writer.new_line()
            writer.end_element()  # listitem
            writer.new_line()
            writer.end_element()  # varlistentry
            writer.new_line()
            writer.end_element()  # variablelist
            writer.new_line()

    def _compact_entry(
        self,
        list_type: ListType,
        node: Node,
        relative: Node | None,
        duplicates: cabc.Set[str],
    ) -> None:
        writer = self.writer
        store = self.store
        if list_type is ListType.OBSOLETE:
            href = store.file_name(node)
            if store.use_output_subdirs and node.output_subdirectory:
                href = f"../{node.output_subdirectory}/{href}"
            href = f"{href}#obsolete"
        else:
            href = store.full_document_location(node)
        if isinstance(node, QmlTypeNode):
            pieces = [node.name]
            if node.name in duplicates and node.logical_module_name:
                pieces = [f"{node.name}: {node.logical_module_name}"]
        else:
            pieces = store.full_name(node, relative).split("::")
        writer.start_element("link", {"xlink:href": href, "type": naming.target_type(node)})
        writer.characters(pieces[-1])
        writer.end_element()  # link
        parent = store.parent(node)
        if len(pieces) > 1 and parent is not None:
            writer.characters(" (")
            self.generator.links.generate_full_name(parent, relative)
            writer.characters(")")

    # Class hierarchy

    def generate_class_hierarchy(self, relative: Node | None, classes: NodeMultiMap) -> None:
        """Write nested ``itemizedlist`` elements following derived classes.

        The roots are the listed classes without a base class; below each
        class come its public, non-internal, documented subclasses.
        """
        roots = {
            node.name: node
            for _, node in classes
            if isinstance(node, ClassNode) and not node.bases
        }
        if not roots:
            return
        self._hierarchy_level(relative, roots)

    def _hierarchy_level(self, relative: Node | None, level: dict[str, ClassNode]) -> None:
        writer = self.writer
        writer.start_element("itemizedlist")
        writer.new_line()
        for name in sorted(level):
            node = level[name]
            writer.start_element("listitem")
            writer.new_line()
            writer.start_element("para")
            self.generator.links.generate_full_name(node, relative)
            writer.end_element()  # para
            writer.new_line()
            children = self._documented_subclasses(node)
            # Sublists live inside the parent's item.
            if children:
                self._hierarchy_level(relative, children)
            writer.end_element()  # listitem
            writer.new_line()
        writer.end_element()  # itemizedlist
        writer.new_line()

    def _documented_subclasses(self, node: ClassNode) -> dict[str, ClassNode]:
        children: dict[str, ClassNode] = {}
        for related in node.derived:
            if related.node_id is None or related.is_private:
                continue
            child = self.store.get(related.node_id)
            if child.is_internal or not child.has_doc:
                continue
            children[child.name] = child
        return children

    # Indexes

    def generate_function_index(self, relative: Node | None) -> None:
        """Write the alphabet bar and one item per function name."""
        writer = self.writer
        writer.start_element("simplelist", {"role": "functionIndex"})
        writer.new_line()
        for letter in string.ascii_lowercase:
            writer.text_element("member", letter.upper(), {"xlink:href": f"#{letter}"})
            writer.new_line()
        writer.end_element()  # simplelist
        writer.new_line()

        writer.start_element("itemizedlist")
        writer.new_line()
        next_letter = "a"
        for name, overloads in self.store.function_index().items():
            writer.start_element("listitem")
            writer.new_line()
            writer.start_element("para")
            writer.characters(f"{name}: ")
            current = name[:1]
            while current.islower() and current.isascii() and next_letter <= current:
                writer.write_anchor(self.state.refs.claim(next_letter))
                next_letter = chr(ord(next_letter) + 1)
            for function in overloads.values():
                writer.characters(" ")
                self.generator.links.generate_full_name(self.store.parent(function), relative)
            writer.end_element()  # para
            writer.new_line()
            writer.end_element()  # listitem
            writer.new_line()
        writer.end_element()  # itemizedlist
        writer.new_line()

    def generate_legalese_list(self, relative: Node | None) -> None:
        """Write each distinct legalese text followed by the entities it covers."""
        writer = self.writer
        for text, nodes in self.store.legalese_texts():
            self.generator.interpreter.generate_text(text, relative)
            writer.start_element("itemizedlist")
            writer.new_line()
            for node in nodes:
                writer.start_element("listitem")
                writer.new_line()
                writer.start_element("para")
                self.generator.links.generate_full_name(node, relative)
                writer.end_element()  # para
                writer.new_line()
                writer.end_element()  # listitem
                writer.new_line()
            writer.end_element()  # itemizedlist
            writer.new_line()


def _duplicate_qml_names(bucket: cabc.Iterable[tuple[str, Node]]) -> set[str]:
    seen: set[str] = set()
    duplicates: set[str] = set()
    for _, node in bucket:
        if not isinstance(node, QmlTypeNode):
            continue
        if node.name in seen:
            duplicates.add(node.name)
        seen.add(node.name)
    return duplicates


__all__ = ["COMPACT_BUCKETS", "ListRenderer", "ListType", "compact_bucket", "compact_key"]
