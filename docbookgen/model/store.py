"""Arena of documentation nodes and the lookups the generator needs.

Nodes reference each other by integer id. The store owns every node, hands
out ids on :meth:`NodeStore.add`, and answers the read-only questions the
generator asks: names, file names, link targets and aggregated listings.
"""

from __future__ import annotations

import logging
import typing as typ

from docbookgen import naming
from docbookgen._constants import FILE_EXTENSION
from docbookgen.model.nodes import (
    Aggregate,
    ClassNode,
    CollectionNode,
    EnumNode,
    ExampleNode,
    FunctionNode,
    HeaderNode,
    NamespaceNode,
    Node,
    NodeKind,
    PageNode,
    ProxyNode,
    QmlBasicTypeNode,
    QmlTypeNode,
    SharedCommentNode,
    ThreadSafeness,
    TypedefNode,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from docbookgen.atoms import Text

logger = logging.getLogger(__name__)

_TYPE_KINDS = frozenset(
    {
        NodeKind.CLASS,
        NodeKind.STRUCT,
        NodeKind.UNION,
        NodeKind.ENUM,
        NodeKind.TYPEDEF,
        NodeKind.NAMESPACE,
        NodeKind.QML_TYPE,
        NodeKind.QML_BASIC_TYPE,
    }
)
_CLASS_KINDS = frozenset({NodeKind.CLASS, NodeKind.STRUCT, NodeKind.UNION})
_URL_PREFIXES = ("http:", "https:", "file:", "ftp:", "mailto:")
_PAGE_SUFFIXES = (".html", ".xml")

NodeMultiMap = list[tuple[str, Node]]
_N = typ.TypeVar("_N", bound=Node)


class NodeStore:
    """Own every documentation node and resolve names and links.

    Parameters
    ----------
    use_output_subdirs : bool, optional
        When set, links between nodes placed in different output
        subdirectories are prefixed with ``../<subdir>/``.

    Examples
    --------
    >>> from docbookgen.model.nodes import ClassNode, FunctionNode
    >>> store = NodeStore()
    >>> cls = store.add(ClassNode("QString"))
    >>> fn = store.add(FunctionNode("size"), cls)
    >>> store.plain_full_name(fn)
    'QString::size()'
    >>> store.full_document_location(fn)
    'qstring.xml#size'
    """

    def __init__(self, *, use_output_subdirs: bool = False) -> None:
        self._nodes: list[Node] = []
        self._targets: dict[str, tuple[int, str]] = {}
        self._images: dict[str, str] = {}
        self.use_output_subdirs = use_output_subdirs
        self._root = self.add(NamespaceNode(""))

    # Arena

    @property
    def root(self) -> NamespaceNode:
        return self._root

    def add(self, node: _N, parent: Node | None = None) -> _N:
        """Take ownership of ``node`` under ``parent`` and return it.

        Nodes without an explicit parent are placed under the root
        namespace. Target names declared on the node become link targets.
        """
        node.node_id = len(self._nodes)
        self._nodes.append(node)
        if node.node_id == 0:
            return node
        owner = parent if parent is not None else self._root
        node.parent_id = owner.node_id
        if isinstance(owner, Aggregate):
            owner.children.append(node.node_id)
        for target in node.targets:
            self._targets.setdefault(target, (node.node_id, naming.canonical_title(target)))
        return node

    def add_target(self, node: Node, target: str) -> None:
        """Register ``target`` as a named anchor inside ``node``'s documentation."""
        self._targets.setdefault(target, (node.node_id, naming.canonical_title(target)))

    def get(self, node_id: int) -> typ.Any:
        return self._nodes[node_id]

    def parent(self, node: Node) -> Node | None:
        if node.parent_id is None:
            return None
        return self._nodes[node.parent_id]

    def children(self, node: Node) -> list[Node]:
        if not isinstance(node, Aggregate):
            return []
        return [self._nodes[child] for child in node.children]

    def nodes(self) -> cabc.Iterator[Node]:
        return iter(self._nodes)

    def members(self, collection: CollectionNode) -> list[Node]:
        return [self._nodes[member] for member in collection.members]

    def ancestors(self, node: Node) -> cabc.Iterator[Node]:
        """Yield the parents of ``node`` from the nearest outwards."""
        current = self.parent(node)
        while current is not None:
            yield current
            current = self.parent(current)

    # Names

    def plain_full_name(self, node: Node, relative: Node | None = None) -> str:
        """Return the ``::`` qualified name of ``node`` as seen from ``relative``."""
        if not node.name:
            return "global"
        if isinstance(node, HeaderNode):
            return node.plain_name
        parts: list[str] = []
        current: Node | None = node
        while current is not None and not isinstance(current, HeaderNode):
            parts.insert(0, current.plain_name)
            parent = self.parent(current)
            if parent is None or parent is relative or not parent.name:
                break
            current = parent
        return "::".join(parts)

    def full_name(self, node: Node, relative: Node | None = None) -> str:
        """Return the display name: titles for pages, qualified names otherwise."""
        if isinstance(node, PageNode) and not isinstance(node, CollectionNode) and node.title:
            return node.title
        if isinstance(node, CollectionNode) and node.is_group and node.title:
            return node.title
        return self.plain_full_name(node, relative)

    def thread_safeness(self, node: Node) -> ThreadSafeness:
        """Return the declared safeness unless it merely repeats the parent's."""
        parent = self.parent(node)
        if parent is not None and node.thread_safeness is self.inherited_thread_safeness(parent):
            return ThreadSafeness.UNSPECIFIED
        return node.thread_safeness

    def inherited_thread_safeness(self, node: Node) -> ThreadSafeness:
        parent = self.parent(node)
        if parent is not None and node.thread_safeness is ThreadSafeness.UNSPECIFIED:
            return self.inherited_thread_safeness(parent)
        return node.thread_safeness

    # Files and locations

    def file_base(self, node: Node) -> str:
        """Return the extension-less output file name of a page-like node."""
        match node:
            case ProxyNode():
                base = self.plain_full_name(node).replace("::", "-") + "-proxy"
            case ClassNode() | NamespaceNode() | HeaderNode():
                if not node.name:
                    return ""
                base = self.plain_full_name(node).replace("::", "-")
            case QmlTypeNode() | QmlBasicTypeNode():
                module = node.logical_module_name
                base = f"qml-{module}-{node.name}" if module else f"qml-{node.name}"
            case CollectionNode():
                if node.is_module:
                    base = f"{node.name}-module"
                elif node.is_qml_module:
                    base = f"{node.name}-qmlmodule"
                else:
                    base = node.name
            case ExampleNode():
                base = f"{node.name}-example"
            case PageNode():
                base = node.name
                for suffix in _PAGE_SUFFIXES:
                    base = base.removesuffix(suffix)
                base = base or node.title
            case _:
                return ""
        return naming.canonical_title(base)

    def page_of(self, node: Node) -> Node | None:
        """Return the page-like node whose document contains ``node``."""
        current: Node | None = node
        while current is not None and not current.is_page_node:
            current = self.parent(current)
        return current

    def file_name(self, node: Node) -> str:
        """Return the output file holding ``node``'s documentation."""
        if node.file_name:
            return node.file_name
        page = self.page_of(node)
        if page is None:
            return ""
        if page is not node and page.file_name:
            return page.file_name
        base = self.file_base(page)
        return f"{base}.{FILE_EXTENSION}" if base else ""

    def anchor(self, node: Node) -> str:
        """Return the cleaned anchor of a member node, or ``""`` for pages."""
        return naming.clean_ref(naming.ref_for_node(node, self.get))

    def full_document_location(self, node: Node | None) -> str:
        """Return the location of ``node`` independent of any referring page."""
        if node is None:
            return ""
        if node.url:
            return node.url
        file_name = self.file_name(node)
        if not file_name:
            return ""
        if node.is_page_node and not isinstance(node, SharedCommentNode):
            return file_name
        anchor = self.anchor(node)
        return f"{file_name}#{anchor}" if anchor else file_name

    def link_for_node(self, node: Node | None, relative: Node | None) -> str:
        """Return the href from ``relative``'s document to ``node``.

        An empty string means there is nothing to link to: the node is
        private, has no output file, or is the very anchor being written.
        """
        if node is None:
            return ""
        if node.url:
            return node.url
        if node.is_private:
            return ""
        file_name = self.file_name(node)
        if not file_name:
            return ""
        link = file_name
        if not node.is_page_node or isinstance(node, SharedCommentNode):
            ref = self.anchor(node)
            if (
                relative is not None
                and file_name == self.file_name(relative)
                and ref == self.anchor(relative)
            ):
                return ""
            link = f"{link}#{ref}"
        if (
            relative is not None
            and node is not relative
            and self.use_output_subdirs
            and node.kind is not NodeKind.EXTERNAL_PAGE
            and node.output_subdirectory != relative.output_subdirectory
        ):
            subdir = node.output_subdirectory
            if link.startswith(f"{subdir}/"):
                link = f"../{link}"
            else:
                link = f"../{subdir}/{link}"
        return link

    # Lookups

    def find_node(self, name: str, kinds: cabc.Container[NodeKind] | None = None) -> typ.Any:
        """Return the first node whose qualified name is ``name``."""
        for node in self._nodes[1:]:
            if kinds is not None and node.kind not in kinds:
                continue
            if self.plain_full_name(node).removesuffix("()") == name:
                return node
        return None

    def find_class(self, name: str) -> ClassNode | None:
        return self.find_node(name, _CLASS_KINDS)

    def _scopes(self, relative: Node | None) -> list[str]:
        scopes: list[str] = []
        current = relative
        if current is not None and not isinstance(current, Aggregate):
            current = self.parent(current)
        while current is not None:
            if current.name and isinstance(current, Aggregate):
                scopes.append(self.plain_full_name(current))
            current = self.parent(current)
        scopes.append("")
        return scopes

    def find_type_node(self, name: str, relative: Node | None = None) -> typ.Any:
        """Resolve a type name by searching ``relative``'s scopes outwards."""
        for scope in self._scopes(relative):
            qualified = f"{scope}::{name}" if scope else name
            node = self.find_node(qualified, _TYPE_KINDS)
            if node is not None:
                return node
        return None

    def find_node_for_target(
        self, target: str, relative: Node | None = None
    ) -> tuple[typ.Any, str]:
        """Resolve a link target to ``(node, ref)``.

        ``target`` may be a named anchor, a qualified or scope-relative
        entity name (a trailing ``()`` is ignored), a page title, a page
        name or an output file name, optionally followed by ``#anchor``.
        """
        target = target.strip()
        if not target:
            return None, ""
        if target in self._targets:
            node_id, ref = self._targets[target]
            return self._nodes[node_id], ref
        ref = ""
        if "#" in target:
            target, _, ref = target.partition("#")
        name = target.removesuffix("()")
        for scope in self._scopes(relative):
            qualified = f"{scope}::{name}" if scope else name
            node = self.find_node(qualified)
            if node is not None:
                return node, ref
        for node in self._nodes[1:]:
            if not node.is_page_node:
                continue
            if target in (node.title, node.name) or target == self.file_name(node):
                return node, ref
        return None, ""

    def resolve_link(self, target: str, relative: Node | None) -> tuple[typ.Any, str]:
        """Return ``(node, href)`` for a link target written in ``relative``'s text.

        URLs are returned unchanged with no node. An unresolvable target
        yields ``(None, "")``.
        """
        if target.startswith(_URL_PREFIXES):
            return None, target
        node, ref = self.find_node_for_target(target, relative)
        if node is None:
            return None, ""
        link = self.link_for_node(node, relative)
        if ref:
            link = link.partition("#")[0] if link else self.file_name(node)
            link = f"{link}#{ref}"
        return node, link

    def collection(self, name: str, kind: NodeKind) -> CollectionNode | None:
        for node in self._nodes:
            if isinstance(node, CollectionNode) and node.kind is kind and node.name == name:
                return node
        return None

    def merge_collections(self, kind: NodeKind) -> NodeMultiMap:
        """Return every collection of ``kind`` keyed and sorted by name."""
        found = [
            (node.name, node)
            for node in self._nodes
            if isinstance(node, CollectionNode) and node.kind is kind
        ]
        return sorted(found, key=lambda item: item[0].lower())

    def qml_subclasses(self, node: QmlTypeNode) -> list[QmlTypeNode]:
        return [
            other
            for other in self._nodes
            if isinstance(other, QmlTypeNode) and other.qml_base_id == node.node_id
        ]

    # Aggregated listings

    def _is_listed(self, node: Node) -> bool:
        return not node.is_private and not node.is_internal and node.has_doc

    def _sorted(self, pairs: cabc.Iterable[tuple[str, Node]]) -> NodeMultiMap:
        return sorted(pairs, key=lambda item: (item[0].lower(), item[0]))

    def cpp_classes(self) -> NodeMultiMap:
        return self._sorted(
            (self.plain_full_name(node), node)
            for node in self._nodes
            if isinstance(node, ClassNode) and self._is_listed(node) and not node.is_obsolete
        )

    def obsolete_classes(self) -> NodeMultiMap:
        return self._sorted(
            (self.plain_full_name(node), node)
            for node in self._nodes
            if isinstance(node, ClassNode) and self._is_listed(node) and node.is_obsolete
        )

    def namespaces(self) -> NodeMultiMap:
        return self._sorted(
            (self.plain_full_name(node), node)
            for node in self._nodes
            if isinstance(node, NamespaceNode) and node.name and self._is_listed(node)
        )

    def qml_types(self) -> NodeMultiMap:
        return self._sorted(
            (node.name, node)
            for node in self._nodes
            if isinstance(node, QmlTypeNode) and self._is_listed(node) and not node.is_obsolete
        )

    def obsolete_qml_types(self) -> NodeMultiMap:
        return self._sorted(
            (node.name, node)
            for node in self._nodes
            if isinstance(node, QmlTypeNode) and self._is_listed(node) and node.is_obsolete
        )

    def qml_basic_types(self) -> NodeMultiMap:
        return self._sorted(
            (node.name, node)
            for node in self._nodes
            if isinstance(node, QmlBasicTypeNode) and self._is_listed(node)
        )

    def examples(self) -> NodeMultiMap:
        return self._sorted(
            (node.full_title, node)
            for node in self._nodes
            if isinstance(node, ExampleNode) and not node.is_internal
        )

    def attributions(self) -> NodeMultiMap:
        return self._sorted(
            (node.full_title, node)
            for node in self._nodes
            if isinstance(node, PageNode) and node.is_attribution
        )

    def has_obsolete_members(self, node: Node) -> bool:
        return any(
            child.is_obsolete and not child.is_private for child in self.children(node)
        )

    def classes_with_obsolete_members(self) -> NodeMultiMap:
        return self._sorted(
            (self.plain_full_name(node), node)
            for node in self._nodes
            if isinstance(node, ClassNode)
            and self._is_listed(node)
            and self.has_obsolete_members(node)
        )

    def qml_types_with_obsolete_members(self) -> NodeMultiMap:
        return self._sorted(
            (node.name, node)
            for node in self._nodes
            if isinstance(node, QmlTypeNode)
            and self._is_listed(node)
            and self.has_obsolete_members(node)
        )

    def function_index(self) -> dict[str, dict[str, FunctionNode]]:
        """Map each function name to its documented overloads by parent name."""
        index: dict[str, dict[str, FunctionNode]] = {}
        for node in self._nodes:
            if not isinstance(node, FunctionNode):
                continue
            if node.is_private or node.is_internal or node.is_obsolete:
                continue
            if node.is_macro or node.is_dtor:
                continue
            parent = self.parent(node)
            if parent is None or any(a.is_private for a in self.ancestors(node)):
                continue
            index.setdefault(node.name, {})
            index[node.name].setdefault(self.full_name(parent), node)
        return {
            name: dict(sorted(by_parent.items()))
            for name, by_parent in sorted(index.items(), key=lambda item: item[0].lower())
        }

    def legalese_texts(self) -> list[tuple[Text, list[Node]]]:
        """Group nodes by identical legalese text, in first-seen order."""
        groups: dict[str, tuple[Text, list[Node]]] = {}
        for node in self._nodes:
            legalese = node.doc.legalese
            if legalese.is_empty:
                continue
            key = legalese.to_plain()
            groups.setdefault(key, (legalese, []))[1].append(node)
        return list(groups.values())

    # Images

    def register_image(self, name: str, file_path: str) -> None:
        self._images[name] = file_path

    def image_file_name(self, name: str) -> str:
        """Return the registered file for image ``name``, or ``""`` when missing."""
        return self._images.get(name, "")

    # Miscellany

    def flags_typedef(self, node: EnumNode) -> TypedefNode | None:
        if node.flags_type_id is None:
            return None
        return self.get(node.flags_type_id)

    def doc_must_be_generated(self, node: Node) -> bool:
        """Return whether ``node`` gets its own output document."""
        if node.url or node.is_index_node:
            return False
        if isinstance(node, ClassNode) and (node.is_private or not node.has_doc):
            return False
        return node.is_page_node and node.kind is not NodeKind.EXTERNAL_PAGE


__all__ = ["NodeMultiMap", "NodeStore"]
