"""Rendering of ``link`` elements between documented entities."""

from __future__ import annotations

import re
import typing as typ

from docbookgen import naming
from docbookgen.generator.base import GeneratorComponent
from docbookgen.model.nodes import Access

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from docbookgen.model.nodes import ClassNode, Node, QmlTypeNode, RelatedClass

QT_QUICK = "QtQuick"

# A parenthesis directly following a name stays outside the link: "foo()".
_FUNCTION_LEFT_PAREN = re.compile(r"\S(\()")


class CrossReferences(GeneratorComponent):
    """Open, fill and close links in the current document."""

    def resolve(self, target: str, relative: Node | None) -> tuple[Node | None, str]:
        """Return the node named by ``target`` and the href to reach it."""
        return self.store.resolve_link(target, relative)

    def node_for_string(self, value: str) -> Node | None:
        """Return the node whose location, name or target is ``value``."""
        for node in self.store.nodes():
            if node.node_id and self.store.full_document_location(node) == value:
                return node
        node = self.store.find_node(value)
        if node is None:
            node, _ = self.store.find_node_for_target(value)
        return node

    def generate_full_name(self, node: Node, relative: Node | None) -> None:
        """Write a link to ``node`` labelled with its name as seen from ``relative``."""
        self.writer.start_element(
            "link",
            {
                "xlink:href": self.store.full_document_location(node),
                "xlink:role": naming.target_type(node),
            },
        )
        self.writer.characters(self.store.full_name(node, relative))
        self.writer.end_element()

    def generate_full_name_as(
        self, apparent: Node, full_name: str, actual: Node | None = None
    ) -> None:
        """Write ``full_name`` as a link to ``actual`` (``apparent`` by default)."""
        target = actual if actual is not None else apparent
        self.writer.start_element(
            "link",
            {
                "xlink:href": self.store.full_document_location(target),
                "type": naming.target_type(target),
            },
        )
        self.writer.characters(full_name)
        self.writer.end_element()

    def generate_sorted_names(self, node: ClassNode, related: cabc.Iterable[RelatedClass]) -> None:
        """Write comma-separated links to the public documented classes in ``related``."""
        by_name: dict[str, Node] = {}
        for entry in related:
            if entry.node_id is None:
                continue
            other = self.store.get(entry.node_id)
            if other.access is Access.PUBLIC and not other.is_internal and other.has_doc:
                by_name[self.store.plain_full_name(other, node).lower()] = other
        names = sorted(by_name)
        for index, name in enumerate(names):
            self.generate_full_name(by_name[name], node)
            self.writer.characters(naming.comma(index, len(names)))

    def generate_sorted_qml_names(self, base: QmlTypeNode, subclasses: cabc.Iterable[Node]) -> None:
        """Write comma-separated links to QML subclasses of ``base``.

        Qt Quick types only list subclasses from their own module.
        """
        by_name: dict[str, Node] = {}
        for sub in subclasses:
            base_module = base.logical_module_name
            sub_module = getattr(sub, "logical_module_name", "")
            if QT_QUICK not in (base_module, sub_module) or base_module == sub_module:
                by_name[self.store.plain_full_name(sub, base).lower()] = sub
        names = sorted(by_name)
        for index, name in enumerate(names):
            self.generate_full_name(by_name[name], base)
            self.writer.characters(naming.comma(index, len(names)))

    def generate_inherits(self, node: ClassNode) -> None:
        """Write links to the resolved base classes, marking non-public inheritance."""
        count = len(node.bases)
        for index, base in enumerate(node.bases):
            if base.node_id is None:
                continue
            self.generate_full_name(self.store.get(base.node_id), node)
            if base.access is Access.PROTECTED:
                self.writer.characters(" (protected)")
            elif base.access is Access.PRIVATE:
                self.writer.characters(" (private)")
            self.writer.characters(naming.comma(index, count))

    def generate_simple_link(self, href: str, text: str) -> None:
        """Write a link, or only ``text`` when there is nowhere to point."""
        if href:
            self.writer.simple_link(href, text)
        else:
            self.writer.characters(text)

    def begin_link(self, href: str, node: Node | None, relative: Node | None) -> None:
        attributes = {"xlink:href": href}
        if (
            node is not None
            and node.is_obsolete
            and not (relative is not None and node.status is relative.status)
        ):
            attributes["role"] = "obsolete"
        self.writer.start_element("link", attributes)
        self.state.in_link = True

    def end_link(self) -> None:
        if self.state.in_link:
            self.writer.end_element()
            self.state.in_link = False

    def generate_link(self, text: str) -> None:
        """Write link text, closing the link before a call's parenthesis."""
        match = _FUNCTION_LEFT_PAREN.search(text)
        if match is None or not self.state.in_link:
            self.writer.characters(text)
            return
        split = match.start(1)
        self.writer.characters(text[:split])
        self.end_link()
        self.writer.characters(text[split:])


__all__ = ["CrossReferences"]
