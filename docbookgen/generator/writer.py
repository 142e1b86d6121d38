"""Streaming-style DocBook writer built on an lxml element tree.

The generator emits start, character and end events in document order, the
way a streaming XML writer would. :class:`DocBookWriter` turns those events
into an :mod:`lxml.etree` tree so that the result is always well-formed and
can be serialized once the document is complete.
"""

from __future__ import annotations

import logging
import re
import typing as typ

from lxml import etree

from docbookgen._constants import DB_NAMESPACE, XLINK_NAMESPACE, XML_NAMESPACE

logger = logging.getLogger(__name__)

_NSMAP = {"db": DB_NAMESPACE, "xlink": XLINK_NAMESPACE}
_PREFIXES = {"db": DB_NAMESPACE, "xlink": XLINK_NAMESPACE, "xml": XML_NAMESPACE}
# Characters that XML 1.0 does not allow in character data.
_INVALID_XML_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


def _qualified_attribute(name: str) -> str:
    prefix, sep, local = name.partition(":")
    if sep and prefix in _PREFIXES:
        return f"{{{_PREFIXES[prefix]}}}{local}"
    return name


class DocBookWriter:
    """Build a DocBook element tree from nested start and end calls.

    Element names are local names in the DocBook namespace. Attribute names
    may carry the ``xml:`` or ``xlink:`` prefix. ``opened`` and ``closed``
    count element events so callers can check that a walk was balanced.

    Examples
    --------
    >>> writer = DocBookWriter()
    >>> _ = writer.start_element("article", {"version": "5.2"})
    >>> _ = writer.start_element("para")
    >>> writer.characters("Hello")
    >>> writer.end_element()
    >>> writer.end_element()
    >>> (writer.opened, writer.closed)
    (2, 2)
    >>> b"<db:para>Hello</db:para>" in writer.finish()
    True
    """

    def __init__(self) -> None:
        self._root: etree._Element | None = None
        self._stack: list[etree._Element] = []
        self.opened = 0
        self.closed = 0

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def current(self) -> etree._Element | None:
        return self._stack[-1] if self._stack else None

    @property
    def current_tag(self) -> str:
        """Return the local name of the open element, or ``""``."""
        element = self.current
        return etree.QName(element).localname if element is not None else ""

    @property
    def root(self) -> etree._Element | None:
        return self._root

    def start_element(
        self, tag: str, attributes: typ.Mapping[str, str] | None = None
    ) -> etree._Element:
        """Open ``tag`` as a child of the current element."""
        name = f"{{{DB_NAMESPACE}}}{tag}"
        if self._root is None:
            element = etree.Element(name, nsmap=_NSMAP)
            self._root = element
        else:
            parent = self.current
            if parent is None:
                logger.warning("element <%s> opened after the document element closed", tag)
                parent = self._root
            element = etree.SubElement(parent, name)
        for key, value in (attributes or {}).items():
            element.set(_qualified_attribute(key), _clean(value))
        self._stack.append(element)
        self.opened += 1
        return element

    def end_element(self) -> None:
        """Close the most recently opened element."""
        if not self._stack:
            logger.warning("end_element called with no open element")
            return
        self._stack.pop()
        self.closed += 1

    def set_attribute(self, name: str, value: str) -> None:
        """Set an attribute on the currently open element."""
        element = self.current
        if element is None:
            logger.warning("attribute %s set with no open element", name)
            return
        element.set(_qualified_attribute(name), _clean(value))

    def characters(self, text: str) -> None:
        """Append character data at the current position."""
        if not text:
            return
        element = self.current
        if element is None:
            return
        text = _clean(text)
        if len(element):
            last = element[-1]
            last.tail = (last.tail or "") + text
        else:
            element.text = (element.text or "") + text

    def new_line(self) -> None:
        self.characters("\n")

    def text_element(
        self, tag: str, text: str, attributes: typ.Mapping[str, str] | None = None
    ) -> None:
        """Write ``<tag>text</tag>``."""
        self.start_element(tag, attributes)
        self.characters(text)
        self.end_element()

    def empty_element(self, tag: str, attributes: typ.Mapping[str, str] | None = None) -> None:
        self.start_element(tag, attributes)
        self.end_element()

    # Section and link shapes shared by every document kind.

    def start_section_begin(self, section_id: str | None = None) -> None:
        """Open a ``section`` and its ``title``; the caller writes the title."""
        self.start_element("section", {"xml:id": section_id} if section_id else None)
        self.new_line()
        self.start_element("title")

    def start_section_end(self) -> None:
        self.end_element()  # title
        self.new_line()

    def start_section(self, section_id: str | None, title: str) -> None:
        self.start_section_begin(section_id)
        self.characters(title)
        self.start_section_end()

    def end_section(self) -> None:
        self.end_element()  # section
        self.new_line()

    def write_anchor(self, anchor_id: str) -> None:
        self.empty_element("anchor", {"xml:id": anchor_id})
        self.new_line()

    def simple_link(self, href: str, text: str) -> None:
        """Write a ``link`` to ``href`` labelled with ``text``."""
        self.start_element("link", {"xlink:href": href})
        self.characters(text)
        self.end_element()

    def finish(self) -> bytes:
        """Serialize the document, closing any element still open."""
        if self._stack:
            logger.warning("%d element(s) still open at end of document", len(self._stack))
        while self._stack:
            self.end_element()
        if self._root is None:
            return b""
        return etree.tostring(self._root, xml_declaration=True, encoding="UTF-8")


def _clean(value: str) -> str:
    return _INVALID_XML_CHARS.sub("", value)


__all__ = ["DocBookWriter"]
