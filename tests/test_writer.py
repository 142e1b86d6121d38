"""Unit tests for the lxml-backed DocBook writer."""

from __future__ import annotations

import logging

import pytest
from lxml import etree

from docbookgen._constants import DB_NAMESPACE, XLINK_NAMESPACE, XML_NAMESPACE
from docbookgen.generator.writer import DocBookWriter

NS = {"db": DB_NAMESPACE}


def _parse(writer: DocBookWriter) -> etree._Element:
    return etree.fromstring(writer.finish())


def test_elements_live_in_the_docbook_namespace() -> None:
    writer = DocBookWriter()
    writer.start_element("article", {"version": "5.2", "xml:lang": "en"})
    writer.text_element("para", "Hello")
    writer.end_element()

    root = _parse(writer)
    assert root.tag == f"{{{DB_NAMESPACE}}}article"
    assert root.get(f"{{{XML_NAMESPACE}}}lang") == "en"
    assert root.xpath("string(db:para)", namespaces=NS) == "Hello"


def test_characters_after_a_child_become_its_tail() -> None:
    writer = DocBookWriter()
    writer.start_element("para")
    writer.characters("See ")
    writer.simple_link("qstring.xml", "QString")
    writer.characters(" for details.")
    writer.end_element()

    root = _parse(writer)
    link = root[0]
    assert link.get(f"{{{XLINK_NAMESPACE}}}href") == "qstring.xml"
    assert "".join(root.itertext()) == "See QString for details."


def test_start_section_writes_id_and_title() -> None:
    writer = DocBookWriter()
    writer.start_element("article")
    writer.start_section("details", "Detailed Description")
    writer.end_section()
    writer.end_element()

    root = _parse(writer)
    section = root.find("db:section", NS)
    assert section is not None
    assert section.get(f"{{{XML_NAMESPACE}}}id") == "details"
    assert section.findtext("db:title", namespaces=NS) == "Detailed Description"


def test_counts_opened_and_closed_elements() -> None:
    writer = DocBookWriter()
    writer.start_element("article")
    writer.empty_element("anchor", {"xml:id": "a"})
    writer.end_element()
    assert (writer.opened, writer.closed) == (2, 2)
    assert writer.depth == 0


def test_finish_closes_elements_left_open(caplog: pytest.LogCaptureFixture) -> None:
    writer = DocBookWriter()
    writer.start_element("article")
    writer.start_element("para")
    with caplog.at_level(logging.WARNING):
        content = writer.finish()
    assert b"<db:para/>" in content
    assert "still open" in caplog.text


def test_invalid_xml_characters_are_dropped() -> None:
    writer = DocBookWriter()
    writer.text_element("para", "bell\x07 here", {"role": "x\x01y"})
    root = _parse(writer)
    assert root.text == "bell here"
    assert root.get("role") == "xy"


def test_current_tag_tracks_the_innermost_element() -> None:
    writer = DocBookWriter()
    assert writer.current_tag == ""
    writer.start_element("article")
    writer.start_element("blockquote")
    assert writer.current_tag == "blockquote"
    writer.end_element()
    assert writer.current_tag == "article"


def test_end_element_without_open_element_is_ignored(caplog: pytest.LogCaptureFixture) -> None:
    writer = DocBookWriter()
    with caplog.at_level(logging.WARNING):
        writer.end_element()
    assert writer.closed == 0
    assert writer.finish() == b""
