"""Interpret atom chains into DocBook elements.

:class:`AtomInterpreter` walks a :class:`~docbookgen.atoms.Text` one atom at
a time. Each atom kind has a handler that writes zero or more elements and
returns how many *extra* atoms it consumed, so that handlers which read
ahead (links, enum values, brief rewrites) keep the walk in step.

The walk tracks a few flags on the per-document
:class:`~docbookgen.generator.state.GenerationState`: whether a paragraph,
link, section heading or table header is open. Block constructs such as
lists and tables close an open paragraph before they start, since DocBook
does not allow them inside ``para``.
"""

from __future__ import annotations

import logging
import typing as typ

from docbookgen import naming
from docbookgen._constants import FORMAT_NAME
from docbookgen.atoms import (
    FORMATTING_BOLD,
    FORMATTING_ITALIC,
    FORMATTING_LINK,
    FORMATTING_PARAMETER,
    FORMATTING_SUBSCRIPT,
    FORMATTING_SUPERSCRIPT,
    FORMATTING_TELETYPE,
    FORMATTING_UNDERLINE,
    LIST_BULLET,
    LIST_LOWER_ALPHA,
    LIST_LOWER_ROMAN,
    LIST_TAG,
    LIST_UPPER_ALPHA,
    LIST_UPPER_ROMAN,
    LIST_VALUE,
    Atom,
    AtomKind,
    atoms_until,
    match_ahead,
    section_heading,
)
from docbookgen.generator.attributes import (
    parse_cell_spec,
    parse_row_attributes,
    parse_table_spec,
)
from docbookgen.generator.base import GeneratorComponent
from docbookgen.generator.state import SectionStack
from docbookgen.model.nodes import EnumNode, PropertyNode, VariableNode

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from docbookgen.atoms import Text
    from docbookgen.model.nodes import Node

logger = logging.getLogger(__name__)

Handler = typ.Callable[[Atom, "Node | None"], int]

_FORMATTING_ELEMENTS: dict[str, tuple[str, dict[str, str]]] = {
    FORMATTING_BOLD: ("emphasis", {"role": "bold"}),
    FORMATTING_ITALIC: ("emphasis", {}),
    FORMATTING_UNDERLINE: ("emphasis", {"role": "underline"}),
    FORMATTING_SUBSCRIPT: ("sub", {}),
    FORMATTING_SUPERSCRIPT: ("sup", {}),
    FORMATTING_TELETYPE: ("code", {}),
    FORMATTING_PARAMETER: ("code", {"role": "parameter"}),
}

_NUMERATIONS = {
    LIST_UPPER_ALPHA: "upperalpha",
    LIST_LOWER_ALPHA: "loweralpha",
    LIST_UPPER_ROMAN: "upperroman",
    LIST_LOWER_ROMAN: "lowerroman",
}

_BRIEF_OPENERS = frozenset({"the", "a", "an", "whether", "which"})

# Kinds that are markers for other tools and produce no output.
_SILENT_KINDS = frozenset(
    {
        AtomKind.BASE_NAME,
        AtomKind.BR,
        AtomKind.CODE_QUOTE_ARGUMENT,
        AtomKind.CODE_QUOTE_COMMAND,
        AtomKind.DIV_LEFT,
        AtomKind.DIV_RIGHT,
        AtomKind.END_QML_TEXT,
        AtomKind.FORMAT_ELSE,
        AtomKind.FORMAT_ENDIF,
        AtomKind.FORMAT_IF,
        AtomKind.HR,
        AtomKind.IMAGE_TEXT,
        AtomKind.KEYWORD,
        AtomKind.LEGALESE_LEFT,
        AtomKind.LEGALESE_RIGHT,
        AtomKind.LINE_BREAK,
        AtomKind.LIST_ITEM_NUMBER,
        AtomKind.NOP,
        AtomKind.QML_TEXT,
        AtomKind.SECTION_RIGHT,
        AtomKind.SINCE_LIST,
        AtomKind.SINCE_TAG_LEFT,
        AtomKind.SNIPPET_COMMAND,
        AtomKind.SNIPPET_IDENTIFIER,
        AtomKind.SNIPPET_LOCATION,
        AtomKind.TABLE_OF_CONTENTS,
    }
)


def _to_int(value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return 0


def is_three_column_enum_value_table(atom: Atom) -> bool:
    """Return whether any item of the value list starting at ``atom`` has a description."""
    current: Atom | None = atom
    while current is not None and not (
        current.kind is AtomKind.LIST_RIGHT and current.string == LIST_VALUE
    ):
        if current.kind is AtomKind.LIST_ITEM_LEFT and not match_ahead(
            current, AtomKind.LIST_ITEM_RIGHT
        ):
            return True
        current = current.next
    return False


class AtomInterpreter(GeneratorComponent):
    """Turn atom chains into DocBook using the generator's current writer."""

    def __init__(self, generator: typ.Any) -> None:
        super().__init__(generator)
        self._handlers: dict[AtomKind, Handler] = {
            AtomKind.ANNOTATED_LIST: self._annotated_list,
            AtomKind.AUTO_LINK: self._auto_link,
            AtomKind.NAV_AUTO_LINK: self._auto_link,
            AtomKind.BRIEF_LEFT: self._brief_left,
            AtomKind.BRIEF_RIGHT: self._brief_right,
            AtomKind.C: self._c,
            AtomKind.CAPTION_LEFT: self._caption_left,
            AtomKind.CAPTION_RIGHT: self._caption_right,
            AtomKind.CODE: self._code,
            AtomKind.CODE_BAD: self._code_bad,
            AtomKind.CODE_NEW: self._code_new,
            AtomKind.CODE_OLD: self._code_old,
            AtomKind.FOOTNOTE_LEFT: self._footnote_left,
            AtomKind.FOOTNOTE_RIGHT: self._footnote_right,
            AtomKind.FORMATTING_LEFT: self._formatting_left,
            AtomKind.FORMATTING_RIGHT: self._formatting_right,
            AtomKind.GENERATED_LIST: self._generated_list,
            AtomKind.IMAGE: self._image,
            AtomKind.INLINE_IMAGE: self._image,
            AtomKind.IMPORTANT_LEFT: self._admonition_left,
            AtomKind.NOTE_LEFT: self._admonition_left,
            AtomKind.IMPORTANT_RIGHT: self._admonition_right,
            AtomKind.NOTE_RIGHT: self._admonition_right,
            AtomKind.JAVASCRIPT: self._javascript,
            AtomKind.LINK: self._link,
            AtomKind.NAV_LINK: self._link,
            AtomKind.LINK_NODE: self._link_node,
            AtomKind.LIST_LEFT: self._list_left,
            AtomKind.LIST_TAG_LEFT: self._list_tag_left,
            AtomKind.LIST_TAG_RIGHT: self._list_tag_right,
            AtomKind.SINCE_TAG_RIGHT: self._list_tag_right,
            AtomKind.LIST_ITEM_LEFT: self._list_item_left,
            AtomKind.LIST_ITEM_RIGHT: self._list_item_right,
            AtomKind.LIST_RIGHT: self._end_block,
            AtomKind.PARA_LEFT: self._para_left,
            AtomKind.PARA_RIGHT: self._para_right,
            AtomKind.QML: self._qml,
            AtomKind.QUOTATION_LEFT: self._quotation_left,
            AtomKind.QUOTATION_RIGHT: self._quotation_right,
            AtomKind.RAW_STRING: self._raw_string,
            AtomKind.SECTION_LEFT: self._section_left,
            AtomKind.SECTION_HEADING_LEFT: self._section_heading_left,
            AtomKind.SECTION_HEADING_RIGHT: self._section_heading_right,
            AtomKind.SIDEBAR_LEFT: self._sidebar_left,
            AtomKind.SIDEBAR_RIGHT: self._end_block,
            AtomKind.STRING: self._string,
            AtomKind.TABLE_LEFT: self._table_left,
            AtomKind.TABLE_RIGHT: self._end_block,
            AtomKind.TABLE_HEADER_LEFT: self._table_header_left,
            AtomKind.TABLE_HEADER_RIGHT: self._table_header_right,
            AtomKind.TABLE_ROW_LEFT: self._table_row_left,
            AtomKind.TABLE_ROW_RIGHT: self._end_block,
            AtomKind.TABLE_ITEM_LEFT: self._table_item_left,
            AtomKind.TABLE_ITEM_RIGHT: self._end_block,
            AtomKind.TARGET: self._target,
            AtomKind.UNHANDLED_FORMAT: self._unhandled_format,
            AtomKind.UNKNOWN_COMMAND: self._unknown_command,
        }
        for kind in _SILENT_KINDS:
            self._handlers[kind] = self._silent

    # Entry points

    def generate_text(self, text: Text, relative: Node | None) -> bool:
        """Interpret the whole of ``text``; return ``False`` when it is empty.

        Sections opened by the text are closed before returning. A text
        generated from within another text (a legalese list, for instance)
        leaves the enclosing text's sections open and hands back its paragraph,
        link and table flags unchanged.
        """
        first = text.first_atom
        if first is None:
            return False
        state = self.state
        enclosing, state.sections = state.sections, SectionStack()
        flags = state.save_text_flags()
        try:
            state.reset_text_flags()
            self.generate_atom_list(first, relative, generate=True)
            self.close_text_sections()
        finally:
            state.sections = enclosing
            state.restore_text_flags(flags)
        return True

    def close_text_sections(self) -> None:
        for _ in range(self.state.sections.clear()):
            self.writer.end_section()

    def generate_atom_list(
        self, atom: Atom | None, relative: Node | None, *, generate: bool, count: int = 0
    ) -> tuple[Atom | None, int]:
        """Interpret atoms from ``atom`` until the chain or a branch ends.

        Returns the first atom not consumed (a format-else or format-endif
        closing the current branch, or ``None``) and the running count of
        generated atoms. Nothing is written when ``generate`` is false, but
        the atoms are still walked.
        """
        while atom is not None:
            match atom.kind:
                case AtomKind.FORMAT_IF:
                    atom, count = self._generate_conditional(atom, relative, generate, count)
                case AtomKind.FORMAT_ELSE | AtomKind.FORMAT_ENDIF:
                    return atom, count
                case _:
                    step = 1
                    if generate:
                        step += self.generate_atom(atom, relative)
                        count += step
                    for _ in range(step):
                        atom = atom.next if atom is not None else None
        return None, count

    def _generate_conditional(
        self, atom: Atom, relative: Node | None, generate: bool, count: int
    ) -> tuple[Atom | None, int]:
        before = count
        matches = atom.string.lower() == FORMAT_NAME.lower()
        current, count = self.generate_atom_list(
            atom.next, relative, generate=generate and matches, count=count
        )
        if current is None:
            return None, count
        if current.kind is AtomKind.FORMAT_ELSE:
            current, count = self.generate_atom_list(
                current.next, relative, generate=generate and not matches, count=count
            )
            if current is None:
                return None, count
        if current.kind is AtomKind.FORMAT_ENDIF:
            if generate and count == before:
                self.warn(
                    relative, f"Output format {FORMAT_NAME} not handled {self.state.file_name}"
                )
                count += 1 + self.generate_atom(
                    Atom(AtomKind.UNHANDLED_FORMAT, (FORMAT_NAME,)), relative
                )
            current = current.next
        return current, count

    def generate_atom(self, atom: Atom, relative: Node | None) -> int:
        """Write ``atom`` and return the number of following atoms it consumed."""
        handler = self._handlers.get(atom.kind)
        if handler is None:
            return self._unknown_atom(atom, relative)
        return handler(atom, relative)

    # Shared shapes

    def _close_paragraph(self) -> None:
        if self.state.in_para:
            self.writer.end_element()  # para or blockquote
            self.writer.new_line()
            self.state.in_para = False

    def _program_listing(self, code: str, language: str, role: str | None = None) -> None:
        attributes = {"language": language}
        if role:
            attributes["role"] = role
        self.writer.text_element("programlisting", code, attributes)
        self.writer.new_line()

    def _silent(self, atom: Atom, relative: Node | None) -> int:
        return 0

    def _end_block(self, atom: Atom, relative: Node | None) -> int:
        self.writer.end_element()
        self.writer.new_line()
        return 0

    # Links

    def _auto_link(self, atom: Atom, relative: Node | None) -> int:
        if self.state.in_link or self.state.in_section_heading:
            self.writer.characters(atom.string)
            return 0
        links = self.generator.links
        node, href = links.resolve(atom.string, relative)
        if (
            href
            and node is not None
            and node.is_obsolete
            and relative is not None
            and self.store.parent(relative) is not node
            and not relative.is_obsolete
        ):
            href = ""
        if not href:
            self.writer.characters(atom.string)
            return 0
        links.begin_link(href, node, relative)
        links.generate_link(atom.string)
        links.end_link()
        return 0

    def _link(self, atom: Atom, relative: Node | None) -> int:
        node, href = self.generator.links.resolve(atom.string, relative)
        if href:
            self.generator.links.begin_link(href, node, relative)
        else:
            logger.debug("unresolved link target %r", atom.string)
        return 1

    def _link_node(self, atom: Atom, relative: Node | None) -> int:
        links = self.generator.links
        node = links.node_for_string(atom.string)
        href = self.store.link_for_node(node, relative) if node is not None else atom.string
        if href:
            links.begin_link(href, node, relative)
        return 1

    def _string(self, atom: Atom, relative: Node | None) -> int:
        if self.state.in_link and not self.state.in_section_heading:
            self.generator.links.generate_link(atom.string)
        else:
            self.writer.characters(atom.string)
        return 0

    def _target(self, atom: Atom, relative: Node | None) -> int:
        self.writer.write_anchor(self.state.refs.register(naming.canonical_title(atom.string)))
        return 0

    # Brief

    @staticmethod
    def _has_brief(relative: Node | None) -> bool:
        return relative is not None and not relative.doc.brief.is_empty

    def _brief_left(self, atom: Atom, relative: Node | None) -> int:
        if not self._has_brief(relative):
            return atoms_until(atom, AtomKind.BRIEF_RIGHT)
        self.writer.start_element("para")
        return self._rewrite_property_brief(atom, relative)

    def _rewrite_property_brief(self, atom: Atom, relative: Node | None) -> int:
        if not isinstance(relative, PropertyNode | VariableNode):
            return 0
        first = atom.next
        if first is None or first.kind is not AtomKind.STRING:
            return 0
        words = first.string.lower().split()
        if not words or words[0] not in _BRIEF_OPENERS:
            return 0
        noun = "property" if isinstance(relative, PropertyNode) else "variable"
        text = first.string
        self.writer.characters(f"This {noun} holds {text[:1].lower()}{text[1:]}")
        return 1

    def _brief_right(self, atom: Atom, relative: Node | None) -> int:
        if self._has_brief(relative):
            self.writer.end_element()  # para
            self.writer.new_line()
        return 0

    # Code

    def _c(self, atom: Atom, relative: Node | None) -> int:
        self.writer.text_element("code", atom.string)
        return 0

    def _qml(self, atom: Atom, relative: Node | None) -> int:
        self._program_listing(atom.string, "qml")
        return 0

    def _javascript(self, atom: Atom, relative: Node | None) -> int:
        self._program_listing(atom.string, "js")
        return 0

    def _code(self, atom: Atom, relative: Node | None) -> int:
        self._program_listing(atom.string, atom.string_at(1) or "cpp")
        return 0

    def _code_new(self, atom: Atom, relative: Node | None) -> int:
        self.writer.text_element("para", "you can rewrite it as")
        self.writer.new_line()
        self._program_listing(atom.string, "cpp", "new")
        return 0

    def _code_old(self, atom: Atom, relative: Node | None) -> int:
        self.writer.text_element("para", "For example, if you have code like")
        self.writer.new_line()
        return self._code_bad(atom, relative)

    def _code_bad(self, atom: Atom, relative: Node | None) -> int:
        self._program_listing(atom.string, "cpp", "bad")
        return 0

    # Inline formatting and small blocks

    def _caption_left(self, atom: Atom, relative: Node | None) -> int:
        self.writer.start_element("title")
        return 0

    def _caption_right(self, atom: Atom, relative: Node | None) -> int:
        self.generator.links.end_link()
        self.writer.end_element()  # title
        self.writer.new_line()
        return 0

    def _footnote_left(self, atom: Atom, relative: Node | None) -> int:
        self.writer.start_element("footnote")
        self.writer.new_line()
        self.writer.start_element("para")
        return 0

    def _footnote_right(self, atom: Atom, relative: Node | None) -> int:
        self.writer.end_element()  # para
        self.writer.new_line()
        self.writer.end_element()  # footnote
        return 0

    def _formatting_left(self, atom: Atom, relative: Node | None) -> int:
        element = _FORMATTING_ELEMENTS.get(atom.string)
        if element is not None:
            tag, attributes = element
            self.writer.start_element(tag, attributes)
        return 0

    def _formatting_right(self, atom: Atom, relative: Node | None) -> int:
        if atom.string in _FORMATTING_ELEMENTS:
            self.writer.end_element()
        elif atom.string == FORMATTING_LINK:
            self.generator.links.end_link()
        return 0

    def _admonition_left(self, atom: Atom, relative: Node | None) -> int:
        tag = "important" if atom.kind is AtomKind.IMPORTANT_LEFT else "note"
        self.writer.start_element(tag)
        self.writer.new_line()
        self.writer.start_element("para")
        return 0

    def _admonition_right(self, atom: Atom, relative: Node | None) -> int:
        self.writer.end_element()  # para
        self.writer.new_line()
        self.writer.end_element()  # note or important
        self.writer.new_line()
        return 0

    def _sidebar_left(self, atom: Atom, relative: Node | None) -> int:
        self.writer.start_element("sidebar")
        return 0

    def _raw_string(self, atom: Atom, relative: Node | None) -> int:
        self.writer.characters(atom.string)
        return 0

    # Paragraphs

    def _para_left(self, atom: Atom, relative: Node | None) -> int:
        self.writer.start_element("para")
        self.state.in_para = True
        return 0

    def _para_right(self, atom: Atom, relative: Node | None) -> int:
        self.generator.links.end_link()
        self._close_paragraph()
        return 0

    def _quotation_left(self, atom: Atom, relative: Node | None) -> int:
        self.writer.start_element("blockquote")
        self.state.in_para = True
        return 0

    def _quotation_right(self, atom: Atom, relative: Node | None) -> int:
        # A block inside the quotation may already have closed it.
        if self.writer.current_tag == "blockquote":
            self.writer.end_element()
            self.writer.new_line()
        self.state.in_para = False
        return 0

    # Images

    def _image(self, atom: Atom, relative: Node | None) -> int:
        tag = "mediaobject" if atom.kind is AtomKind.IMAGE else "inlinemediaobject"
        self.writer.start_element(tag)
        self.writer.new_line()
        file_name = self.generator.image_file_name(relative, atom.string)
        if not file_name:
            self.writer.start_element("textobject")
            self.writer.new_line()
            self.writer.start_element("para")
            self.writer.text_element("emphasis", f"[Missing image {atom.string}]")
            self.writer.end_element()  # para
            self.writer.new_line()
            self.writer.end_element()  # textobject
            self.writer.new_line()
        else:
            if atom.next is not None and atom.next.string:
                self.writer.text_element("alt", atom.next.string)
            self.writer.start_element("imageobject")
            self.writer.new_line()
            self.writer.empty_element("imagedata", {"fileref": file_name})
            self.writer.new_line()
            self.writer.end_element()  # imageobject
            self.writer.new_line()
            self.generator.record_image(relative, file_name)
        self.writer.end_element()  # mediaobject or inlinemediaobject
        if atom.kind is AtomKind.IMAGE:
            self.writer.new_line()
        return 0

    # Lists

    def _list_left(self, atom: Atom, relative: Node | None) -> int:
        self._close_paragraph()
        if atom.string == LIST_VALUE:
            self._enum_value_table_head(atom, relative)
            return 0
        if atom.string == LIST_BULLET:
            self.writer.start_element("itemizedlist")
        elif atom.string == LIST_TAG:
            self.writer.start_element("variablelist")
        else:
            attributes: dict[str, str] = {}
            if atom.next is not None and _to_int(atom.next.string) > 1:
                attributes["startingnumber"] = atom.next.string.strip()
            attributes["numeration"] = _NUMERATIONS.get(atom.string, "arabic")
            self.writer.start_element("orderedlist", attributes)
        self.writer.new_line()
        return 0

    def _enum_value_table_head(self, atom: Atom, relative: Node | None) -> None:
        writer = self.writer
        self.state.three_column_enum_value_table = is_three_column_enum_value_table(atom)
        writer.start_element("informaltable")
        writer.new_line()
        writer.start_element("thead")
        writer.new_line()
        writer.start_element("tr")
        writer.new_line()
        writer.text_element("th", "Constant")
        writer.new_line()
        if isinstance(relative, EnumNode):
            writer.text_element("th", "Value")
            writer.new_line()
        if self.state.three_column_enum_value_table:
            writer.text_element("th", "Description")
            writer.new_line()
        writer.end_element()  # tr
        writer.new_line()
        writer.end_element()  # thead
        writer.new_line()

    def _list_value(self, atom: Atom) -> tuple[str, str, int]:
        """Return ``(name, label, skip)`` for the value following a list tag.

        A value tagged with a version reads ``name (since X)`` and also
        consumes the since-tag atoms.
        """
        value = atom.next
        if value is None:
            return "", "", 0
        since_left = value.next
        if (
            since_left is not None
            and since_left.kind is AtomKind.SINCE_TAG_LEFT
            and since_left.next is not None
            and since_left.next.next is not None
            and since_left.next.next.kind is AtomKind.SINCE_TAG_RIGHT
        ):
            since = naming.format_since(since_left.next.string, self.config.project)
            return value.string, f"{value.string} (since {since})", 4
        return value.string, value.string, 1

    def _list_tag_left(self, atom: Atom, relative: Node | None) -> int:
        writer = self.writer
        if atom.string == LIST_TAG:
            writer.start_element("varlistentry")
            writer.new_line()
            writer.start_element("term")
            return 0
        name, label, skip = self._list_value(atom)
        writer.start_element("tr")
        writer.new_line()
        writer.start_element("td")
        writer.new_line()
        writer.start_element("para")
        self.generator.synopsis.generate_enum_value(label, relative)
        writer.end_element()  # para
        writer.new_line()
        writer.end_element()  # td
        writer.new_line()
        if isinstance(relative, EnumNode):
            item_value = relative.item_value(name)
            writer.start_element("td")
            if item_value:
                writer.text_element("code", item_value)
            else:
                writer.characters("?")
            writer.end_element()  # td
            writer.new_line()
        return skip

    def _list_tag_right(self, atom: Atom, relative: Node | None) -> int:
        if atom.string == LIST_TAG:
            self.writer.end_element()  # term
            self.writer.new_line()
        return 0

    def _list_item_left(self, atom: Atom, relative: Node | None) -> int:
        writer = self.writer
        self.state.in_list_item_line_open = False
        if atom.string == LIST_TAG:
            writer.start_element("listitem")
            writer.new_line()
            writer.start_element("para")
        elif atom.string == LIST_VALUE:
            if self.state.three_column_enum_value_table:
                if match_ahead(atom, AtomKind.LIST_ITEM_RIGHT):
                    writer.empty_element("td")
                else:
                    writer.start_element("td")
                    self.state.in_list_item_line_open = True
                writer.new_line()
        else:
            writer.start_element("listitem")
            writer.new_line()
        return 0

    def _list_item_right(self, atom: Atom, relative: Node | None) -> int:
        writer = self.writer
        if atom.string == LIST_TAG:
            writer.end_element()  # para
            writer.new_line()
            writer.end_element()  # listitem
            writer.new_line()
            writer.end_element()  # varlistentry
            writer.new_line()
        elif atom.string == LIST_VALUE:
            if self.state.in_list_item_line_open:
                writer.end_element()  # td
                writer.new_line()
                self.state.in_list_item_line_open = False
            writer.end_element()  # tr
            writer.new_line()
        else:
            writer.end_element()  # listitem
            writer.new_line()
        return 0

    def _generated_list(self, atom: Atom, relative: Node | None) -> int:
        self.generator.lists.generate_selected_list(atom.string, relative)
        return 0

    def _annotated_list(self, atom: Atom, relative: Node | None) -> int:
        self.generator.lists.generate_group_list(atom.string, relative)
        return 0

    # Sections

    def _section_left(self, atom: Atom, relative: Node | None) -> int:
        level = _to_int(atom.string) + naming.hierarchy_offset(relative)
        self.state.current_section_level = level
        # Level 1 belongs to the document header.
        if level <= 1:
            return 0
        for _ in range(self.state.sections.pop_at_least(level)):
            self.writer.end_section()
        self.state.sections.push(level)
        heading = naming.canonical_title(section_heading(atom).to_plain())
        self.writer.start_element("section", {"xml:id": self.state.refs.register(heading)})
        self.writer.new_line()
        return 0

    def _section_heading_left(self, atom: Atom, relative: Node | None) -> int:
        if self.state.current_section_level > 1:
            self.writer.start_element("title")
            self.state.in_section_heading = True
        return 0

    def _section_heading_right(self, atom: Atom, relative: Node | None) -> int:
        if self.state.current_section_level > 1:
            self.writer.end_element()  # title
            self.writer.new_line()
            self.state.in_section_heading = False
        return 0

    # Tables

    def _table_left(self, atom: Atom, relative: Node | None) -> int:
        self._close_paragraph()
        width, style = parse_table_spec(atom.strings)
        attributes = {"style": style}
        if width:
            attributes["width"] = width
        self.writer.start_element("informaltable", attributes)
        self.writer.new_line()
        self.state.num_table_rows = 0
        return 0

    def _table_header_left(self, atom: Atom, relative: Node | None) -> int:
        self.writer.start_element("thead")
        self.writer.new_line()
        self.writer.start_element("tr")
        self.writer.new_line()
        self.state.in_table_header = True
        return 0

    def _table_header_right(self, atom: Atom, relative: Node | None) -> int:
        self.writer.end_element()  # tr
        self.writer.new_line()
        if match_ahead(atom, AtomKind.TABLE_HEADER_LEFT):
            self.writer.start_element("tr")
            self.writer.new_line()
            return 1
        self.writer.end_element()  # thead
        self.writer.new_line()
        self.state.in_table_header = False
        return 0

    def _table_row_left(self, atom: Atom, relative: Node | None) -> int:
        row = parse_row_attributes(atom.string)
        if row.error:
            self.warn(
                relative, f'Error when parsing attributes for the table: got "{atom.string}"'
            )
        self.writer.start_element("tr", row.attributes)
        self.writer.new_line()
        self.state.num_table_rows += 1
        return 0

    def _table_item_left(self, atom: Atom, relative: Node | None) -> int:
        tag = "th" if self.state.in_table_header else "td"
        self.writer.start_element(tag, parse_cell_spec(atom.strings).attributes)
        self.writer.new_line()
        return 0

    # Placeholders

    def _bold_placeholder(self, text: str, code: str | None = None) -> None:
        self.writer.start_element("emphasis", {"role": "bold"})
        self.writer.characters(text)
        if code is not None:
            self.writer.text_element("code", code)
        self.writer.end_element()

    def _unhandled_format(self, atom: Atom, relative: Node | None) -> int:
        self._bold_placeholder(f"<Missing {FORMAT_NAME}>")
        return 0

    def _unknown_command(self, atom: Atom, relative: Node | None) -> int:
        self._bold_placeholder("<Unknown command>", atom.string)
        return 0

    def _unknown_atom(self, atom: Atom, relative: Node | None) -> int:
        self.warn(relative, f"Unknown atom type {atom.kind.value} in {FORMAT_NAME} output")
        self._bold_placeholder("<Unknown command>", atom.kind.value)
        return 0

    def handled_kinds(self) -> cabc.Set[AtomKind]:
        """Return the atom kinds with a registered handler."""
        return self._handlers.keys()


__all__ = ["AtomInterpreter", "is_three_column_enum_value_table"]
