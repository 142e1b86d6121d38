"""Typed markup fragments ("atoms") and the text chains built from them.

An upstream parser turns documentation comments into a forward-linked chain
of :class:`Atom` instances owned by a :class:`Text`. The generator walks these
chains read-only; every navigation helper here returns existing atoms rather
than copying or mutating them.

Examples
--------
>>> from docbookgen.atoms import AtomKind, Text
>>> text = Text.from_atoms(
...     (AtomKind.PARA_LEFT,),
...     (AtomKind.STRING, "Hello"),
...     (AtomKind.PARA_RIGHT,),
... )
>>> [atom.kind.name for atom in text]
['PARA_LEFT', 'STRING', 'PARA_RIGHT']
>>> text.to_plain()
'Hello'
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class AtomKind(enum.Enum):
    """Closed set of markup fragments understood by the generator."""

    ANNOTATED_LIST = "annotatedlist"
    AUTO_LINK = "autolink"
    BASE_NAME = "basename"
    BR = "br"
    BRIEF_LEFT = "briefleft"
    BRIEF_RIGHT = "briefright"
    C = "c"
    CAPTION_LEFT = "captionleft"
    CAPTION_RIGHT = "captionright"
    CODE = "code"
    CODE_BAD = "codebad"
    CODE_NEW = "codenew"
    CODE_OLD = "codeold"
    CODE_QUOTE_ARGUMENT = "codequoteargument"
    CODE_QUOTE_COMMAND = "codequotecommand"
    DIV_LEFT = "divleft"
    DIV_RIGHT = "divright"
    END_QML_TEXT = "endqmltext"
    FOOTNOTE_LEFT = "footnoteleft"
    FOOTNOTE_RIGHT = "footnoteright"
    FORMAT_ELSE = "formatelse"
    FORMAT_ENDIF = "formatendif"
    FORMAT_IF = "formatif"
    FORMATTING_LEFT = "formattingleft"
    FORMATTING_RIGHT = "formattingright"
    GENERATED_LIST = "generatedlist"
    HR = "hr"
    IMAGE = "image"
    IMAGE_TEXT = "imagetext"
    IMPORTANT_LEFT = "importantleft"
    IMPORTANT_RIGHT = "importantright"
    INLINE_IMAGE = "inlineimage"
    JAVASCRIPT = "javascript"
    KEYWORD = "keyword"
    LEGALESE_LEFT = "legaleseleft"
    LEGALESE_RIGHT = "legaleseright"
    LINE_BREAK = "linebreak"
    LINK = "link"
    LINK_NODE = "linknode"
    LIST_ITEM_LEFT = "listitemleft"
    LIST_ITEM_NUMBER = "listitemnumber"
    LIST_ITEM_RIGHT = "listitemright"
    LIST_LEFT = "listleft"
    LIST_RIGHT = "listright"
    LIST_TAG_LEFT = "listtagleft"
    LIST_TAG_RIGHT = "listtagright"
    NAV_AUTO_LINK = "navautolink"
    NAV_LINK = "navlink"
    NOP = "nop"
    NOTE_LEFT = "noteleft"
    NOTE_RIGHT = "noteright"
    PARA_LEFT = "paraleft"
    PARA_RIGHT = "pararight"
    QML = "qml"
    QML_TEXT = "qmltext"
    QUOTATION_LEFT = "quotationleft"
    QUOTATION_RIGHT = "quotationright"
    RAW_STRING = "rawstring"
    SECTION_HEADING_LEFT = "sectionheadingleft"
    SECTION_HEADING_RIGHT = "sectionheadingright"
    SECTION_LEFT = "sectionleft"
    SECTION_RIGHT = "sectionright"
    SIDEBAR_LEFT = "sidebarleft"
    SIDEBAR_RIGHT = "sidebarright"
    SINCE_LIST = "sincelist"
    SINCE_TAG_LEFT = "sincetagleft"
    SINCE_TAG_RIGHT = "sincetagright"
    SNIPPET_COMMAND = "snippetcommand"
    SNIPPET_IDENTIFIER = "snippetidentifier"
    SNIPPET_LOCATION = "snippetlocation"
    STRING = "string"
    TABLE_HEADER_LEFT = "tableheaderleft"
    TABLE_HEADER_RIGHT = "tableheaderright"
    TABLE_ITEM_LEFT = "tableitemleft"
    TABLE_ITEM_RIGHT = "tableitemright"
    TABLE_LEFT = "tableleft"
    TABLE_OF_CONTENTS = "tableofcontents"
    TABLE_RIGHT = "tableright"
    TABLE_ROW_LEFT = "tablerowleft"
    TABLE_ROW_RIGHT = "tablerowright"
    TARGET = "target"
    UNHANDLED_FORMAT = "unhandledformat"
    UNKNOWN_COMMAND = "unknowncommand"

    @classmethod
    def parse(cls, value: str) -> AtomKind:
        """Return the kind named by ``value``, ignoring case, dashes and underscores."""
        key = value.replace("-", "").replace("_", "").lower()
        return cls(key)


# Payloads of FORMATTING_LEFT / FORMATTING_RIGHT atoms.
FORMATTING_BOLD = "bold"
FORMATTING_INDEX = "index"
FORMATTING_ITALIC = "italic"
FORMATTING_LINK = "link"
FORMATTING_PARAMETER = "parameter"
FORMATTING_SUBSCRIPT = "subscript"
FORMATTING_SUPERSCRIPT = "superscript"
FORMATTING_TELETYPE = "teletype"
FORMATTING_UICONTROL = "uicontrol"
FORMATTING_UNDERLINE = "underline"

# Payloads of LIST_LEFT / LIST_RIGHT atoms.
LIST_BULLET = "bullet"
LIST_TAG = "tag"
LIST_VALUE = "value"
LIST_LOWER_ALPHA = "loweralpha"
LIST_LOWER_ROMAN = "lowerroman"
LIST_NUMERIC = "numeric"
LIST_UPPER_ALPHA = "upperalpha"
LIST_UPPER_ROMAN = "upperroman"

_PLAIN_KINDS = frozenset(
    {AtomKind.AUTO_LINK, AtomKind.NAV_AUTO_LINK, AtomKind.STRING, AtomKind.C}
)


@dc.dataclass(slots=True, eq=False)
class Atom:
    """One typed fragment in a forward-linked markup chain.

    Attributes
    ----------
    kind : AtomKind
        The markup construct this fragment represents.
    strings : tuple[str, ...]
        Payload strings; most kinds carry one, table cells and list items may
        carry several.
    next : Atom or None
        The following atom in the owning chain.
    """

    kind: AtomKind
    strings: tuple[str, ...] = ()
    next: Atom | None = dc.field(default=None, repr=False)

    @property
    def string(self) -> str:
        """Return the first payload string, or an empty string."""
        return self.strings[0] if self.strings else ""

    @property
    def count(self) -> int:
        """Return the number of payload strings."""
        return len(self.strings)

    def string_at(self, index: int) -> str:
        """Return payload string ``index`` or an empty string when absent."""
        if 0 <= index < len(self.strings):
            return self.strings[index]
        return ""


class Text:
    """Owner of an atom chain with append-only construction."""

    __slots__ = ("_first", "_last")

    def __init__(self) -> None:
        self._first: Atom | None = None
        self._last: Atom | None = None

    @classmethod
    def from_atoms(cls, *specs: tuple[AtomKind | str, ...]) -> Text:
        """Build a chain from ``(kind, *strings)`` tuples."""
        text = cls()
        for kind, *strings in specs:
            text.append(kind, *strings)
        return text

    @classmethod
    def from_string(cls, value: str) -> Text:
        """Return a chain holding a single string atom, or an empty chain."""
        return cls().append_string(value)

    @property
    def first_atom(self) -> Atom | None:
        return self._first

    @property
    def last_atom(self) -> Atom | None:
        return self._last

    @property
    def is_empty(self) -> bool:
        return self._first is None

    def append(self, kind: AtomKind | str, *strings: str) -> Text:
        """Append a new atom and return ``self`` for chaining."""
        if isinstance(kind, str):
            kind = AtomKind.parse(kind)
        atom = Atom(kind, tuple(strings))
        if self._last is None:
            self._first = atom
        else:
            self._last.next = atom
        self._last = atom
        return self

    def append_string(self, value: str) -> Text:
        """Append a string atom unless ``value`` is empty."""
        if value:
            self.append(AtomKind.STRING, value)
        return self

    def extend(self, other: Text) -> Text:
        """Append copies of every atom in ``other``."""
        for atom in other:
            self.append(atom.kind, *atom.strings)
        return self

    def to_plain(self) -> str:
        """Concatenate the visible strings of the chain."""
        return "".join(atom.string for atom in self if atom.kind in _PLAIN_KINDS)

    def __iter__(self) -> cabc.Iterator[Atom]:
        atom = self._first
        while atom is not None:
            yield atom
            atom = atom.next

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __bool__(self) -> bool:
        return self._first is not None

    def __repr__(self) -> str:
        kinds = ", ".join(atom.kind.name for atom in self)
        return f"Text([{kinds}])"


def match_ahead(atom: Atom, kind: AtomKind) -> bool:
    """Return ``True`` when the atom following ``atom`` has ``kind``."""
    return atom.next is not None and atom.next.kind is kind


def skip_atoms(atom: Atom | None, kind: AtomKind) -> Atom | None:
    """Return the first atom after ``atom`` whose kind is ``kind``."""
    current = atom.next if atom is not None else None
    while current is not None and current.kind is not kind:
        current = current.next
    return current


def atoms_until(atom: Atom, kind: AtomKind) -> int:
    """Count the atoms strictly between ``atom`` and the next one of ``kind``.

    When no atom of ``kind`` follows, every remaining atom is counted.
    """
    count = 0
    current = atom.next
    while current is not None and current.kind is not kind:
        count += 1
        current = current.next
    return count


def section_heading(section_left: Atom) -> Text:
    """Return the heading text that follows a section-left atom.

    The heading is the run of atoms between the first SECTION_HEADING_LEFT
    after ``section_left`` and its SECTION_HEADING_RIGHT. An empty chain is
    returned when the section carries no heading.
    """
    heading = Text()
    begin = skip_atoms(section_left, AtomKind.SECTION_HEADING_LEFT)
    if begin is None:
        return heading
    atom = begin.next
    while atom is not None and atom.kind is not AtomKind.SECTION_HEADING_RIGHT:
        heading.append(atom.kind, *atom.strings)
        atom = atom.next
    return heading


__all__ = [
    "FORMATTING_BOLD",
    "FORMATTING_INDEX",
    "FORMATTING_ITALIC",
    "FORMATTING_LINK",
    "FORMATTING_PARAMETER",
    "FORMATTING_SUBSCRIPT",
    "FORMATTING_SUPERSCRIPT",
    "FORMATTING_TELETYPE",
    "FORMATTING_UICONTROL",
    "FORMATTING_UNDERLINE",
    "LIST_BULLET",
    "LIST_LOWER_ALPHA",
    "LIST_LOWER_ROMAN",
    "LIST_NUMERIC",
    "LIST_TAG",
    "LIST_UPPER_ALPHA",
    "LIST_UPPER_ROMAN",
    "LIST_VALUE",
    "Atom",
    "AtomKind",
    "Text",
    "atoms_until",
    "match_ahead",
    "section_heading",
    "skip_atoms",
]
