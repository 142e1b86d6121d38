"""Per-document mutable state of the DocBook generator.

A fresh :class:`GenerationState` is created for every output document, so
no flag or anchor can leak from one document into the next.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from docbookgen.generator.writer import DocBookWriter
from docbookgen.naming import clean_ref

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from docbookgen.model.nodes import Node


class SectionStack:
    """LIFO stack of the section levels opened by the text being generated.

    Examples
    --------
    >>> stack = SectionStack()
    >>> stack.push(2); stack.push(3); stack.push(4)
    >>> stack.pop_at_least(3)
    2
    >>> stack.top
    2
    """

    __slots__ = ("_levels",)

    def __init__(self) -> None:
        self._levels: list[int] = []

    @property
    def top(self) -> int | None:
        return self._levels[-1] if self._levels else None

    def push(self, level: int) -> None:
        self._levels.append(level)

    def pop_at_least(self, level: int) -> int:
        """Pop every level ``>= level`` and return how many were popped."""
        popped = 0
        while self._levels and self._levels[-1] >= level:
            self._levels.pop()
            popped += 1
        return popped

    def clear(self) -> int:
        """Empty the stack and return how many levels were open."""
        count = len(self._levels)
        self._levels.clear()
        return count

    def __len__(self) -> int:
        return len(self._levels)

    def __iter__(self) -> cabc.Iterator[int]:
        return iter(self._levels)


class RefRegistry:
    """Assign unique ``xml:id`` values within one document.

    Registering the same reference twice yields the same identifier. A
    different reference whose cleaned form collides, compared without
    regard to case, receives a numeric suffix.

    Examples
    --------
    >>> refs = RefRegistry()
    >>> refs.register("Details"), refs.register("Details"), refs.register("details")
    ('Details', 'Details', 'details-2')
    """

    __slots__ = ("_by_ref", "_used")

    def __init__(self) -> None:
        self._by_ref: dict[str, str] = {}
        self._used: set[str] = set()

    def register(self, ref: str) -> str:
        """Return the identifier for ``ref``, allocating one on first use."""
        if ref in self._by_ref:
            return self._by_ref[ref]
        identifier = self.claim(clean_ref(ref) or "ref")
        self._by_ref[ref] = identifier
        return identifier

    def claim(self, base: str) -> str:
        """Reserve ``base`` or the first free ``base-N`` and return it."""
        candidate = base
        suffix = 2
        while candidate.lower() in self._used:
            candidate = f"{base}-{suffix}"
            suffix += 1
        self._used.add(candidate.lower())
        return candidate

    def __contains__(self, identifier: object) -> bool:
        return isinstance(identifier, str) and identifier.lower() in self._used


_TEXT_FLAGS = (
    "in_para",
    "in_link",
    "in_section_heading",
    "in_table_header",
    "in_list_item_line_open",
    "three_column_enum_value_table",
    "num_table_rows",
)


@dc.dataclass(slots=True)
class GenerationState:
    """Everything the generator mutates while writing one document."""

    writer: DocBookWriter = dc.field(default_factory=DocBookWriter)
    file_name: str = ""
    node: Node | None = None
    sections: SectionStack = dc.field(default_factory=SectionStack)
    refs: RefRegistry = dc.field(default_factory=RefRegistry)
    in_para: bool = False
    in_link: bool = False
    in_section_heading: bool = False
    in_table_header: bool = False
    in_list_item_line_open: bool = False
    three_column_enum_value_table: bool = True
    num_table_rows: int = 0
    current_section_level: int = 0

    def reset_text_flags(self) -> None:
        """Clear the flags scoped to one call of the text entry point."""
        self.in_para = False
        self.in_link = False
        self.in_section_heading = False
        self.in_table_header = False
        self.in_list_item_line_open = False
        self.three_column_enum_value_table = True
        self.num_table_rows = 0

    def save_text_flags(self) -> tuple[object, ...]:
        """Return the text-scoped flags so an enclosing text can resume with them."""
        return tuple(getattr(self, name) for name in _TEXT_FLAGS)

    def restore_text_flags(self, saved: tuple[object, ...]) -> None:
        for name, value in zip(_TEXT_FLAGS, saved, strict=True):
            setattr(self, name, value)


__all__ = ["GenerationState", "RefRegistry", "SectionStack"]
