"""Parse the attribute payloads carried by table atoms."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

_BORDERLESS = "borderless"
_GENERIC = "generic"


@dc.dataclass(slots=True)
class RowAttributes:
    """Attributes of one table row.

    ``error`` is set when the payload held an unpaired name or value; the
    complete pairs are still returned in ``attributes``.
    """

    attributes: dict[str, str] = dc.field(default_factory=dict)
    error: bool = False


@dc.dataclass(slots=True)
class CellAttributes:
    attributes: dict[str, str] = dc.field(default_factory=dict)


def parse_row_attributes(payload: str) -> RowAttributes:
    """Split a row payload such as ``class="odd" id="r1"`` into attributes.

    The payload is split on double quotes and empty pieces are dropped, so
    names and values alternate. Names lose their trailing ``=``.

    Examples
    --------
    >>> parse_row_attributes("").attributes
    {'valign': 'top'}
    >>> parse_row_attributes('class="odd" id="r1"').attributes
    {'class': 'odd', 'id': 'r1'}
    >>> row = parse_row_attributes('class="odd" id=')
    >>> row.attributes, row.error
    ({'class': 'odd'}, True)
    """
    if not payload:
        return RowAttributes({"valign": "top"})
    pieces = [piece for piece in payload.split('"') if piece]
    row = RowAttributes(error=len(pieces) % 2 == 1)
    for index in range(0, len(pieces) - 1, 2):
        name = pieces[index].strip().removesuffix("=").strip()
        if name:
            row.attributes[name] = pieces[index + 1]
    return row


def parse_cell_spec(strings: cabc.Sequence[str]) -> CellAttributes:
    """Turn table-item payload strings into cell attributes.

    Each string is either ``key=value`` or a ``colspan,rowspan`` pair; spans
    of ``1`` are the default and are omitted.

    Examples
    --------
    >>> parse_cell_spec(["2,1"]).attributes
    {'colspan': '2'}
    >>> parse_cell_spec(["align=center", "1,3"]).attributes
    {'align': 'center', 'rowspan': '3'}
    """
    cell = CellAttributes()
    for spec in strings:
        if "=" in spec:
            key, _, value = spec.partition("=")
            cell.attributes[key.strip()] = value.split("=", 1)[0]
            continue
        spans = spec.split(",")
        if len(spans) != 2:
            continue
        colspan, rowspan = (span.strip() for span in spans)
        if colspan != "1":
            cell.attributes["colspan"] = colspan
        if rowspan != "1":
            cell.attributes["rowspan"] = rowspan
    return cell


def parse_table_spec(strings: cabc.Sequence[str]) -> tuple[str, str]:
    """Return ``(width, style)`` for a table-left payload.

    Examples
    --------
    >>> parse_table_spec(["80%", "borderless"])
    ('80%', 'borderless')
    >>> parse_table_spec([])
    ('', 'generic')
    """
    width = ""
    style = _GENERIC
    for spec in strings[:2]:
        if spec == _BORDERLESS:
            style = spec
        elif "%" in spec:
            width = spec
    return width, style


__all__ = [
    "CellAttributes",
    "RowAttributes",
    "parse_cell_spec",
    "parse_row_attributes",
    "parse_table_spec",
]
