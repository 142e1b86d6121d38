"""Non-fatal diagnostics raised while generating DocBook output.

Generation never aborts on content problems. Each problem becomes a visible
marker in the document plus a :class:`Diagnostic` collected by a
:class:`DiagnosticSink`, which the driver reports once the run finishes.
Every diagnostic is also forwarded to the standard :mod:`logging` machinery.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class Location:
    """Position of a documentation comment in its source file."""

    file_path: str = ""
    line: int = 0
    column: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.file_path

    def __str__(self) -> str:
        if not self.file_path:
            return "<unknown>"
        if self.line <= 0:
            return self.file_path
        if self.column <= 0:
            return f"{self.file_path}:{self.line}"
        return f"{self.file_path}:{self.line}:{self.column}"


@dc.dataclass(frozen=True, slots=True)
class Diagnostic:
    """One warning tied to the documentation comment that caused it."""

    location: Location
    message: str

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"

    def as_dict(self) -> dict[str, typ.Any]:
        """Return a JSON-serializable mapping for manifests and reports."""
        return {
            "file": self.location.file_path,
            "line": self.location.line,
            "column": self.location.column,
            "message": self.message,
        }


class DiagnosticSink:
    """Collect diagnostics for a generation run.

    Examples
    --------
    >>> sink = DiagnosticSink()
    >>> _ = sink.warning(Location("qstring.cpp", 12), "Unknown atom")
    >>> len(sink)
    1
    >>> str(sink.diagnostics[0])
    'qstring.cpp:12: Unknown atom'
    """

    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []

    def warning(self, location: Location | None, message: str) -> Diagnostic:
        """Record ``message`` against ``location`` and log it."""
        diagnostic = Diagnostic(location or Location(), message)
        self._diagnostics.append(diagnostic)
        logger.warning("%s", diagnostic)
        return diagnostic

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return tuple(self._diagnostics)

    def messages(self) -> list[str]:
        """Return the bare messages in recording order."""
        return [diagnostic.message for diagnostic in self._diagnostics]

    def clear(self) -> None:
        self._diagnostics.clear()

    def __iter__(self) -> cabc.Iterator[Diagnostic]:
        return iter(self._diagnostics)

    def __len__(self) -> int:
        return len(self._diagnostics)


__all__ = ["Diagnostic", "DiagnosticSink", "Location"]
