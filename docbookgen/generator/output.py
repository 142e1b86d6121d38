"""Destinations for finished DocBook documents."""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from pathlib import Path

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class GeneratedDocument:
    """One serialized document and the file name it belongs under."""

    file_name: str
    content: bytes

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")


class OutputSink(typ.Protocol):
    """Anything that accepts finished documents."""

    def write(self, document: GeneratedDocument) -> Path | None: ...


class DirectorySink:
    """Write documents as UTF-8 files below ``output_dir``.

    Examples
    --------
    >>> import tempfile
    >>> with tempfile.TemporaryDirectory() as tmp:
    ...     sink = DirectorySink(Path(tmp))
    ...     path = sink.write(GeneratedDocument("sub/a.xml", b"<a/>"))
    ...     path.read_bytes()
    b'<a/>'
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir
        self.written: list[Path] = []

    def write(self, document: GeneratedDocument) -> Path:
        output_path = self.output_dir / document.file_name
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(document.content)
        logger.debug("wrote %s", output_path)
        self.written.append(output_path)
        return output_path


class MemorySink:
    """Keep documents in memory, keyed by file name, for tests and previews."""

    def __init__(self) -> None:
        self.documents: dict[str, GeneratedDocument] = {}

    def write(self, document: GeneratedDocument) -> None:
        if document.file_name in self.documents:
            logger.warning("document %s generated more than once", document.file_name)
        self.documents[document.file_name] = document

    def __getitem__(self, file_name: str) -> GeneratedDocument:
        return self.documents[file_name]

    def __contains__(self, file_name: object) -> bool:
        return file_name in self.documents

    def __len__(self) -> int:
        return len(self.documents)


__all__ = ["DirectorySink", "GeneratedDocument", "MemorySink", "OutputSink"]
