"""Drive a DocBook generation run over a populated node store.

:class:`DocBookGenerator` holds what lives for the whole run (the store, the
configuration, the diagnostics and the output sink) and swaps in a fresh
:class:`~docbookgen.generator.state.GenerationState` for every document it
starts. The work itself is split between cooperating components that all
write through the generator's current state.

Examples
--------
>>> from docbookgen.config import GeneratorConfig
>>> from docbookgen.model.store import NodeStore
>>> from docbookgen.model.nodes import PageNode
>>> from docbookgen.generator.output import MemorySink
>>> store = NodeStore()
>>> _ = store.add(PageNode("overview", title="Overview"))
>>> generator = DocBookGenerator(store, GeneratorConfig(project="Qt"), sink=MemorySink())
>>> [document.file_name for document in generator.generate()]
['overview.xml']
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from docbookgen._constants import FORMAT_NAME
from docbookgen.diagnostics import DiagnosticSink
from docbookgen.generator.composer import PageComposer
from docbookgen.generator.interpreter import AtomInterpreter
from docbookgen.generator.links import CrossReferences
from docbookgen.generator.lists import ListRenderer
from docbookgen.generator.output import DirectorySink
from docbookgen.generator.state import GenerationState
from docbookgen.generator.synopsis import SynopsisRenderer

if typ.TYPE_CHECKING:
    from docbookgen.config import GeneratorConfig
    from docbookgen.generator.output import GeneratedDocument, OutputSink
    from docbookgen.model.nodes import Node
    from docbookgen.model.store import NodeStore

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class ImageRecord:
    """An image referenced by a generated document."""

    file_name: str
    document: str

    def as_dict(self) -> dict[str, str]:
        return {"file": self.file_name, "document": self.document}


class DocBookGenerator:
    """Write DocBook 5.2 documents for the nodes of ``store``.

    Parameters
    ----------
    store : NodeStore
        The populated documentation tree.
    config : GeneratorConfig
        Project-wide settings.
    sink : OutputSink, optional
        Receives each finished document; defaults to a
        :class:`~docbookgen.generator.output.DirectorySink` writing below
        ``config.output_dir``.
    diagnostics : DiagnosticSink, optional
        Collects warnings raised while generating.
    """

    format_name = FORMAT_NAME

    def __init__(
        self,
        store: NodeStore,
        config: GeneratorConfig,
        *,
        sink: OutputSink | None = None,
        diagnostics: DiagnosticSink | None = None,
    ) -> None:
        self.store = store
        self.config = config
        self.sink: OutputSink = sink if sink is not None else DirectorySink(config.output_dir)
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticSink()
        self.state = GenerationState()
        self.documents: list[GeneratedDocument] = []
        self.images: list[ImageRecord] = []
        store.use_output_subdirs = config.output_subdirs

        self.links = CrossReferences(self)
        self.interpreter = AtomInterpreter(self)
        self.lists = ListRenderer(self)
        self.synopsis = SynopsisRenderer(self)
        self.composer = PageComposer(self)

    # Hooks used by the components

    def image_file_name(self, relative: Node | None, name: str) -> str:
        """Return the file an image atom named ``name`` points at."""
        return self.store.image_file_name(name)

    def record_image(self, relative: Node | None, file_name: str) -> None:
        document = self.state.file_name
        if not document and relative is not None:
            document = self.store.file_name(relative)
        self.images.append(ImageRecord(file_name, document))

    def emit(self, document: GeneratedDocument) -> None:
        """Pass a finished document to the sink and remember it."""
        self.sink.write(document)
        self.documents.append(document)
        logger.info("generated %s", document.file_name)

    # Entry points

    def generate(self, node: Node | None = None) -> list[GeneratedDocument]:
        """Generate the documents of ``node`` and its descendants.

        Starts from the store's root when ``node`` is omitted and returns
        the documents written by this call.
        """
        start = len(self.documents)
        self.composer.generate_documentation(node if node is not None else self.store.root)
        generated = self.documents[start:]
        logger.info(
            "%s: %d documents, %d diagnostics",
            self.format_name,
            len(generated),
            len(self.diagnostics),
        )
        return generated

    def manifest(self) -> dict[str, typ.Any]:
        """Summarize the run as a JSON-serializable mapping."""
        return {
            "format": self.format_name,
            "project": self.config.project,
            "files": [document.file_name for document in self.documents],
            "images": [image.as_dict() for image in self.images],
            "diagnostics": [diagnostic.as_dict() for diagnostic in self.diagnostics],
        }


__all__ = ["DocBookGenerator", "ImageRecord"]
