"""Utilities for interpreting atom streams and composing DocBook documents."""

from .composer import PageComposer
from .docbook_generator import DocBookGenerator, ImageRecord
from .interpreter import AtomInterpreter
from .output import DirectorySink, GeneratedDocument, MemorySink, OutputSink
from .writer import DocBookWriter

__all__ = [
    "AtomInterpreter",
    "DirectorySink",
    "DocBookGenerator",
    "DocBookWriter",
    "GeneratedDocument",
    "ImageRecord",
    "MemorySink",
    "OutputSink",
    "PageComposer",
]
