"""Shared plumbing for the cooperating parts of the DocBook generator."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from docbookgen.config import GeneratorConfig
    from docbookgen.diagnostics import DiagnosticSink
    from docbookgen.generator.docbook_generator import DocBookGenerator
    from docbookgen.generator.state import GenerationState
    from docbookgen.generator.writer import DocBookWriter
    from docbookgen.model.nodes import Node
    from docbookgen.model.store import NodeStore


class GeneratorComponent:
    """Base class giving a component access to its generator's run state.

    Components never cache the writer or the per-document state: both are
    replaced each time a new document starts, so they are always read
    through the owning generator.
    """

    def __init__(self, generator: DocBookGenerator) -> None:
        self.generator = generator

    @property
    def store(self) -> NodeStore:
        return self.generator.store

    @property
    def config(self) -> GeneratorConfig:
        return self.generator.config

    @property
    def diagnostics(self) -> DiagnosticSink:
        return self.generator.diagnostics

    @property
    def state(self) -> GenerationState:
        return self.generator.state

    @property
    def writer(self) -> DocBookWriter:
        return self.generator.state.writer

    def warn(self, node: Node | None, message: str) -> None:
        """Record a diagnostic against ``node``'s documentation comment."""
        self.diagnostics.warning(node.location if node is not None else None, message)


__all__ = ["GeneratorComponent"]
