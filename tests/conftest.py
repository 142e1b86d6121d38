"""Shared fixtures for the docbookgen test suite.

The fixtures build an empty :class:`~docbookgen.model.store.NodeStore`, a
generator writing into a :class:`~docbookgen.generator.output.MemorySink`,
and small helpers that run part of the generator inside a throwaway
``article`` and hand back the parsed lxml tree.
"""

from __future__ import annotations

import typing as typ

import pytest
from lxml import etree

from docbookgen.config import GeneratorConfig
from docbookgen.generator import DocBookGenerator, MemorySink
from docbookgen.generator.state import GenerationState
from docbookgen.model.store import NodeStore

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from docbookgen.atoms import Text
    from docbookgen.model.nodes import Node


@pytest.fixture
def store() -> NodeStore:
    """Return an empty node store holding only the root namespace."""
    return NodeStore()


@pytest.fixture
def config(tmp_path: Path) -> GeneratorConfig:
    """Return a configuration for a project called ``Qt``."""
    return GeneratorConfig(project="Qt", build_version="6.5", output_dir=tmp_path / "out")


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def generator(store: NodeStore, config: GeneratorConfig, sink: MemorySink) -> DocBookGenerator:
    return DocBookGenerator(store, config, sink=sink)


@pytest.fixture
def render(
    generator: DocBookGenerator,
) -> cabc.Callable[..., etree._Element]:
    """Run a callable inside a fresh ``article`` and return the parsed result."""

    def run(write: cabc.Callable[[], object], node: Node | None = None) -> etree._Element:
        generator.state = GenerationState(file_name="test.xml", node=node)
        writer = generator.state.writer
        writer.start_element("article")
        write()
        if writer.depth == 1:
            writer.end_element()
        return etree.fromstring(writer.finish())

    return run


@pytest.fixture
def render_text(
    generator: DocBookGenerator,
    render: cabc.Callable[..., etree._Element],
) -> cabc.Callable[..., etree._Element]:
    """Interpret ``text`` as documentation of ``relative`` and return the tree."""

    def run(text: Text, relative: Node | None = None) -> etree._Element:
        return render(lambda: generator.interpreter.generate_text(text, relative), relative)

    return run
