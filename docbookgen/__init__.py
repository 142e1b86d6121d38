"""Render documentation models into DocBook 5.2 XML.

This package exposes the CLI entry points used by ``docbookgen generate`` and
the generator classes for embedding the renderer in other tools.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``DocBookGenerator``: The generator driving a run over a node store.

Examples
--------
>>> from docbookgen import main
>>> main()  # doctest: +SKIP
>>> from docbookgen import DocBookGenerator
>>> DocBookGenerator.format_name
'DocBook'
"""

from __future__ import annotations

from .cli import app, main
from .generator import DocBookGenerator

__all__ = ["DocBookGenerator", "app", "main"]
