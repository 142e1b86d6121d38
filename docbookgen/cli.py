"""Cyclopts CLI entrypoint for rendering documentation models into DocBook XML.

The ``docbookgen`` console script defined here loads a YAML documentation
model and a generator configuration, writes one DocBook 5.2 document per
page-like node and records the run in a JSON manifest next to the output.
Typical usage involves running ``docbookgen generate`` locally or in CI after
the model has been exported.

Examples
--------
Generate every document of a model:

>>> from docbookgen.cli import main
>>> main()  # doctest: +SKIP

Regenerate the pages below one class into a custom directory:

>>> from docbookgen.cli import app
>>> app.run(
...     ["generate", "--node", "QString", "--output-dir", "dist"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import json
import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from . import naming
from ._constants import MANIFEST_TEMPLATE
from .config import load_generator_config
from .generator import DirectorySink, DocBookGenerator
from .model import load_model

if typ.TYPE_CHECKING:
    from .config import GeneratorConfig

DEFAULT_CONFIG = Path("docbookgen.yaml")
DEFAULT_MODEL = Path("model.yaml")

logger = logging.getLogger(__name__)

app = App(name="docbookgen", config=cyclopts.config.Env("DOCBOOKGEN_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def manifest_path(config: GeneratorConfig) -> Path:
    """Return where the run manifest for ``config`` is written.

    Examples
    --------
    >>> from docbookgen.config import GeneratorConfig
    >>> manifest_path(GeneratorConfig(project="Qt Core", output_dir=Path("out")))
    PosixPath('out/.docbookgen-qt-core-manifest.json')
    """
    key = naming.canonical_title(config.project) or "docbook"
    return config.output_dir / MANIFEST_TEMPLATE.format(key=key)


def _write_manifest(path: Path, manifest: dict[str, typ.Any]) -> bool:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    except OSError:  # pragma: no cover - IO issues
        return False
    return True


@app.command(help="Render a documentation model into DocBook XML files.")
def generate(
    *,
    model: typ.Annotated[
        Path, Parameter(help="Path to the documentation model", env_var="DOCBOOKGEN_MODEL")
    ] = DEFAULT_MODEL,
    config: typ.Annotated[
        Path, Parameter(help="Path to generator config", env_var="DOCBOOKGEN_CONFIG")
    ] = DEFAULT_CONFIG,
    node: typ.Annotated[
        str | None,
        Parameter(help="Only render this node and its children", env_var="DOCBOOKGEN_NODE"),
    ] = None,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="DOCBOOKGEN_OUTPUT_DIR"),
    ] = None,
    strict: typ.Annotated[
        bool,
        Parameter(help="Fail when generation produced warnings", env_var="DOCBOOKGEN_STRICT"),
    ] = False,
) -> None:
    """Generate DocBook documents for a documentation model.

    Parameters
    ----------
    model : Path, optional
        Path to the YAML documentation model (overridable via
        ``DOCBOOKGEN_MODEL``).
    config : Path, optional
        Path to the ``docbookgen.yaml`` configuration file (overridable via
        ``DOCBOOKGEN_CONFIG``).
    node : str or None, optional
        Qualified name of the node to start from, such as ``QString`` or
        ``QtCore::Qt``; when ``None`` (default) the whole model is rendered.
    output_dir : Path or None, optional
        Override the configured output directory.
    strict : bool, optional
        Exit with status 1 when any diagnostic was recorded.

    Returns
    -------
    None
        Writes the DocBook files and the run manifest, printing each path.

    Raises
    ------
    ValueError
        If ``node`` does not name a node of the model.
    """
    generator_config = load_generator_config(config)
    if output_dir is not None:
        generator_config = dc.replace(generator_config, output_dir=output_dir)
    store = load_model(model)

    start = None
    if node:
        start = store.find_node(node)
        if start is None:
            msg = f"Node '{node}' is not part of the model."
            raise ValueError(msg)

    sink = DirectorySink(generator_config.output_dir)
    generator = DocBookGenerator(store, generator_config, sink=sink)
    generator.generate(start)
    for path in sink.written:
        print(f"wrote {_format_path(path)}")

    path = manifest_path(generator_config)
    if _write_manifest(path, generator.manifest()):
        print(f"wrote {_format_path(path)}")

    for diagnostic in generator.diagnostics:
        print(f"warning: {diagnostic}", file=sys.stderr)
    if strict and len(generator.diagnostics):
        sys.exit(1)


def main() -> None:
    """Invoke the Cyclopts application that powers the `docbookgen` console command.

    Parameters
    ----------
    None

    Returns
    -------
    None
        This function executes for its side effects of parsing CLI arguments
        and running the requested subcommand.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
