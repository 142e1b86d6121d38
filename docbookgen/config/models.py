"""Typed dataclasses describing docbookgen configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path


class ConfigError(ValueError):
    """Raised when the generator configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class GeneratorConfig:
    """Project-wide settings consumed by the DocBook generator.

    Attributes
    ----------
    project : str
        Display name of the documented project.
    description : str
        Project description; defaults to ``"<project> Reference Documentation"``.
    natural_language : str
        Value of the ``xml:lang`` attribute on every article.
    build_version : str
        Rendered as the ``edition`` of every document.
    examples_url : str
        External base URL for example projects; ``\\1`` is replaced by the
        example path.
    examples_install_path : str
        Install path prefix substituted into ``examples_url``.
    show_internal : bool
        Document internal entities instead of skipping them.
    docbook_extensions : bool
        Emit DocBook synopsis metadata for reference pages.
    output_dir : Path
        Directory receiving the generated files.
    output_subdirs : bool
        Nodes live in per-module subdirectories; cross-directory links get
        a ``../<subdir>/`` prefix.
    example_dirs : list[Path]
        Directories searched for example source files.
    """

    project: str = ""
    description: str = ""
    natural_language: str = ""
    build_version: str = ""
    examples_url: str = ""
    examples_install_path: str = ""
    show_internal: bool = False
    docbook_extensions: bool = False
    output_dir: Path = dc.field(default_factory=lambda: Path("docbook"))
    output_subdirs: bool = False
    example_dirs: list[Path] = dc.field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.description:
            self.description = f"{self.project} Reference Documentation".lstrip()
        if not self.natural_language:
            self.natural_language = "en"
