"""Load generator configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import _as_bool, _optional_str, _path_list
from .models import ConfigError, GeneratorConfig

_KNOWN_KEYS = frozenset(
    {
        "project",
        "description",
        "natural_language",
        "build_version",
        "examples_url",
        "examples_install_path",
        "show_internal",
        "docbook_extensions",
        "output_dir",
        "output_subdirs",
        "example_dirs",
    }
)


def load_generator_config(path: Path) -> GeneratorConfig:
    """Load the YAML configuration describing a documentation project.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``docbookgen.yaml``). Relative directories in the file are resolved
        against the file's own directory.

    Returns
    -------
    GeneratorConfig
        Parsed configuration with defaults applied.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    ConfigError
        If a key is unknown or an option has the wrong type.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from docbookgen.config import load_generator_config
    >>> config = load_generator_config(Path("docbookgen.yaml"))  # doctest: +SKIP
    >>> config.description  # doctest: +SKIP
    'Qt Reference Documentation'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    return build_generator_config(raw, base=path.parent)


def build_generator_config(
    raw: typ.Mapping[str, typ.Any], *, base: Path | None = None
) -> GeneratorConfig:
    """Validate a configuration mapping and build a :class:`GeneratorConfig`."""
    unknown = sorted(set(raw) - _KNOWN_KEYS)
    if unknown:
        msg = f"Unknown configuration keys: {', '.join(unknown)}."
        raise ConfigError(msg)
    root = base if base is not None else Path()
    output_dir = _optional_str(raw.get("output_dir"))
    return GeneratorConfig(
        project=_optional_str(raw.get("project")),
        description=_optional_str(raw.get("description")),
        natural_language=_optional_str(raw.get("natural_language")),
        build_version=_optional_str(raw.get("build_version")),
        examples_url=_optional_str(raw.get("examples_url")),
        examples_install_path=_optional_str(raw.get("examples_install_path")),
        show_internal=_as_bool("show_internal", raw.get("show_internal")),
        docbook_extensions=_as_bool("docbook_extensions", raw.get("docbook_extensions")),
        output_dir=root / output_dir if output_dir else root / "docbook",
        output_subdirs=_as_bool("output_subdirs", raw.get("output_subdirs")),
        example_dirs=_path_list("example_dirs", raw.get("example_dirs"), base=root),
    )
