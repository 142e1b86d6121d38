"""Load and validate docbookgen configuration YAML.

This subpackage parses a project's ``docbookgen.yaml`` file and produces a
:class:`GeneratorConfig` that the generator consumes. The primary entry point
is :func:`load_generator_config`, which rejects unknown keys, applies the
documented defaults (description and natural language), and resolves
relative directories against the configuration file.

Examples
--------
>>> from docbookgen.config import build_generator_config
>>> config = build_generator_config({"project": "Qt"})
>>> config.description, config.natural_language
('Qt Reference Documentation', 'en')
"""

from .loader import build_generator_config, load_generator_config
from .models import ConfigError, GeneratorConfig

__all__ = [
    "ConfigError",
    "GeneratorConfig",
    "build_generator_config",
    "load_generator_config",
]
