"""Utility helpers shared by the docbookgen configuration loader."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from .models import ConfigError


def _optional_str(value: object | None) -> str:
    """Return a stripped string value, or an empty string when unset."""
    if value is None:
        return ""
    return str(value).strip()


def _as_bool(key: str, value: object | None, *, default: bool = False) -> bool:
    """Validate a boolean option, accepting only real YAML booleans."""
    if value is None:
        return default
    if not isinstance(value, bool):
        msg = f"Option '{key}' must be true or false, got {value!r}."
        raise ConfigError(msg)
    return value


def _path_list(key: str, value: object | None, *, base: Path) -> list[Path]:
    """Normalize a string or list of strings into paths relative to ``base``."""
    match value:
        case None:
            return []
        case str():
            items: list[typ.Any] = [value]
        case list():
            items = value
        case _:
            msg = f"Option '{key}' must be a path or a list of paths."
            raise ConfigError(msg)
    paths: list[Path] = []
    for item in items:
        text = _optional_str(item)
        if not text:
            continue
        path = Path(text)
        paths.append(path if path.is_absolute() else base / path)
    return paths
