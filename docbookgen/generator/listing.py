"""Source listings for the files of documented examples."""

from __future__ import annotations

import logging
import typing as typ

from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound

from docbookgen import naming
from docbookgen.atoms import AtomKind, Text

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "cpp"

# Pygments aliases that map onto the listing languages DocBook readers know.
_LANGUAGE_ALIASES = {
    "c++": "cpp",
    "cpp": "cpp",
    "qml": "qml",
    "qbs": "qml",
    "javascript": "js",
    "js": "js",
}


def listing_language(file_name: str) -> str:
    """Return the ``programlisting`` language for ``file_name``.

    Examples
    --------
    >>> listing_language("main.cpp"), listing_language("view.qml")
    ('cpp', 'qml')
    >>> listing_language("app.js"), listing_language("data.zzz")
    ('js', 'cpp')
    """
    try:
        lexer = get_lexer_for_filename(file_name)
    except ClassNotFound:
        return DEFAULT_LANGUAGE
    for alias in lexer.aliases:
        if alias in _LANGUAGE_ALIASES:
            return _LANGUAGE_ALIASES[alias]
    return lexer.aliases[0] if lexer.aliases else DEFAULT_LANGUAGE


def listing_text(file_name: str, code: str) -> Text:
    """Wrap ``code`` in the atom that renders it as a listing."""
    match listing_language(file_name):
        case "qml":
            return Text.from_atoms((AtomKind.QML, code))
        case "js":
            return Text.from_atoms((AtomKind.JAVASCRIPT, code))
        case language:
            return Text.from_atoms((AtomKind.CODE, code, language))


def example_file_name(path: str, module: str) -> str:
    """Return the output file of the listing page for example file ``path``.

    Examples
    --------
    >>> example_file_name("widgets/main.cpp", "QtCore")
    'qtcore-widgets-main-cpp.xml'
    """
    return f"{naming.canonical_title(f'{module}-{path}')}.xml"


def find_example_file(path: str, search_dirs: typ.Iterable[Path]) -> Path | None:
    """Return the first existing ``path`` below one of ``search_dirs``."""
    for directory in search_dirs:
        candidate = directory / path
        if candidate.is_file():
            return candidate
    return None


def read_example_file(path: str, search_dirs: typ.Iterable[Path]) -> str | None:
    """Return the contents of example file ``path``, or ``None`` when unreadable."""
    found = find_example_file(path, search_dirs)
    if found is None:
        return None
    try:
        return found.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("cannot read example file %s: %s", found, exc)
        return None


__all__ = [
    "DEFAULT_LANGUAGE",
    "example_file_name",
    "find_example_file",
    "listing_language",
    "listing_text",
    "read_example_file",
]
