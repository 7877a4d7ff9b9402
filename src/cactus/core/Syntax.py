# cactus/core/Syntax.py
"""cactus.core.Syntax
====================

Highlight classes and the syntax database.

A `SyntaxDefinition` is read-only configuration describing how one file
type is highlighted: which filenames it applies to, its keywords, its
comment delimiters and whether numbers and strings are highlighted.
Definitions come from two places: the built-in table below and the
``[syntax.<name>]`` sections of the user configuration. User definitions
are consulted first, so they can shadow a built-in type.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import IntEnum
from functools import cached_property
from typing import Any, Optional

logger = logging.getLogger("cactus")


class Highlight(IntEnum):
    """Per-byte highlight class of a rendered row."""

    NORMAL = 0
    COMMENT = 1
    MLCOMMENT = 2
    KEYWORD = 3
    TYPE = 4
    STRING = 5
    NUMBER = 6
    MATCH = 7


SEPARATOR_BYTES = b",.()+-/*=~%<>[];"
WHITESPACE_BYTES = b" \t\n\r\x0b\x0c"


def is_separator(c: int) -> bool:
    """Return True if byte `c` ends a word for keyword and number matching."""
    return c == 0 or c in WHITESPACE_BYTES or c in SEPARATOR_BYTES


@dataclass
class SyntaxDefinition:
    """Highlighting rules for one file type.

    Keywords ending in ``|`` are type keywords (``int|``, ``char|``); the
    marker is not part of the matched text.
    """

    name: str
    filematch: tuple[str, ...]
    keywords: tuple[str, ...] = ()
    singleline_comment: str = ""
    multiline_comment_start: str = ""
    multiline_comment_end: str = ""
    highlight_numbers: bool = True
    highlight_strings: bool = True
    keyword_table: tuple[tuple[bytes, Highlight], ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        table = []
        for keyword in self.keywords:
            if keyword.endswith("|"):
                table.append((keyword[:-1].encode(), Highlight.TYPE))
            elif keyword:
                table.append((keyword.encode(), Highlight.KEYWORD))
        self.keyword_table = tuple(table)

    @cached_property
    def singleline_bytes(self) -> bytes:
        return self.singleline_comment.encode()

    @cached_property
    def multiline_bytes(self) -> tuple[bytes, bytes]:
        return self.multiline_comment_start.encode(), self.multiline_comment_end.encode()

    def matches(self, filename: str) -> bool:
        """Return True if any filematch pattern applies to `filename`.

        A pattern starting with ``.`` must equal the file's last extension;
        any other pattern matches as a substring of the filename.
        """
        extension = os.path.splitext(filename)[1]
        for pattern in self.filematch:
            if pattern.startswith("."):
                if extension and extension == pattern:
                    return True
            elif pattern in filename:
                return True
        return False


C_KEYWORDS = (
    "switch", "if", "while", "for", "break", "continue", "return", "else",
    "struct", "union", "typedef", "static", "enum", "class", "case",
    "int|", "long|", "double|", "float|", "char|", "unsigned|", "signed|",
    "void|",
)

PYTHON_KEYWORDS = (
    "and", "as", "assert", "async", "await", "break", "class", "continue",
    "def", "del", "elif", "else", "except", "finally", "for", "from",
    "global", "if", "import", "in", "is", "lambda", "nonlocal", "not", "or",
    "pass", "raise", "return", "try", "while", "with", "yield",
    "None|", "True|", "False|", "int|", "str|", "bytes|", "float|", "bool|",
    "list|", "dict|", "set|", "tuple|",
)

BUILTIN_SYNTAXES: tuple[SyntaxDefinition, ...] = (
    SyntaxDefinition(
        name="c",
        filematch=(".c", ".h", ".cpp", ".hpp", ".cc"),
        keywords=C_KEYWORDS,
        singleline_comment="//",
        multiline_comment_start="/*",
        multiline_comment_end="*/",
    ),
    SyntaxDefinition(
        name="python",
        filematch=(".py",),
        keywords=PYTHON_KEYWORDS,
        singleline_comment="#",
        multiline_comment_start='"""',
        multiline_comment_end='"""',
    ),
)


def _definition_from_config(name: str, section: dict[str, Any]) -> SyntaxDefinition:
    filematch = section.get("filematch", [])
    if isinstance(filematch, str):
        filematch = [filematch]
    keywords = list(section.get("keywords", []))
    keywords.extend(f"{t}|" for t in section.get("types", []))
    return SyntaxDefinition(
        name=name,
        filematch=tuple(filematch),
        keywords=tuple(keywords),
        singleline_comment=section.get("singleline_comment", ""),
        multiline_comment_start=section.get("multiline_comment_start", ""),
        multiline_comment_end=section.get("multiline_comment_end", ""),
        highlight_numbers=bool(section.get("highlight_numbers", True)),
        highlight_strings=bool(section.get("highlight_strings", True)),
    )


def load_syntax_database(config: Optional[dict[str, Any]] = None) -> list[SyntaxDefinition]:
    """Return user-defined syntaxes followed by the built-in ones."""
    database: list[SyntaxDefinition] = []
    user_sections = (config or {}).get("syntax", {})
    for name, section in user_sections.items():
        if not isinstance(section, dict):
            logger.warning("Ignoring syntax entry %r: expected a table.", name)
            continue
        try:
            database.append(_definition_from_config(name, section))
        except (TypeError, AttributeError) as e:
            logger.error("Invalid syntax definition %r: %s", name, e)
    database.extend(BUILTIN_SYNTAXES)
    return database


def select_syntax(
    filename: Optional[str], database: Optional[list[SyntaxDefinition]] = None
) -> Optional[SyntaxDefinition]:
    """Pick the first definition whose filematch applies to `filename`."""
    if not filename:
        return None
    for definition in database if database is not None else BUILTIN_SYNTAXES:
        if definition.matches(filename):
            logger.debug("Selected syntax %r for %s", definition.name, filename)
            return definition
    return None
