# src/cactus/core/__init__.py
"""Public facade for cactus.core: re-export main classes from CamelCase modules.

Keeps Java-like file names (RowStore.py, Search.py, ...),
but provides flat imports for convenience and stability.
"""

# Re-export classes/symbols from CamelCase modules
from .Cactus import Cactus  # noqa: F401
from .EditorState import EditorState  # noqa: F401
from .Keys import Key, KeyEvent  # noqa: F401
from .RowStore import Row, RowStore  # noqa: F401
from .Search import SearchController  # noqa: F401
from .Syntax import Highlight, SyntaxDefinition  # noqa: F401


__all__ = [
    "Cactus",
    "EditorState",
    "Highlight",
    "Key",
    "KeyEvent",
    "Row",
    "RowStore",
    "SearchController",
    "SyntaxDefinition",
]
