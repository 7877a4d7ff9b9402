# tests/conftest.py
"""Pytest configuration with shared fixtures for the Cactus editor tests."""

from __future__ import annotations

from typing import Any, Callable, Optional
from unittest.mock import MagicMock, patch

import pytest

from cactus.core.Cactus import Cactus
from cactus.core.EditorState import EditorState
from cactus.core.RowStore import RowStore
from cactus.core.Syntax import BUILTIN_SYNTAXES, SyntaxDefinition


# --- Base fixtures for curses and configuration ---
@pytest.fixture
def mock_stdscr() -> MagicMock:
    """Create a mock of the `curses` stdscr for testing UI components.

    Returns:
        MagicMock: A mocked `stdscr` with terminal size set to (24, 80).
    """
    stdscr = MagicMock()
    stdscr.getmaxyx.return_value = (24, 80)  # Typical terminal size
    return stdscr


@pytest.fixture
def mock_config() -> dict[str, dict[str, Any]]:
    """Provide a baseline configuration for Cactus tests.

    Returns:
        dict[str, dict[str, Any]]: Editor configuration dictionary.
    """
    return {
        "editor": {"quit_times": 3, "message_timeout": 5},
        "colors": {},
        "keybindings": {},
        "syntax": {},
    }


@pytest.fixture
def c_syntax() -> SyntaxDefinition:
    """The built-in C definition."""
    return next(s for s in BUILTIN_SYNTAXES if s.name == "c")


@pytest.fixture
def make_store() -> Callable[..., RowStore]:
    """Factory building a `RowStore` from a list of byte lines."""

    def _make(lines: list[bytes], syntax: Optional[SyntaxDefinition] = None) -> RowStore:
        store = RowStore(syntax)
        for line in lines:
            store.append(line)
        store.dirty = 0
        return store

    return _make


@pytest.fixture
def make_state(make_store: Callable[..., RowStore]) -> Callable[..., EditorState]:
    """Factory building an `EditorState` with a 20x80 text area."""

    def _make(
        lines: list[bytes],
        syntax: Optional[SyntaxDefinition] = None,
        screen_rows: int = 20,
        screen_cols: int = 80,
    ) -> EditorState:
        return EditorState(
            rows=make_store(lines, syntax),
            screen_rows=screen_rows,
            screen_cols=screen_cols,
        )

    return _make


# --- Cactus fixtures ---
@pytest.fixture
def real_editor(mock_stdscr: MagicMock, mock_config: dict[str, dict[str, Any]]) -> Cactus:
    """Create a real `Cactus` instance with the terminal layer mocked out.

    Args:
        mock_stdscr: Mocked curses window.
        mock_config: Editor configuration.

    Returns:
        Cactus: A real controller whose drawer and key binder are mocks.
    """
    with (
        patch("cactus.core.Cactus.DrawScreen"),
        patch("cactus.core.Cactus.KeyBinder"),
        patch("cactus.core.Cactus.curses"),
    ):
        editor = Cactus(mock_stdscr, mock_config)
        return editor
