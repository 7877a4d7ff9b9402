# cactus/core/Viewport.py
"""Viewport scrolling: keep the cursor inside the visible window."""

import logging

from cactus.core.EditorState import EditorState
from cactus.core.Highlighter import cx_to_rx

logger = logging.getLogger("cactus")


def scroll(state: EditorState) -> None:
    """Recompute ``state.rx`` and snap the offsets so the cursor is visible.

    The viewport moves only as far as needed: when the cursor leaves the
    window the cursor's row (or column) becomes the first or last visible
    one. A ``row_offset`` beyond the cursor row anchors that row at the top.
    """
    state.rx = 0
    if state.cy < len(state.rows):
        state.rx = cx_to_rx(state.rows[state.cy], state.cx)

    if state.cy < state.row_offset:
        state.row_offset = state.cy
    if state.cy >= state.row_offset + state.screen_rows:
        state.row_offset = state.cy - state.screen_rows + 1

    if state.rx < state.col_offset:
        state.col_offset = state.rx
    if state.rx >= state.col_offset + state.screen_cols:
        state.col_offset = state.rx - state.screen_cols + 1

    state.row_offset = max(0, state.row_offset)
    state.col_offset = max(0, state.col_offset)
