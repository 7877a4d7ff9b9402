# cactus/core/EditOperations.py
"""cactus.core.EditOperations
============================

Buffer editing and cursor movement.

Every function takes the editor state, mutates it through the row store
and leaves the cursor on a valid position: ``0 <= cy <= len(rows)`` and
``0 <= cx <= len(rows[cy])`` (0 on the virtual line past the end).
Operations that cannot apply at the current position do nothing.
"""

from cactus.core.EditorState import EditorState
from cactus.core.Keys import Key


def insert_char(state: EditorState, byte: int) -> None:
    """Insert `byte` at the cursor and advance it."""
    if state.cy == len(state.rows):
        state.rows.insert(len(state.rows), b"")
    state.rows.insert_char(state.cy, state.cx, byte)
    state.cx += 1


def insert_newline(state: EditorState) -> None:
    """Split the cursor row at the cursor; the cursor moves to the new line."""
    if state.cx == 0:
        state.rows.insert(state.cy, b"")
    else:
        tail = state.rows.truncate(state.cy, state.cx)
        state.rows.insert(state.cy + 1, tail)
    state.cy += 1
    state.cx = 0


def delete_char(state: EditorState) -> None:
    """Delete the byte left of the cursor, joining lines at column 0."""
    if state.cy == len(state.rows):
        return
    if state.cx == 0 and state.cy == 0:
        return

    if state.cx > 0:
        state.rows.delete_char(state.cy, state.cx - 1)
        state.cx -= 1
    else:
        previous = state.rows[state.cy - 1]
        state.cx = len(previous.raw)
        state.rows.append_string_to(state.cy - 1, bytes(state.rows[state.cy].raw))
        state.rows.delete(state.cy)
        state.cy -= 1


def delete_forward(state: EditorState) -> None:
    """Delete the byte under the cursor (the Delete key)."""
    move_cursor(state, Key.ARROW_RIGHT)
    delete_char(state)


def _snap_cx(state: EditorState) -> None:
    state.cx = min(state.cx, state.current_row_length())


def move_cursor(state: EditorState, key: Key) -> None:
    """Move the cursor one step; left/right wrap across line boundaries."""
    row_len = state.current_row_length()
    on_row = state.cy < len(state.rows)

    if key == Key.ARROW_LEFT:
        if state.cx != 0:
            state.cx -= 1
        elif state.cy > 0:
            state.cy -= 1
            state.cx = state.current_row_length()
    elif key == Key.ARROW_RIGHT:
        if on_row and state.cx < row_len:
            state.cx += 1
        elif on_row and state.cx == row_len:
            state.cy += 1
            state.cx = 0
    elif key == Key.ARROW_UP:
        if state.cy != 0:
            state.cy -= 1
    elif key == Key.ARROW_DOWN:
        if state.cy < len(state.rows):
            state.cy += 1

    _snap_cx(state)


def move_home(state: EditorState) -> None:
    state.cx = 0


def move_end(state: EditorState) -> None:
    state.cx = state.current_row_length()


def page(state: EditorState, key: Key) -> None:
    """Move a screenful up or down, starting from the edge of the viewport."""
    if key == Key.PAGE_UP:
        state.cy = state.row_offset
        direction = Key.ARROW_UP
    else:
        state.cy = min(state.row_offset + state.screen_rows - 1, len(state.rows))
        direction = Key.ARROW_DOWN
    _snap_cx(state)
    for _ in range(state.screen_rows):
        move_cursor(state, direction)
