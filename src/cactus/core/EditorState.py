# cactus/core/EditorState.py
"""cactus.core.EditorState
=========================

The single mutable record the editor operates on.

The controller owns exactly one `EditorState` and passes it to the edit,
scroll, search and compose functions; none of them keep state of their
own between calls.
"""

import time
from dataclasses import dataclass, field
from typing import Optional

from cactus.core.RowStore import RowStore


@dataclass
class EditorState:
    """Cursor, viewport, file and message state of the editor.

    Attributes:
        rows: The line buffer.
        cx, cy: Cursor position as raw byte index and row index. ``cy`` may
            equal ``len(rows)`` (the virtual line after the last row).
        rx: Render column of the cursor, derived from ``cx`` on scroll.
        row_offset, col_offset: First visible row and render column.
        screen_rows, screen_cols: Size of the text area.
        filename: Path of the file being edited, if any.
        encoding: Detected encoding label of the file, used for display.
        status_message, status_time: Message line text and when it was set.
        quit_times: Remaining confirmations before quitting a dirty buffer.
    """

    rows: RowStore = field(default_factory=RowStore)
    cx: int = 0
    cy: int = 0
    rx: int = 0
    row_offset: int = 0
    col_offset: int = 0
    screen_rows: int = 0
    screen_cols: int = 0
    filename: Optional[str] = None
    encoding: str = "utf-8"
    status_message: str = ""
    status_time: float = 0.0
    quit_times: int = 3

    @property
    def dirty(self) -> int:
        return self.rows.dirty

    @property
    def num_rows(self) -> int:
        return len(self.rows)

    def set_status_message(self, message: str, now: Optional[float] = None) -> None:
        """Set the message line text and stamp it with the current time."""
        self.status_message = message
        self.status_time = time.time() if now is None else now

    def current_row_length(self) -> int:
        """Raw length of the cursor row; 0 on the virtual line."""
        if self.cy < len(self.rows):
            return len(self.rows[self.cy].raw)
        return 0
