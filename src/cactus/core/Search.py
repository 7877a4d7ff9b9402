# cactus/core/Search.py
"""cactus.core.Search
====================

Incremental search.

`SearchController` is an explicit state machine driven one key at a time:

    IDLE --start()--> COMPOSING <--text keys--> NAVIGATING (arrows)
      ^                    |                         |
      +---- Enter / Esc ---+-------------------------+

While a session is active the current match is shown by overlaying the
MATCH class on its row's highlight. Exactly one row is overlaid at any
time: the row's original highlight is saved before the overlay and put
back before the next key is processed, so the overlay never leaks into
the buffer's real highlighting.
"""

import logging
from enum import Enum, auto
from typing import Optional

from cactus.core.EditorState import EditorState
from cactus.core.Highlighter import rx_to_cx
from cactus.core.Keys import Key, KeyEvent
from cactus.core.Prompt import LinePrompt, PromptStatus
from cactus.core.Syntax import Highlight

logger = logging.getLogger("cactus")


class SearchState(Enum):
    IDLE = auto()
    COMPOSING = auto()
    NAVIGATING = auto()


class SearchController:
    """Runs one search session at a time against an `EditorState`.

    Attributes:
        state (SearchState): Current state of the session.
        last_match (int): Row index of the current match, or -1.
        direction (int): +1 to search forward, -1 backward.
    """

    PROMPT_TEMPLATE = "Search: {} (Use ESC/Arrows/Enter)"

    def __init__(self, editor_state: EditorState) -> None:
        self.editor_state = editor_state
        self.state = SearchState.IDLE
        self.prompt: Optional[LinePrompt] = None
        self.last_match = -1
        self.direction = 1
        self._saved_row: Optional[int] = None
        self._saved_highlight: Optional[list[Highlight]] = None
        self._saved_cursor: tuple[int, int, int, int] = (0, 0, 0, 0)

    @property
    def active(self) -> bool:
        return self.state is not SearchState.IDLE

    @property
    def query(self) -> bytes:
        return bytes(self.prompt.buffer) if self.prompt else b""

    def start(self) -> None:
        """Begin a session, remembering the cursor and viewport for Escape."""
        st = self.editor_state
        self._saved_cursor = (st.cx, st.cy, st.col_offset, st.row_offset)
        self.prompt = LinePrompt(self.PROMPT_TEMPLATE, st.encoding)
        self.last_match = -1
        self.direction = 1
        self.state = SearchState.COMPOSING
        st.set_status_message(self.prompt.message)
        logger.debug("Search session started at (%d, %d).", st.cy, st.cx)

    def handle(self, event: KeyEvent) -> bool:
        """Process one key. Returns False once the session has ended."""
        if not self.active or self.prompt is None:
            return False

        self._restore_highlight()
        status = self.prompt.feed(event)

        if status is PromptStatus.CANCELLED:
            self._restore_cursor()
            self._finish()
            return False
        if status is PromptStatus.CONFIRMED:
            self._finish()
            return False

        if event.key == Key.ENTER:
            # empty query: nothing to confirm
            self.last_match = -1
            self.direction = 1
        elif event.key in (Key.ARROW_RIGHT, Key.ARROW_DOWN):
            self.direction = 1
            self.state = SearchState.NAVIGATING
            self._find_next()
        elif event.key in (Key.ARROW_LEFT, Key.ARROW_UP):
            self.direction = -1
            self.state = SearchState.NAVIGATING
            self._find_next()
        else:
            self.last_match = -1
            self.direction = 1
            self.state = SearchState.COMPOSING
            self._find_next()

        self.editor_state.set_status_message(self.prompt.message)
        return True

    # --- internals ---
    def _find_next(self) -> None:
        query = self.query
        if not query:
            return
        if self.last_match == -1:
            self.direction = 1

        st = self.editor_state
        rows = st.rows
        total = len(rows)
        current = self.last_match
        for _ in range(total):
            current += self.direction
            if current == -1:
                current = total - 1
            elif current == total:
                current = 0

            row = rows[current]
            match = row.render.find(query)
            if match == -1:
                continue

            self.last_match = current
            st.cy = current
            st.cx = rx_to_cx(row, match)
            # forces the next scroll to put the match row at the top
            st.row_offset = total

            self._saved_row = current
            self._saved_highlight = list(row.highlight)
            row.highlight[match:match + len(query)] = [Highlight.MATCH] * len(query)
            return

    def _restore_highlight(self) -> None:
        if self._saved_row is None or self._saved_highlight is None:
            return
        rows = self.editor_state.rows
        if self._saved_row < len(rows):
            rows[self._saved_row].highlight = self._saved_highlight
        self._saved_row = None
        self._saved_highlight = None

    def _restore_cursor(self) -> None:
        st = self.editor_state
        st.cx, st.cy, st.col_offset, st.row_offset = self._saved_cursor

    def _finish(self) -> None:
        logger.debug("Search session ended (last match row %d).", self.last_match)
        self.state = SearchState.IDLE
        self.prompt = None
        self.editor_state.set_status_message("")
