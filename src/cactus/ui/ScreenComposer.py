# cactus/ui/ScreenComposer.py
"""ScreenComposer.py
====================

Builds one complete screen frame from the editor state, in memory.

The composer knows nothing about curses: it turns the visible slice of
the buffer into runs of bytes that share a highlight class (`Segment`),
and formats the status and message lines. `DrawScreen` paints the result
and publishes it in a single terminal update, so a partially drawn frame
is never visible.

Widths of the status and message lines are measured with `wcwidth`, since
filenames and messages are text; buffer rows are bytes and use one column
per byte (tabs were already expanded by the render step).
"""

import os
import time
from dataclasses import dataclass, field
from typing import Optional

from wcwidth import wcswidth, wcwidth

from cactus.core.EditorState import EditorState
from cactus.core.RowStore import Row
from cactus.core.Syntax import Highlight

VERSION = "0.0.1"
WELCOME_TEMPLATE = "Cactus -- version {}"
NO_NAME = "[No Name]"
NO_FILETYPE = "no ft"
FILENAME_WIDTH = 20


@dataclass(frozen=True)
class Segment:
    """A run of bytes drawn with one highlight class."""

    text: bytes
    highlight: Highlight = Highlight.NORMAL
    inverse: bool = False


@dataclass
class Frame:
    """Everything needed to paint one screen.

    Attributes:
        lines: One list of segments per text-area row.
        status: The status line, already padded to the screen width.
        message: The message line (may be empty).
        cursor_y, cursor_x: Cursor position on screen.
    """

    lines: list[list[Segment]] = field(default_factory=list)
    status: str = ""
    message: str = ""
    cursor_y: int = 0
    cursor_x: int = 0


def display_width(text: str) -> int:
    """Terminal cells occupied by `text`; unprintable characters count as one."""
    width = wcswidth(text)
    if width >= 0:
        return width
    return sum(max(wcwidth(ch), 1) for ch in text)


def truncate_to_width(text: str, max_width: int) -> str:
    """Return the longest prefix of `text` that fits in `max_width` cells."""
    result: list[str] = []
    consumed = 0
    for ch in text:
        w = wcwidth(ch)
        if w < 0:  # non-printable
            w = 1
        if consumed + w > max_width:
            break
        result.append(ch)
        consumed += w
    return "".join(result)


def compose_row(row: Row, col_offset: int, width: int) -> list[Segment]:
    """Slice a row to the viewport and coalesce bytes with equal highlight.

    Control bytes become an inverted glyph in a segment of their own:
    ``@`` plus the byte for 0-31, ``?`` for DEL.
    """
    if width <= 0 or col_offset >= len(row.render):
        return []
    render = row.render[col_offset:col_offset + width]
    highlight = row.highlight[col_offset:col_offset + width]

    segments: list[Segment] = []
    run = bytearray()
    run_hl: Optional[Highlight] = None

    for c, hl in zip(render, highlight):
        if c < 32 or c == 127:
            if run:
                segments.append(Segment(bytes(run), run_hl or Highlight.NORMAL))
                run = bytearray()
                run_hl = None
            glyph = bytes([ord("@") + c]) if c < 32 else b"?"
            segments.append(Segment(glyph, Highlight.NORMAL, inverse=True))
            continue
        if run and hl != run_hl:
            segments.append(Segment(bytes(run), run_hl or Highlight.NORMAL))
            run = bytearray()
        run.append(c)
        run_hl = hl

    if run:
        segments.append(Segment(bytes(run), run_hl or Highlight.NORMAL))
    return segments


def _welcome_line(width: int) -> list[Segment]:
    welcome = WELCOME_TEMPLATE.format(VERSION)[:width]
    padding = (width - len(welcome)) // 2
    text = ""
    if padding:
        text = "~"
        padding -= 1
    text += " " * padding + welcome
    return [Segment(text.encode())]


def compose_status(state: EditorState, width: int) -> str:
    """Left: name, line count, modified flag. Right: filetype, encoding, position."""
    name = os.path.basename(state.filename) if state.filename else NO_NAME
    left = f"{name[:FILENAME_WIDTH]} - {state.num_rows} lines {'(modified)' if state.dirty else ''}"
    syntax = state.rows.syntax
    filetype = syntax.name if syntax else NO_FILETYPE
    right = f"{filetype} | {state.encoding.upper()} | {state.cy + 1}/{state.num_rows}"

    left = truncate_to_width(left, width)
    left_w = display_width(left)
    right_w = display_width(right)
    if width - left_w >= right_w:
        return left + " " * (width - left_w - right_w) + right
    return left + " " * (width - left_w)


def compose_frame(
    state: EditorState, now: Optional[float] = None, message_timeout: float = 5
) -> Frame:
    """Compose the whole screen for the current state.

    The caller is expected to have scrolled the viewport first.
    """
    if now is None:
        now = time.time()

    width = state.screen_cols
    lines: list[list[Segment]] = []
    for y in range(state.screen_rows):
        file_row = y + state.row_offset
        if file_row >= state.num_rows:
            if state.num_rows == 0 and y == state.screen_rows // 3:
                lines.append(_welcome_line(width))
            else:
                lines.append([Segment(b"~")])
        else:
            lines.append(compose_row(state.rows[file_row], state.col_offset, width))

    message = ""
    if state.status_message and now - state.status_time < message_timeout:
        message = truncate_to_width(state.status_message, width)

    return Frame(
        lines=lines,
        status=compose_status(state, width),
        message=message,
        cursor_y=state.cy - state.row_offset,
        cursor_x=state.rx - state.col_offset,
    )
