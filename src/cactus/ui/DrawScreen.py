# cactus/ui/DrawScreen.py
"""DrawScreen.py
========================
DrawScreen paints a composed `Frame` onto the curses screen.

It is responsible for:
- initialising the color pairs used for each highlight class,
- painting the text rows segment by segment,
- painting the inverted status line and the message line,
- positioning the cursor,
- publishing the whole frame with a single `curses.doupdate()`.

All drawing goes to the curses virtual screen first (`noutrefresh`), so the
terminal only ever shows complete frames.
"""

import curses
import logging
from typing import TYPE_CHECKING, Any

from cactus.core.Syntax import Highlight
from cactus.ui.ScreenComposer import Frame, Segment
from cactus.utils.utils import hex_to_xterm

if TYPE_CHECKING:
    from cactus.core.Cactus import Cactus


## ================= class DrawScreen ==============================
class DrawScreen:
    """Renders frames for the Cactus editor.

    Attributes:
        editor (Cactus): The editor instance (for ``stdscr`` and status messages).
        config (dict): Editor configuration; the ``[colors]`` section is used.
        stdscr (curses.window): The main curses window.
        colors (dict[Highlight, int]): Curses attribute for each highlight class.
    """

    # (config key, 8-color fallback) per highlight class
    COLOR_DEFINITIONS: dict[Highlight, tuple[str, str]] = {
        Highlight.COMMENT: ("comment", "COLOR_CYAN"),
        Highlight.MLCOMMENT: ("mlcomment", "COLOR_CYAN"),
        Highlight.KEYWORD: ("keyword", "COLOR_YELLOW"),
        Highlight.TYPE: ("type", "COLOR_GREEN"),
        Highlight.STRING: ("string", "COLOR_MAGENTA"),
        Highlight.NUMBER: ("number", "COLOR_RED"),
        Highlight.MATCH: ("match", "COLOR_BLUE"),
    }

    def __init__(self, editor: "Cactus", config: dict[str, Any]) -> None:
        self.editor = editor
        self.config = config
        self.stdscr = editor.stdscr
        self.colors: dict[Highlight, int] = {}
        self.init_colors()

    def init_colors(self) -> None:
        """Initializes one curses color pair per highlight class.

        On 256-color terminals the hex colors from the configuration are
        mapped with `hex_to_xterm`; otherwise the basic 8 colors are used.
        Without color support every class falls back to plain text.
        """
        self.colors = {hl: curses.A_NORMAL for hl in Highlight}

        try:
            if not curses.has_colors():
                logging.warning("Terminal has no color support. Using monochrome attributes.")
                return
            curses.start_color()
            curses.use_default_colors()
        except curses.error as e:
            logging.warning("Could not initialise colors: %s", e)
            return

        user_colors = self.config.get("colors", {})
        can_use_256_colors = curses.COLORS >= 256

        for pair_id, (hl, (name, basic_color)) in enumerate(self.COLOR_DEFINITIONS.items(), start=1):
            if can_use_256_colors and name in user_colors:
                fg = hex_to_xterm(str(user_colors[name]))
            else:
                fg = getattr(curses, basic_color)
            try:
                curses.init_pair(pair_id, fg, -1)
                self.colors[hl] = curses.color_pair(pair_id)
            except curses.error as e:
                logging.error(f"Failed to initialize curses pair for '{name}': {e}")

    def _decode(self, data: bytes) -> str:
        return data.decode(self.editor.state.encoding, errors="replace")

    def _attr_for(self, segment: Segment) -> int:
        if segment.inverse:
            return curses.A_REVERSE
        return self.colors.get(segment.highlight, curses.A_NORMAL)

    def _draw_line(self, y: int, segments: list[Segment], width: int) -> None:
        x = 0
        for segment in segments:
            if x >= width:
                break
            text = self._decode(segment.text)
            try:
                self.stdscr.addnstr(y, x, text, width - x, self._attr_for(segment))
            except curses.error:
                # writing the last cell of the window raises after drawing
                pass
            x += len(segment.text)

    def _draw_status_bar(self, y: int, status: str, width: int) -> None:
        try:
            self.stdscr.addnstr(y, 0, status, width, curses.A_REVERSE)
        except curses.error:
            pass

    def _draw_message_bar(self, y: int, message: str, width: int) -> None:
        if not message:
            return
        try:
            self.stdscr.addnstr(y, 0, message, width)
        except curses.error:
            pass

    def _position_cursor(self, frame: Frame, height: int, width: int) -> None:
        y = max(0, min(frame.cursor_y, max(0, height - 3)))
        x = max(0, min(frame.cursor_x, width - 1))
        try:
            self.stdscr.move(y, x)
        except curses.error as e:
            logging.warning(f"Curses error positioning cursor at ({y}, {x}): {e}")

    def draw(self, frame: Frame) -> None:
        """Paint `frame` and publish it in one terminal update."""
        try:
            height, width = self.stdscr.getmaxyx()
            self.stdscr.erase()

            for y, segments in enumerate(frame.lines[: max(0, height - 2)]):
                self._draw_line(y, segments, width)

            if height >= 2:
                self._draw_status_bar(height - 2, frame.status, width)
            if height >= 1:
                self._draw_message_bar(height - 1, frame.message, width)

            self._position_cursor(frame, height, width)
            self._update_display()
        except curses.error as e:
            logging.error(f"Curses error in DrawScreen.draw(): {e}", exc_info=True)

    def _update_display(self) -> None:
        """Publish everything drawn so far with a single physical update."""
        try:
            self.stdscr.noutrefresh()
            curses.doupdate()
        except curses.error as e:
            logging.error(f"Curses doupdate error: {e}")
