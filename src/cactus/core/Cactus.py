# cactus/core/Cactus.py
"""cactus.core.Cactus
====================
Cactus: main controller of the terminal text editor.

The `Cactus` class owns the single `EditorState` and wires the pieces
together:

- KeyBinder turns terminal input into `KeyEvent`s,
- edit operations and the search controller mutate the state,
- the viewport is scrolled and a frame is composed and painted once per
  loop iteration.

It also handles file loading and saving, the "Save as" prompt, and the
quit confirmation for buffers with unsaved changes.
"""

import codecs
import curses
import os
from typing import Any, Optional

import chardet

from cactus.core import EditOperations
from cactus.core.EditorState import EditorState
from cactus.core.Keys import ARROW_KEYS, Key, KeyEvent
from cactus.core.Prompt import LinePrompt, PromptStatus
from cactus.core.Search import SearchController
from cactus.core.Syntax import load_syntax_database, select_syntax
from cactus.core.Viewport import scroll
from cactus.ui.DrawScreen import DrawScreen
from cactus.ui.KeyBinder import KeyBinder
from cactus.ui.ScreenComposer import compose_frame
from cactus.utils.logging_config import logger

HELP_MESSAGE = "HELP: Ctrl-S = save | Ctrl-Q = quit | Ctrl-F = find"
SAVE_AS_TEMPLATE = "Save as: {} (ESC to cancel)"
ENCODING_SAMPLE_SIZE = 1024 * 20


## ==================== Cactus Class ====================
class Cactus:
    """Main controller of the Cactus editor.

    Attributes:
        stdscr (curses.window): The main curses window.
        config (dict): Merged application configuration.
        state (EditorState): The one editor state every operation works on.
        search (SearchController): Incremental search state machine.
        save_prompt (LinePrompt | None): Active "Save as" prompt, if any.
        drawer (DrawScreen): Paints composed frames.
        keybinder (KeyBinder): Reads and translates key presses.
        running (bool): Main loop flag.
    """

    def __init__(self, stdscr: "curses.window", config: dict[str, Any]) -> None:
        self.stdscr = stdscr
        self.config: dict[str, Any] = config

        self._initialize_state()
        self._initialize_components()
        self._setup_environment()
        self.handle_resize()
        logger.info("Cactus initialized successfully.")

    # --- State Initialization ---
    def _initialize_state(self) -> None:
        editor_config = self.config.get("editor", {})
        self.quit_times: int = int(editor_config.get("quit_times", 3))
        self.message_timeout: float = float(editor_config.get("message_timeout", 5))
        self.syntax_database = load_syntax_database(self.config)
        self.state = EditorState(quit_times=self.quit_times)
        self.save_prompt: Optional[LinePrompt] = None
        self.running: bool = False

    # --- Component Initialization ---
    def _initialize_components(self) -> None:
        self.search = SearchController(self.state)
        self.drawer = DrawScreen(self, self.config)
        self.keybinder = KeyBinder(self)

    # --- Environment Setup ---
    def _setup_environment(self) -> None:
        self.stdscr.keypad(True)
        try:
            curses.raw()
            curses.noecho()
            curses.curs_set(1)
        except curses.error as exc:
            logger.warning("Could not set terminal modes: %s", exc)

    def handle_resize(self) -> bool:
        """Re-read the window size; two rows are kept for the status and message lines."""
        height, width = self.stdscr.getmaxyx()
        self.state.screen_rows = max(1, height - 2)
        self.state.screen_cols = max(1, width)
        logger.debug("Window size %dx%d, text area %dx%d.", width, height,
                     self.state.screen_cols, self.state.screen_rows)
        return True

    def _set_status_message(self, message: str) -> None:
        self.state.set_status_message(message)
        logger.debug("Status message set to: '%s'", message)

    # --- File operations ---
    @staticmethod
    def detect_encoding(data: bytes) -> str:
        """Guess the encoding label shown in the status bar."""
        if not data:
            return "utf-8"
        guess = chardet.detect(data[:ENCODING_SAMPLE_SIZE])
        encoding = guess.get("encoding")
        logger.debug("Chardet detected encoding '%s' with confidence %.2f.",
                     encoding, guess.get("confidence") or 0.0)
        if not encoding or encoding.lower() == "ascii":
            return "utf-8"
        try:
            return codecs.lookup(encoding).name
        except LookupError:
            return "utf-8"

    def open_file(self, filename: str) -> None:
        """Load `filename` into the buffer.

        Raises:
            OSError: If the file cannot be read. Opening a file is only done
                at startup, where this is fatal.
        """
        with open(filename, "rb") as f:
            data = f.read()

        st = self.state
        st.filename = filename
        st.encoding = self.detect_encoding(data)
        st.rows.set_syntax(select_syntax(filename, self.syntax_database))
        st.rows.load(data)
        st.cx = st.cy = st.rx = 0
        st.row_offset = st.col_offset = 0
        logger.info("Opened '%s': %d rows, encoding %s.", filename, st.num_rows, st.encoding)

    def save_file(self) -> bool:
        """Save to the current filename, or ask for one first.

        Returns:
            bool: True if the buffer was written to disk.
        """
        if not self.state.filename:
            self.save_prompt = LinePrompt(SAVE_AS_TEMPLATE, self.state.encoding)
            self._set_status_message(self.save_prompt.message)
            return False
        return self._save_buffer()

    def _handle_save_prompt(self, event: KeyEvent) -> None:
        if self.save_prompt is None:
            return
        status = self.save_prompt.feed(event)
        if status is PromptStatus.ACTIVE:
            self._set_status_message(self.save_prompt.message)
            return

        prompt, self.save_prompt = self.save_prompt, None
        if status is PromptStatus.CANCELLED:
            self._set_status_message("Save aborted")
            return

        self.state.filename = prompt.text
        self.state.rows.set_syntax(select_syntax(self.state.filename, self.syntax_database))
        self._save_buffer()

    def _save_buffer(self) -> bool:
        st = self.state
        buffer, length = st.rows.to_flat_buffer()
        try:
            self._write_file(st.filename, buffer)
        except OSError as e:
            logger.error("Failed to write file '%s': %s", st.filename, e, exc_info=True)
            self._set_status_message(f"Can't save! I/O error: {e.strerror or e}")
            return False

        st.rows.dirty = 0
        self._set_status_message(f"{length} bytes written to disk")
        logger.info("Saved %d bytes to '%s'.", length, st.filename)
        return True

    @staticmethod
    def _write_file(target_filename: str, buffer: bytes) -> None:
        """Truncate `target_filename` to the buffer length and write it in full.

        Raises:
            OSError: Propagated from the open, truncate or write calls.
        """
        fd = os.open(target_filename, os.O_RDWR | os.O_CREAT, 0o644)
        try:
            os.ftruncate(fd, len(buffer))
            view = memoryview(buffer)
            written = 0
            while written < len(buffer):
                written += os.write(fd, view[written:])
        finally:
            os.close(fd)

    # --- Key handling ---
    def exit_editor(self) -> None:
        logger.info("Exit requested.")
        self.running = False

    def _handle_quit(self) -> None:
        st = self.state
        if st.dirty and st.quit_times > 0:
            self._set_status_message(
                f"WARNING!!! File has unsaved changes. Press Ctrl-Q {st.quit_times} more times to quit."
            )
            st.quit_times -= 1
            return
        self.exit_editor()

    def process_key(self, event: KeyEvent) -> None:
        """Apply one key event to the editor."""
        if event.key == Key.RESIZE:
            self.handle_resize()
            return
        if self.search.active:
            self.search.handle(event)
            return
        if self.save_prompt is not None:
            self._handle_save_prompt(event)
            return

        st = self.state
        key = event.key
        if key == Key.QUIT:
            self._handle_quit()
            return

        if key == Key.SAVE:
            self.save_file()
        elif key == Key.FIND:
            self.search.start()
        elif key == Key.ENTER:
            EditOperations.insert_newline(st)
        elif key == Key.BACKSPACE:
            EditOperations.delete_char(st)
        elif key == Key.DELETE:
            EditOperations.delete_forward(st)
        elif key in ARROW_KEYS:
            EditOperations.move_cursor(st, key)
        elif key == Key.HOME:
            EditOperations.move_home(st)
        elif key == Key.END:
            EditOperations.move_end(st)
        elif key in (Key.PAGE_UP, Key.PAGE_DOWN):
            EditOperations.page(st, key)
        elif key == Key.CHAR and event.byte is not None:
            EditOperations.insert_char(st, event.byte)
        # REFRESH and ESCAPE do nothing

        st.quit_times = self.quit_times

    # --- Main loop ---
    def refresh_screen(self) -> None:
        """Scroll the viewport, compose one frame and paint it."""
        scroll(self.state)
        frame = compose_frame(self.state, message_timeout=self.message_timeout)
        self.drawer.draw(frame)

    def run(self) -> None:
        """The main event loop of the editor.

        Each iteration paints a frame, then waits up to 100 ms for a key so
        the message line can expire while the user is idle.
        """
        logger.info("Editor main loop started.")
        self.running = True

        self.stdscr.nodelay(True)
        self.stdscr.timeout(100)

        while self.running:
            try:
                self.refresh_screen()
                event = self.keybinder.read_event()
                if event is not None:
                    self.process_key(event)
            except KeyboardInterrupt:
                logger.info("Main loop interrupted by KeyboardInterrupt.")
                self.exit_editor()
                break
            except Exception as e:
                logger.critical("Unhandled exception in main loop: %s", e, exc_info=True)
                self.exit_editor()
                break

        logger.info("Editor main loop finished.")
