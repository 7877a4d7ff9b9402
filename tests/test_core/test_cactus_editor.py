# tests/test_core/test_cactus_editor.py
"""Tests for the `Cactus` controller: file I/O, the quit gate, prompts and key dispatch.

The terminal layer (DrawScreen, KeyBinder, curses) is mocked by the
`real_editor` fixture; everything else runs for real against temporary
files.
"""

import codecs
from pathlib import Path
from unittest.mock import patch

import pytest

from cactus.core.Cactus import Cactus
from cactus.core.Keys import Key, KeyEvent
from cactus.ui.ScreenComposer import Frame


def _send(editor: Cactus, *events: KeyEvent) -> None:
    for event in events:
        editor.process_key(event)


def _type(editor: Cactus, text: str) -> None:
    _send(editor, *(KeyEvent.char(b) for b in text.encode()))


QUIT = KeyEvent(Key.QUIT)
SAVE = KeyEvent(Key.SAVE)
ENTER = KeyEvent(Key.ENTER)
ESC = KeyEvent(Key.ESCAPE)


class TestOpenFile:
    def test_open_splits_lines_and_strips_cr(self, real_editor: Cactus, tmp_path: Path) -> None:
        path = tmp_path / "notes.txt"
        path.write_bytes(b"first\r\nsecond\n")
        real_editor.open_file(str(path))

        st = real_editor.state
        assert [bytes(r.raw) for r in st.rows] == [b"first", b"second"]
        assert st.filename == str(path)
        assert st.dirty == 0
        assert st.rows.syntax is None

    def test_open_selects_syntax_by_extension(self, real_editor: Cactus, tmp_path: Path) -> None:
        path = tmp_path / "main.c"
        path.write_bytes(b"int main;\n")
        real_editor.open_file(str(path))
        assert real_editor.state.rows.syntax.name == "c"

    def test_open_missing_file_raises(self, real_editor: Cactus, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            real_editor.open_file(str(tmp_path / "missing.txt"))

    @pytest.mark.parametrize("data", [b"", b"plain ascii text\n"])
    def test_ascii_and_empty_files_report_utf8(self, data: bytes) -> None:
        assert Cactus.detect_encoding(data) == "utf-8"

    def test_detected_encoding_is_a_known_codec(self) -> None:
        data = "Grüße aus Köln, schöne Straße\n".encode("utf-8") * 20
        codecs.lookup(Cactus.detect_encoding(data))


class TestSaveFile:
    def test_save_writes_rows_with_trailing_newline(self, real_editor: Cactus, tmp_path: Path) -> None:
        path = tmp_path / "out.txt"
        path.write_bytes(b"abc\r\n")
        real_editor.open_file(str(path))
        _type(real_editor, "x")
        assert real_editor.state.dirty == 1

        _send(real_editor, SAVE)
        assert path.read_bytes() == b"xabc\n"
        assert real_editor.state.dirty == 0
        assert real_editor.state.status_message == "5 bytes written to disk"

    def test_save_truncates_longer_file(self, real_editor: Cactus, tmp_path: Path) -> None:
        path = tmp_path / "long.txt"
        path.write_bytes(b"one\ntwo\nthree\n")
        real_editor.open_file(str(path))
        real_editor.state.cy = 2
        _send(real_editor, KeyEvent(Key.END), *[KeyEvent(Key.BACKSPACE)] * 6)
        _send(real_editor, SAVE)
        assert path.read_bytes() == b"one\ntwo\n"

    def test_save_failure_is_reported_not_raised(self, real_editor: Cactus, tmp_path: Path) -> None:
        st = real_editor.state
        st.filename = str(tmp_path)  # a directory cannot be opened for writing
        _type(real_editor, "data")
        assert real_editor.save_file() is False
        assert st.status_message.startswith("Can't save! I/O error: ")
        assert st.dirty > 0

    def test_save_without_name_opens_prompt(self, real_editor: Cactus, tmp_path: Path) -> None:
        _type(real_editor, "hi")
        _send(real_editor, SAVE)
        assert real_editor.save_prompt is not None
        assert real_editor.state.status_message == "Save as:  (ESC to cancel)"

        target = tmp_path / "new.c"
        _type(real_editor, str(target))
        _send(real_editor, ENTER)

        assert real_editor.save_prompt is None
        assert real_editor.state.filename == str(target)
        assert real_editor.state.rows.syntax.name == "c"
        assert target.read_bytes() == b"hi\n"

    def test_save_prompt_escape_aborts(self, real_editor: Cactus) -> None:
        _type(real_editor, "hi")
        _send(real_editor, SAVE)
        _type(real_editor, "name")
        _send(real_editor, ESC)
        assert real_editor.save_prompt is None
        assert real_editor.state.filename is None
        assert real_editor.state.status_message == "Save aborted"
        # prompt keys never reached the buffer
        assert [bytes(r.raw) for r in real_editor.state.rows] == [b"hi"]


class TestQuitGate:
    def test_clean_buffer_quits_immediately(self, real_editor: Cactus) -> None:
        real_editor.running = True
        _send(real_editor, QUIT)
        assert real_editor.running is False

    def test_dirty_buffer_needs_repeated_quit(self, real_editor: Cactus) -> None:
        real_editor.running = True
        _type(real_editor, "x")

        for remaining in (3, 2, 1):
            _send(real_editor, QUIT)
            assert real_editor.running is True
            assert real_editor.state.status_message == (
                "WARNING!!! File has unsaved changes. "
                f"Press Ctrl-Q {remaining} more times to quit."
            )
        _send(real_editor, QUIT)
        assert real_editor.running is False

    def test_other_key_resets_quit_counter(self, real_editor: Cactus) -> None:
        real_editor.running = True
        _type(real_editor, "x")
        _send(real_editor, QUIT, QUIT)
        assert real_editor.state.quit_times == 1
        _send(real_editor, KeyEvent(Key.ARROW_LEFT))
        assert real_editor.state.quit_times == 3


class TestDispatch:
    def test_typing_and_newline(self, real_editor: Cactus) -> None:
        _type(real_editor, "ab")
        _send(real_editor, KeyEvent(Key.ARROW_LEFT), ENTER)
        assert [bytes(r.raw) for r in real_editor.state.rows] == [b"a", b"b"]
        assert (real_editor.state.cy, real_editor.state.cx) == (1, 0)

    def test_delete_key(self, real_editor: Cactus) -> None:
        _type(real_editor, "ab")
        _send(real_editor, KeyEvent(Key.HOME), KeyEvent(Key.DELETE))
        assert [bytes(r.raw) for r in real_editor.state.rows] == [b"b"]

    def test_find_routes_keys_to_search(self, real_editor: Cactus) -> None:
        _type(real_editor, "foo")
        _send(real_editor, ENTER)
        _type(real_editor, "bar")
        _send(real_editor, KeyEvent(Key.FIND))
        assert real_editor.search.active

        _type(real_editor, "foo")
        assert [bytes(r.raw) for r in real_editor.state.rows] == [b"foo", b"bar"]
        assert (real_editor.state.cy, real_editor.state.cx) == (0, 0)
        _send(real_editor, ENTER)
        assert not real_editor.search.active

    def test_refresh_and_escape_change_nothing(self, real_editor: Cactus) -> None:
        _type(real_editor, "a")
        dirty = real_editor.state.dirty
        _send(real_editor, KeyEvent(Key.REFRESH), ESC)
        assert real_editor.state.dirty == dirty
        assert [bytes(r.raw) for r in real_editor.state.rows] == [b"a"]

    def test_resize_rereads_window_size(self, real_editor: Cactus) -> None:
        real_editor.stdscr.getmaxyx.return_value = (30, 100)
        _send(real_editor, KeyEvent(Key.RESIZE))
        assert real_editor.state.screen_rows == 28
        assert real_editor.state.screen_cols == 100


class TestMainLoop:
    def test_refresh_screen_paints_one_frame(self, real_editor: Cactus) -> None:
        real_editor.refresh_screen()
        real_editor.drawer.draw.assert_called_once()
        (frame,), _ = real_editor.drawer.draw.call_args
        assert isinstance(frame, Frame)
        assert len(frame.lines) == real_editor.state.screen_rows

    def test_run_exits_on_quit(self, real_editor: Cactus) -> None:
        real_editor.keybinder.read_event.side_effect = [None, QUIT]
        real_editor.run()
        assert real_editor.running is False
        assert real_editor.drawer.draw.call_count == 2
        real_editor.stdscr.timeout.assert_called_with(100)

    def test_run_stops_on_unhandled_exception(self, real_editor: Cactus) -> None:
        real_editor.keybinder.read_event.side_effect = RuntimeError("boom")
        with patch("cactus.core.Cactus.logger") as mock_logger:
            real_editor.run()
        assert real_editor.running is False
        mock_logger.critical.assert_called_once()
