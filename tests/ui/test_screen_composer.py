# tests/ui/test_screen_composer.py
"""Tests for frame composition: text rows, welcome banner, status and message lines."""

from cactus.core.Syntax import Highlight
from cactus.ui.ScreenComposer import (
    Segment,
    compose_frame,
    compose_row,
    compose_status,
    display_width,
    truncate_to_width,
)


class TestComposeRow:
    def test_runs_are_coalesced_by_highlight(self, make_store, c_syntax) -> None:
        row = make_store([b"int x"], c_syntax)[0]
        assert compose_row(row, 0, 80) == [
            Segment(b"int", Highlight.TYPE),
            Segment(b" x", Highlight.NORMAL),
        ]

    def test_slice_to_viewport(self, make_store) -> None:
        row = make_store([b"abcdef"])[0]
        assert compose_row(row, 2, 3) == [Segment(b"cde")]

    def test_offset_past_end_gives_empty_line(self, make_store) -> None:
        row = make_store([b"abc"])[0]
        assert compose_row(row, 3, 80) == []

    def test_control_bytes_are_inverted_glyphs(self, make_store) -> None:
        row = make_store([b"a\x01b\x7f"])[0]
        assert compose_row(row, 0, 80) == [
            Segment(b"a"),
            Segment(b"A", inverse=True),
            Segment(b"b"),
            Segment(b"?", inverse=True),
        ]


class TestComposeFrame:
    def test_empty_buffer_shows_welcome_banner(self, make_state) -> None:
        state = make_state([], screen_rows=20, screen_cols=80)
        frame = compose_frame(state, now=0)
        assert len(frame.lines) == 20
        banner = frame.lines[20 // 3][0].text
        assert banner.startswith(b"~ ")
        assert banner.endswith(b"Cactus -- version 0.0.1")
        assert len(banner) == 28 + len(b"Cactus -- version 0.0.1")
        assert frame.lines[0] == [Segment(b"~")]

    def test_banner_hidden_once_buffer_has_rows(self, make_state) -> None:
        state = make_state([b"hello"], screen_rows=10)
        frame = compose_frame(state, now=0)
        assert frame.lines[0] == [Segment(b"hello")]
        assert all(line == [Segment(b"~")] for line in frame.lines[1:])

    def test_lines_follow_row_offset(self, make_state) -> None:
        state = make_state([b"r%d" % i for i in range(30)], screen_rows=5)
        state.row_offset = 10
        frame = compose_frame(state, now=0)
        assert [line[0].text for line in frame.lines] == [b"r10", b"r11", b"r12", b"r13", b"r14"]

    def test_cursor_is_relative_to_viewport(self, make_state) -> None:
        state = make_state([b"x" * 50] * 30, screen_rows=10)
        state.cy, state.rx, state.row_offset, state.col_offset = 5, 3, 2, 1
        frame = compose_frame(state, now=0)
        assert (frame.cursor_y, frame.cursor_x) == (3, 2)

    def test_message_expires(self, make_state) -> None:
        state = make_state([])
        state.set_status_message("hello", now=100.0)
        assert compose_frame(state, now=104.0, message_timeout=5).message == "hello"
        assert compose_frame(state, now=105.5, message_timeout=5).message == ""


class TestComposeStatus:
    def test_unnamed_clean_buffer(self, make_state) -> None:
        status = compose_status(make_state([]), 80)
        assert len(status) == 80
        assert status.startswith("[No Name] - 0 lines ")
        assert status.endswith("no ft | UTF-8 | 1/0")

    def test_named_dirty_buffer(self, make_state, c_syntax) -> None:
        state = make_state([b"a", b"b"], c_syntax)
        state.filename = "/tmp/project/a_rather_long_file_name.c"
        state.rows.insert_char(0, 0, ord("x"))
        state.cy = 1
        status = compose_status(state, 80)
        assert status.startswith("a_rather_long_file_n - 2 lines (modified)")
        assert status.endswith("c | UTF-8 | 2/2")

    def test_right_side_dropped_when_it_does_not_fit(self, make_state) -> None:
        status = compose_status(make_state([]), 25)
        assert status == "[No Name] - 0 lines " + " " * 5


def test_display_width_counts_wide_characters() -> None:
    assert display_width("abc") == 3
    assert display_width("日本") == 4
    assert truncate_to_width("日本語", 5) == "日本"
