# cactus/core/Highlighter.py
"""cactus.core.Highlighter
=========================

Render and highlight engine.

`update_render` expands tabs in a row's raw bytes into its render bytes.
`update_highlight` classifies every render byte and carries the open
block-comment state from row to row: when a row's open-comment state
changes, the row below is re-highlighted, and so on until the state
settles or the buffer ends.

The scan order at each position is fixed: single-line comment, block
comment, string, number, keyword. Changing it changes what is highlighted.
"""

from typing import TYPE_CHECKING, Optional

from cactus.core.Syntax import Highlight, SyntaxDefinition, is_separator

if TYPE_CHECKING:
    from cactus.core.RowStore import Row, RowStore


TAB_STOP = 8

TAB = 0x09
SPACE = 0x20
BACKSLASH = 0x5C
DOUBLE_QUOTE = 0x22
SINGLE_QUOTE = 0x27
DOT = 0x2E


def update_render(row: "Row") -> None:
    """Rebuild `row.render` from `row.raw`, expanding tabs to the next tab stop."""
    out = bytearray()
    for c in row.raw:
        if c == TAB:
            out.append(SPACE)
            while len(out) % TAB_STOP:
                out.append(SPACE)
        else:
            out.append(c)
    row.render = bytes(out)


def cx_to_rx(row: "Row", cx: int) -> int:
    """Map a raw byte index to a render column."""
    rx = 0
    for c in row.raw[:cx]:
        if c == TAB:
            rx += (TAB_STOP - 1) - (rx % TAB_STOP)
        rx += 1
    return rx


def rx_to_cx(row: "Row", rx: int) -> int:
    """Map a render column back to the raw byte index that produces it."""
    cur_rx = 0
    for cx, c in enumerate(row.raw):
        if c == TAB:
            cur_rx += (TAB_STOP - 1) - (cur_rx % TAB_STOP)
        cur_rx += 1
        if cur_rx > rx:
            return cx
    return len(row.raw)


def _is_digit(c: int) -> bool:
    return 0x30 <= c <= 0x39


def highlight_row(row: "Row", open_before: bool, syntax: Optional[SyntaxDefinition]) -> bool:
    """Classify every byte of `row.render`.

    Args:
        row: The row to highlight. Its ``highlight`` and ``open_comment``
            fields are replaced.
        open_before: Whether a block comment is still open at the end of
            the previous row.
        syntax: Active syntax, or None for plain text.

    Returns:
        True if the row's ``open_comment`` state changed.
    """
    render = row.render
    size = len(render)
    hl = [Highlight.NORMAL] * size

    if syntax is None:
        row.highlight = hl
        changed = row.open_comment
        row.open_comment = False
        return changed

    scs = syntax.singleline_bytes
    mcs, mce = syntax.multiline_bytes

    prev_sep = True
    in_string = 0
    in_comment = open_before

    i = 0
    while i < size:
        c = render[i]
        prev_hl = hl[i - 1] if i > 0 else Highlight.NORMAL

        if scs and not in_string and not in_comment:
            if render.startswith(scs, i):
                hl[i:] = [Highlight.COMMENT] * (size - i)
                break

        if mcs and mce and not in_string:
            if in_comment:
                hl[i] = Highlight.MLCOMMENT
                if render.startswith(mce, i):
                    hl[i:i + len(mce)] = [Highlight.MLCOMMENT] * len(mce)
                    i += len(mce)
                    in_comment = False
                    prev_sep = True
                else:
                    i += 1
                continue
            if render.startswith(mcs, i):
                hl[i:i + len(mcs)] = [Highlight.MLCOMMENT] * len(mcs)
                i += len(mcs)
                in_comment = True
                continue

        if syntax.highlight_strings:
            if in_string:
                hl[i] = Highlight.STRING
                if c == BACKSLASH and i + 1 < size:
                    hl[i + 1] = Highlight.STRING
                    i += 2
                    continue
                if c == in_string:
                    in_string = 0
                i += 1
                prev_sep = True
                continue
            if c in (DOUBLE_QUOTE, SINGLE_QUOTE):
                in_string = c
                hl[i] = Highlight.STRING
                i += 1
                continue

        if syntax.highlight_numbers:
            if (_is_digit(c) and (prev_sep or prev_hl == Highlight.NUMBER)) or (
                c == DOT and prev_hl == Highlight.NUMBER
            ):
                hl[i] = Highlight.NUMBER
                i += 1
                prev_sep = False
                continue

        if prev_sep:
            matched = False
            for word, kind in syntax.keyword_table:
                end = i + len(word)
                if render.startswith(word, i) and (end >= size or is_separator(render[end])):
                    hl[i:end] = [kind] * len(word)
                    i = end
                    matched = True
                    break
            if matched:
                prev_sep = False
                continue

        prev_sep = is_separator(c)
        i += 1

    row.highlight = hl
    changed = row.open_comment != in_comment
    row.open_comment = in_comment
    return changed


def update_highlight(store: "RowStore", index: int) -> None:
    """Highlight row `index` and propagate block-comment state downward.

    Iterates instead of recursing, so a comment opened near the top of a
    large file is bounded only by the row count.
    """
    pending = [index]
    while pending:
        current = pending.pop()
        if current < 0 or current >= len(store.rows):
            continue
        open_before = current > 0 and store.rows[current - 1].open_comment
        changed = highlight_row(store.rows[current], open_before, store.syntax)
        if changed and current + 1 < len(store.rows):
            pending.append(current + 1)
