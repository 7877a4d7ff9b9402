# cactus/core/RowStore.py
"""cactus.core.RowStore
======================

The line buffer.

A `RowStore` is an ordered list of `Row` objects, one per logical line.
Each row keeps its authoritative raw bytes together with the derived
render bytes and per-byte highlight classes; every mutation goes through
the store, which regenerates the derived fields and bumps the dirty
counter. Out-of-range positions are ignored or clamped, never raised.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, Optional

from cactus.core.Highlighter import update_highlight, update_render
from cactus.core.Syntax import Highlight, SyntaxDefinition

logger = logging.getLogger("cactus")


@dataclass(eq=False)
class Row:
    """One logical line of the buffer."""

    index: int
    raw: bytearray
    render: bytes = b""
    highlight: list[Highlight] = field(default_factory=list)
    open_comment: bool = False

    def __len__(self) -> int:
        return len(self.raw)


class RowStore:
    """Ordered sequence of rows with a global dirty counter.

    Attributes:
        rows (list[Row]): The rows, in order. ``rows[i].index == i`` always.
        syntax (SyntaxDefinition | None): Active highlighting rules.
        dirty (int): Number of mutations since the last load or save.
    """

    def __init__(self, syntax: Optional[SyntaxDefinition] = None) -> None:
        self.rows: list[Row] = []
        self.syntax: Optional[SyntaxDefinition] = syntax
        self.dirty: int = 0

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, index: int) -> Row:
        return self.rows[index]

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    # --- internal helpers ---
    def _reindex_from(self, start: int) -> None:
        for i in range(start, len(self.rows)):
            self.rows[i].index = i

    def _refresh(self, index: int) -> None:
        update_render(self.rows[index])
        update_highlight(self, index)

    # --- syntax ---
    def set_syntax(self, syntax: Optional[SyntaxDefinition]) -> None:
        """Switch highlighting rules and re-highlight every row top to bottom."""
        self.syntax = syntax
        for row in self.rows:
            update_highlight(self, row.index)

    # --- row operations ---
    def insert(self, at: int, data: bytes) -> None:
        """Insert a new row holding `data` before position `at`."""
        if at < 0 or at > len(self.rows):
            return
        self.rows.insert(at, Row(index=at, raw=bytearray(data)))
        self._reindex_from(at + 1)
        self._refresh(at)
        if at + 1 < len(self.rows):
            # the row below now takes its comment state from the new row
            update_highlight(self, at + 1)
        self.dirty += 1

    def append(self, data: bytes) -> None:
        self.insert(len(self.rows), data)

    def delete(self, at: int) -> None:
        """Remove row `at`."""
        if at < 0 or at >= len(self.rows):
            return
        del self.rows[at]
        self._reindex_from(at)
        if at < len(self.rows):
            update_highlight(self, at)
        self.dirty += 1

    def append_string_to(self, index: int, data: bytes) -> None:
        """Concatenate `data` onto the end of row `index`."""
        if index < 0 or index >= len(self.rows):
            return
        self.rows[index].raw.extend(data)
        self._refresh(index)
        self.dirty += 1

    def insert_char(self, index: int, at: int, byte: int) -> None:
        """Insert one byte into row `index`; out-of-range `at` appends."""
        if index < 0 or index >= len(self.rows):
            return
        row = self.rows[index]
        if at < 0 or at > len(row.raw):
            at = len(row.raw)
        row.raw.insert(at, byte)
        self._refresh(index)
        self.dirty += 1

    def delete_char(self, index: int, at: int) -> None:
        """Delete the byte at `at` from row `index`."""
        if index < 0 or index >= len(self.rows):
            return
        row = self.rows[index]
        if at < 0 or at >= len(row.raw):
            return
        del row.raw[at]
        self._refresh(index)
        self.dirty += 1

    def truncate(self, index: int, at: int) -> bytes:
        """Cut row `index` at `at` and return the removed tail."""
        if index < 0 or index >= len(self.rows):
            return b""
        row = self.rows[index]
        at = max(0, min(at, len(row.raw)))
        tail = bytes(row.raw[at:])
        del row.raw[at:]
        self._refresh(index)
        self.dirty += 1
        return tail

    # --- serialisation ---
    def to_flat_buffer(self) -> tuple[bytes, int]:
        """Join all rows, each followed by ``\\n``."""
        buffer = b"".join(bytes(row.raw) + b"\n" for row in self.rows)
        return buffer, len(buffer)

    def load(self, data: bytes) -> None:
        """Replace the contents with the lines of `data`.

        Lines are split on ``\\n``; a ``\\r`` immediately before it is
        dropped. A final newline does not produce an extra empty row.
        """
        self.rows = []
        if data:
            lines = data.split(b"\n")
            if data.endswith(b"\n"):
                lines.pop()
            for line in lines:
                if line.endswith(b"\r"):
                    line = line[:-1]
                self.append(line)
        self.dirty = 0
        logger.debug("Loaded %d rows (%d bytes).", len(self.rows), len(data))
