# cactus/core/Keys.py
"""Logical key events consumed by the editor core."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class Key(Enum):
    CHAR = auto()
    ENTER = auto()
    BACKSPACE = auto()
    DELETE = auto()
    ESCAPE = auto()
    ARROW_LEFT = auto()
    ARROW_RIGHT = auto()
    ARROW_UP = auto()
    ARROW_DOWN = auto()
    HOME = auto()
    END = auto()
    PAGE_UP = auto()
    PAGE_DOWN = auto()
    QUIT = auto()
    SAVE = auto()
    FIND = auto()
    REFRESH = auto()
    RESIZE = auto()


ARROW_KEYS = frozenset({Key.ARROW_LEFT, Key.ARROW_RIGHT, Key.ARROW_UP, Key.ARROW_DOWN})


@dataclass(frozen=True)
class KeyEvent:
    """A decoded key press. `byte` is set only for ``Key.CHAR``."""

    key: Key
    byte: Optional[int] = None

    @classmethod
    def char(cls, byte: int) -> "KeyEvent":
        return cls(Key.CHAR, byte)
