# cactus/core/Prompt.py
"""cactus.core.Prompt
====================

Single-line input collected on the message line.

`LinePrompt` is fed one `KeyEvent` at a time by the controller's main
loop instead of running its own input loop, so the screen keeps being
redrawn between keys and the caller can react to every keystroke (the
incremental search does exactly that).
"""

from enum import Enum, auto

from cactus.core.Keys import Key, KeyEvent


class PromptStatus(Enum):
    ACTIVE = auto()
    CONFIRMED = auto()
    CANCELLED = auto()


class LinePrompt:
    """Editable byte buffer with Enter/Escape handling.

    Args:
        template: Message shown while the prompt is active; ``{}`` is
            replaced by the current input.
        encoding: Used to decode the input for display.
    """

    def __init__(self, template: str, encoding: str = "utf-8") -> None:
        self.template = template
        self.encoding = encoding
        self.buffer = bytearray()
        self.status = PromptStatus.ACTIVE

    @property
    def text(self) -> str:
        return self.buffer.decode(self.encoding, errors="replace")

    @property
    def message(self) -> str:
        return self.template.format(self.text)

    def feed(self, event: KeyEvent) -> PromptStatus:
        """Apply one key to the prompt and return the resulting status.

        Enter confirms only a non-empty input. Escape cancels. Backspace and
        Delete remove the last byte. Other printable bytes are appended;
        every other key leaves the input unchanged.
        """
        if self.status is not PromptStatus.ACTIVE:
            return self.status

        if event.key == Key.ESCAPE:
            self.status = PromptStatus.CANCELLED
        elif event.key == Key.ENTER:
            if self.buffer:
                self.status = PromptStatus.CONFIRMED
        elif event.key in (Key.BACKSPACE, Key.DELETE):
            if self.buffer:
                del self.buffer[-1]
        elif event.key == Key.CHAR and event.byte is not None:
            if event.byte >= 32 and event.byte != 127:
                self.buffer.append(event.byte)
        return self.status
