"""Keystroke state machine: raw bytes in, prompt-editing events out.

``InputReader`` pulls one byte at a time from a :class:`~zeptex.terminal.Terminal`
and folds it into the :class:`PendingCommand`.  Escape sequences are read
eagerly (two more bytes) and only the up/down arrows mean anything.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from zeptex.buffer import DEFAULT_MAX_LINE_LENGTH

if TYPE_CHECKING:
    from zeptex.terminal import Terminal

ESC = 0x1B
BACKSPACE_KEYS = (0x7F, 0x08)
ENTER_KEYS = (0x0D, 0x0A)

EventKind = Literal["submit", "scroll_up", "scroll_down", "edit", "ignored"]


class PendingCommand:
    """Characters typed at the prompt since the last Enter."""

    def __init__(self, max_length: int = DEFAULT_MAX_LINE_LENGTH) -> None:
        self.max_length = max_length
        self._chars: list[str] = []

    @property
    def text(self) -> str:
        return "".join(self._chars)

    def __len__(self) -> int:
        return len(self._chars)

    def push(self, ch: str) -> bool:
        if len(self._chars) >= self.max_length:
            return False
        self._chars.append(ch)
        return True

    def backspace(self) -> bool:
        if not self._chars:
            return False
        self._chars.pop()
        return True

    def take(self) -> str:
        """Return the current text and reset to empty."""
        text = self.text
        self._chars.clear()
        return text

    def clear(self) -> None:
        self._chars.clear()


@dataclass(frozen=True)
class InputEvent:
    kind: EventKind
    text: str = ""


SCROLL_UP = InputEvent("scroll_up")
SCROLL_DOWN = InputEvent("scroll_down")
EDIT = InputEvent("edit")
IGNORED = InputEvent("ignored")

_ARROWS = {ord("A"): SCROLL_UP, ord("B"): SCROLL_DOWN}


class InputReader:
    def __init__(self, terminal: Terminal, pending: PendingCommand) -> None:
        self._terminal = terminal
        self.pending = pending

    def read_event(self) -> InputEvent | None:
        """Read one keystroke and return the event it produces.

        ``None`` means the read was interrupted before a whole keystroke was
        available; nothing was consumed into the pending command.
        """
        byte = self._terminal.read_byte()
        if byte is None:
            return None
        if byte == ESC:
            return self._read_escape()
        return self.feed(byte)

    def feed(self, byte: int) -> InputEvent:
        """Apply a single non-escape byte to the pending command."""
        if byte in ENTER_KEYS:
            return InputEvent("submit", self.pending.take())
        if byte in BACKSPACE_KEYS:
            self.pending.backspace()
            return EDIT
        if 0x20 <= byte <= 0x7E:
            self.pending.push(chr(byte))
            return EDIT
        return IGNORED

    def _read_escape(self) -> InputEvent | None:
        first = self._terminal.read_byte()
        if first is None:
            return None
        second = self._terminal.read_byte()
        if second is None:
            return None
        if first == ord("["):
            return _ARROWS.get(second, IGNORED)
        return IGNORED
