"""Viewport arithmetic: which slice of the buffer is on screen.

The functions are pure; :class:`ScrollState` wraps them around the single
mutable offset the editor keeps.  Every function returns an offset satisfying
``0 <= offset <= max(0, line_count - usable_rows)``.
"""

from __future__ import annotations

from dataclasses import dataclass

# Title, blank line, blank line, command bar, prompt.
CHROME_ROWS = 5


def usable_rows(terminal_rows: int) -> int:
    """Rows left for buffer lines once the fixed chrome is drawn."""
    return max(terminal_rows - CHROME_ROWS, 1)


def max_offset(line_count: int, rows: int) -> int:
    return max(line_count - rows, 0)


def clamp(offset: int, line_count: int, rows: int) -> int:
    return max(min(offset, max_offset(line_count, rows)), 0)


def scroll_to_reveal(target_line: int, offset: int, line_count: int, rows: int) -> int:
    """Move the window down just far enough for 1-based *target_line* to show."""
    if target_line > offset + rows:
        offset = target_line - rows
    return clamp(offset, line_count, rows)


def scroll_up(offset: int) -> int:
    return max(offset - 1, 0)


def scroll_down(offset: int, line_count: int, rows: int) -> int:
    return max(min(offset + 1, max_offset(line_count, rows)), 0)


def pull_back(offset: int, line_count: int) -> int:
    """Keep the first visible row inside the buffer after a deletion."""
    if offset > 0 and offset >= line_count:
        return line_count - 1 if line_count else 0
    return offset


@dataclass
class ScrollState:
    """0-based index of the first buffer line in the viewport."""

    offset: int = 0

    def clamp(self, line_count: int, terminal_rows: int) -> int:
        self.offset = clamp(self.offset, line_count, usable_rows(terminal_rows))
        return self.offset

    def reveal(self, target_line: int, line_count: int, terminal_rows: int) -> int:
        self.offset = scroll_to_reveal(
            target_line, self.offset, line_count, usable_rows(terminal_rows)
        )
        return self.offset

    def up(self) -> int:
        self.offset = scroll_up(self.offset)
        return self.offset

    def down(self, line_count: int, terminal_rows: int) -> int:
        self.offset = scroll_down(self.offset, line_count, usable_rows(terminal_rows))
        return self.offset

    def after_delete(self, line_count: int, terminal_rows: int) -> int:
        self.offset = pull_back(self.offset, line_count)
        return self.clamp(line_count, terminal_rows)
