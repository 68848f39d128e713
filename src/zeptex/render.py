"""Full-screen frame rendering.

``render_frame`` is a pure function of the buffer, the scroll offset, the
terminal size and the prompt text.  Every frame repaints the whole screen:
clear + home, title, visible lines, command bar, prompt.
"""

from __future__ import annotations

from typing import Sequence

from zeptex.terminal import CLEAR_SCREEN
from zeptex.utils import sanitize, truncate_to_width, visible_width
from zeptex.viewport import usable_rows

DEFAULT_TITLE = "ZEPTEX EDITOR version 1.0"
PROMPT = ": "
EMPTY_ROW = "~"
NEWLINE = "\r\n"

_BOLD_WHITE = "\x1b[1;97m"
_RESET = "\x1b[0m"

COMMAND_HINTS = (
    "i N TEXT -- insert line|",
    "a TEXT -- append line|",
    "d N -- delete line|",
    "↑/↓ scroll|",
    "w <filename> -- save|",
    "q -- Quit|",
)


def _styled(text: str) -> str:
    return f"{_BOLD_WHITE}{text}{_RESET}"


def render_title(title: str, columns: int) -> str:
    padding = max((columns - visible_width(title)) // 2, 0)
    return " " * padding + _styled(truncate_to_width(title, columns))


def render_line(number: int, text: str, columns: int) -> str:
    return truncate_to_width(f"{number:3d} | {sanitize(text)}", columns)


def render_command_bar(columns: int, hints: Sequence[str] = COMMAND_HINTS) -> str:
    """Spread the hints across the row with equal gaps.

    Hints that would run past the right edge are cut so the bar never wraps.
    """
    total = sum(visible_width(h) for h in hints)
    spaces = columns - total
    gap = spaces // (len(hints) - 1) if spaces > 0 else 1

    parts: list[str] = []
    used = 0
    for i, hint in enumerate(hints):
        if i:
            if used + gap >= columns:
                break
            parts.append(" " * gap)
            used += gap
        piece = truncate_to_width(hint, columns - used)
        if not piece:
            break
        parts.append(_styled(piece))
        used += visible_width(piece)
    return "".join(parts)


def render_prompt(text: str, columns: int) -> str:
    room = columns - len(PROMPT)
    if room > 0 and visible_width(text) > room:
        text = text[-room:]
    return PROMPT + text


def render_frame(
    lines: Sequence[str],
    offset: int,
    rows: int,
    columns: int,
    prompt_text: str = "",
    title: str = DEFAULT_TITLE,
) -> str:
    """Build the escape-sequence string that paints one complete frame."""
    out = [CLEAR_SCREEN, render_title(title, columns), NEWLINE, NEWLINE]

    for i in range(usable_rows(rows)):
        index = offset + i
        if 0 <= index < len(lines):
            out.append(render_line(index + 1, lines[index], columns))
        else:
            out.append(EMPTY_ROW)
        out.append(NEWLINE)

    out.append(NEWLINE)
    out.append(render_command_bar(columns))
    out.append(NEWLINE)
    out.append(render_prompt(prompt_text, columns))
    return "".join(out)
