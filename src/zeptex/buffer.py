"""Line buffer with 1-based addressing, plus plain-text load/save helpers.

Every mutating operation reports whether it changed anything.  The editor
never surfaces a failed insert or delete to the user, but the boolean result
lets callers (and tests) tell a silent no-op from a success.
"""

from __future__ import annotations

import logging
from typing import Iterable

logger = logging.getLogger(__name__)

DEFAULT_MAX_LINES = 1000
DEFAULT_MAX_LINE_LENGTH = 1023


class LineBuffer:
    """Ordered, bounded sequence of text lines.

    Indices passed in and out are 1-based; storage is a plain 0-based list.
    """

    def __init__(
        self,
        lines: Iterable[str] | None = None,
        *,
        capacity: int = DEFAULT_MAX_LINES,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._lines: list[str] = []
        if lines is not None:
            for line in lines:
                if not self.append(line):
                    break

    # -- properties ---------------------------------------------------------

    @property
    def count(self) -> int:
        return len(self._lines)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def lines(self) -> list[str]:
        """A copy of the stored lines, in order."""
        return list(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    # -- queries ------------------------------------------------------------

    def line_at(self, index: int) -> str | None:
        """Return the line at 1-based *index*, or ``None`` when out of range."""
        if 1 <= index <= len(self._lines):
            return self._lines[index - 1]
        return None

    # -- mutation -----------------------------------------------------------

    def insert(self, index: int, text: str) -> bool:
        """Insert *text* so that it becomes line *index*.

        Valid positions are ``1 .. count + 1``; the buffer must not be full.
        Returns ``False`` (and leaves the buffer untouched) otherwise.
        """
        if len(self._lines) >= self._capacity:
            logger.debug("insert at %d ignored: buffer full (%d lines)", index, self._capacity)
            return False
        if not 1 <= index <= len(self._lines) + 1:
            logger.debug("insert at %d ignored: %d lines in buffer", index, len(self._lines))
            return False
        self._lines.insert(index - 1, text)
        return True

    def append(self, text: str) -> bool:
        return self.insert(len(self._lines) + 1, text)

    def delete(self, index: int) -> bool:
        """Remove line *index* (``1 .. count``). Returns ``False`` when out of range."""
        if not 1 <= index <= len(self._lines):
            logger.debug("delete of %d ignored: %d lines in buffer", index, len(self._lines))
            return False
        del self._lines[index - 1]
        return True


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def load_lines(
    path: str,
    *,
    max_lines: int = DEFAULT_MAX_LINES,
    max_line_length: int = DEFAULT_MAX_LINE_LENGTH,
) -> list[str]:
    """Read *path* as one buffer line per text line.

    A missing file gives an empty list.  Lines past *max_lines* are dropped and
    each line is cut to *max_line_length* characters.
    """
    lines: list[str] = []
    dropped = 0
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            for raw in f:
                if len(lines) >= max_lines:
                    dropped += 1
                    continue
                lines.append(raw.rstrip("\n")[:max_line_length])
    except FileNotFoundError:
        logger.info("%s does not exist, starting with an empty buffer", path)
        return []
    except OSError as exc:
        logger.warning("could not read %s: %s", path, exc)
        return []

    if dropped:
        logger.warning("%s: dropped %d lines past the %d-line limit", path, dropped, max_lines)
    logger.info("loaded %d lines from %s", len(lines), path)
    return lines


def save_lines(path: str, lines: Iterable[str]) -> bool:
    """Write *lines* to *path*, each newline-terminated. Returns success."""
    try:
        with open(path, "w", encoding="utf-8") as f:
            for line in lines:
                f.write(f"{line}\n")
    except OSError as exc:
        logger.warning("could not write %s: %s", path, exc)
        return False
    logger.info("saved buffer to %s", path)
    return True
