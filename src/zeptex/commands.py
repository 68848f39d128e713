"""Parse a submitted prompt line into a typed editor command.

Grammar (the payload after the first delimiting space is kept verbatim)::

    q                   quit
    i <n> <text>        insert text so it becomes line n
    a <text>            append text as the last line
    d <n>               delete line n
    w [<filename>]      save, to the startup file when no name is given

Malformed ``i``/``a`` commands yield a :class:`CommandError`; anything else
that does not fit the grammar yields ``None`` and is ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

INSERT_SYNTAX_ERROR = "Invalid insert syntax. Use: i <line> <text>"
INVALID_LINE_NUMBER = "Invalid line number. Use: i <line> <text>"
APPEND_SYNTAX_ERROR = "Invalid append syntax. Use: a <text>"
NOTHING_TO_APPEND = "No text to append. Use: a <text>"

# Leading-integer prefix, the way C's atoi reads it.
_ATOI_RE = re.compile(r"\s*([+-]?\d+)")
_DELETE_RE = re.compile(r"d\s*([+-]?\d+)")


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class Insert:
    line: int
    text: str


@dataclass(frozen=True)
class Append:
    text: str


@dataclass(frozen=True)
class Delete:
    line: int


@dataclass(frozen=True)
class Write:
    filename: str | None = None


@dataclass(frozen=True)
class CommandError:
    """A malformed command; *message* is shown in place of the prompt."""

    message: str


Command = Union[Quit, Insert, Append, Delete, Write]


def _atoi(token: str) -> int:
    match = _ATOI_RE.match(token)
    return int(match.group(1)) if match else 0


def _parse_insert(line: str) -> Insert | CommandError:
    if line[1:2] != " ":
        return CommandError(INSERT_SYNTAX_ERROR)
    rest = line[2:]
    number, sep, text = rest.partition(" ")
    if not sep:
        return CommandError(INSERT_SYNTAX_ERROR)
    line_no = _atoi(number)
    if line_no <= 0:
        return CommandError(INVALID_LINE_NUMBER)
    return Insert(line_no, text)


def _parse_append(line: str) -> Append | CommandError:
    if line[1:2] != " ":
        return CommandError(APPEND_SYNTAX_ERROR)
    text = line[2:]
    if not text:
        return CommandError(NOTHING_TO_APPEND)
    return Append(text)


def _parse_delete(line: str) -> Delete | None:
    match = _DELETE_RE.match(line)
    if match is None:
        return None
    return Delete(int(match.group(1)))


def _parse_write(line: str) -> Write | None:
    if line == "w":
        return Write()
    if line.startswith("w "):
        payload = line[2:]
        return Write(payload if payload.strip() else None)
    return None


def parse_command(line: str) -> Command | CommandError | None:
    """Turn a completed prompt line into a command, an error, or ``None``."""
    if line == "q":
        return Quit()
    if not line:
        return None

    head = line[0]
    if head == "i":
        return _parse_insert(line)
    if head == "a":
        return _parse_append(line)
    if head == "d":
        return _parse_delete(line)
    if head == "w":
        return _parse_write(line)
    return None
