"""zeptex: a minimal line-command text editor for raw-mode terminals."""

import logging

from zeptex.buffer import LineBuffer, load_lines, save_lines
from zeptex.commands import (
    Append,
    Command,
    CommandError,
    Delete,
    Insert,
    Quit,
    Write,
    parse_command,
)
from zeptex.config import EditorSettings, load_settings
from zeptex.editor import Editor, EditorState, dispatch
from zeptex.input import InputEvent, InputReader, PendingCommand
from zeptex.render import render_frame
from zeptex.terminal import ProcessTerminal, ResizeSignal, Terminal, TerminalSetupError
from zeptex.viewport import ScrollState

__version__ = "1.0.0"

# The screen belongs to the editor; log records only go where the CLI sends them.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Append",
    "Command",
    "CommandError",
    "Delete",
    "Editor",
    "EditorSettings",
    "EditorState",
    "InputEvent",
    "InputReader",
    "Insert",
    "LineBuffer",
    "PendingCommand",
    "ProcessTerminal",
    "Quit",
    "ResizeSignal",
    "ScrollState",
    "Terminal",
    "TerminalSetupError",
    "Write",
    "dispatch",
    "load_lines",
    "load_settings",
    "parse_command",
    "render_frame",
    "save_lines",
]
