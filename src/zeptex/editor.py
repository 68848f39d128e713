"""Editor state and the interactive loop.

``EditorState`` bundles everything a session mutates (buffer, scroll offset,
pending prompt text, the last error message) so parsing, dispatch and
rendering can be exercised without a real terminal.  ``Editor`` drives the
loop against any :class:`~zeptex.terminal.Terminal`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from zeptex.buffer import LineBuffer, save_lines
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
from zeptex.input import InputEvent, InputReader, PendingCommand
from zeptex.render import DEFAULT_TITLE, render_frame
from zeptex.terminal import Terminal
from zeptex.viewport import ScrollState

logger = logging.getLogger(__name__)


@dataclass
class EditorState:
    buffer: LineBuffer = field(default_factory=LineBuffer)
    scroll: ScrollState = field(default_factory=ScrollState)
    pending: PendingCommand = field(default_factory=PendingCommand)
    filename: str | None = None
    message: str | None = None
    running: bool = True

    @property
    def prompt_text(self) -> str:
        return self.message if self.message is not None else self.pending.text


def dispatch(state: EditorState, command: Command | CommandError | None, rows: int) -> bool:
    """Apply a parsed command to *state*.

    *rows* is the current terminal height, used to keep the viewport valid.
    Returns ``True`` when the command did something, ``False`` for a no-op.
    """
    buffer = state.buffer

    if command is None:
        return False

    if isinstance(command, CommandError):
        logger.debug("command error: %s", command.message)
        state.message = command.message
        return False

    if isinstance(command, Quit):
        state.running = False
        return True

    if isinstance(command, Insert):
        if buffer.insert(command.line, command.text):
            state.scroll.reveal(command.line, buffer.count, rows)
            return True
        state.scroll.clamp(buffer.count, rows)
        return False

    if isinstance(command, Append):
        if buffer.append(command.text):
            state.scroll.reveal(buffer.count, buffer.count, rows)
            return True
        return False

    if isinstance(command, Delete):
        done = buffer.delete(command.line)
        state.scroll.after_delete(buffer.count, rows)
        return done

    if isinstance(command, Write):
        target = command.filename or state.filename
        if target is None:
            logger.debug("write ignored: no file name")
            return False
        return save_lines(target, buffer.lines)

    raise TypeError(f"unknown command: {command!r}")


class Editor:
    """Runs the read / dispatch / redraw cycle until ``q`` is submitted."""

    def __init__(
        self,
        terminal: Terminal,
        state: EditorState | None = None,
        *,
        title: str = DEFAULT_TITLE,
    ) -> None:
        self.terminal = terminal
        self.state = state if state is not None else EditorState()
        self.title = title
        self.reader = InputReader(terminal, self.state.pending)

    # -- rendering ----------------------------------------------------------

    def redraw(self) -> None:
        rows = self.terminal.rows
        self.state.scroll.clamp(self.state.buffer.count, rows)
        self.terminal.write(
            render_frame(
                self.state.buffer.lines,
                self.state.scroll.offset,
                rows,
                self.terminal.columns,
                prompt_text=self.state.prompt_text,
                title=self.title,
            )
        )

    def check_resize(self) -> bool:
        """Redraw if a resize arrived since the last check."""
        if not self.terminal.resize.consume():
            return False
        logger.debug("resize to %dx%d", self.terminal.columns, self.terminal.rows)
        self.redraw()
        return True

    # -- events -------------------------------------------------------------

    def handle_event(self, event: InputEvent) -> None:
        state = self.state
        state.message = None

        if event.kind == "submit":
            dispatch(state, parse_command(event.text), self.terminal.rows)
            if not state.running:
                return
        elif event.kind == "scroll_up":
            state.scroll.up()
        elif event.kind == "scroll_down":
            state.scroll.down(state.buffer.count, self.terminal.rows)

        self.redraw()

    def step(self) -> bool:
        """Process one keystroke (or interruption). Returns ``False`` when done."""
        self.check_resize()
        try:
            event = self.reader.read_event()
        except EOFError:
            logger.info("input closed, leaving editor")
            self.state.running = False
            return False

        if event is None:
            self.check_resize()
        else:
            self.handle_event(event)
        return self.state.running

    def run(self) -> None:
        self.redraw()
        while self.step():
            pass
