"""Terminal abstraction for unbuffered, unechoed single-byte interaction.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal`` that owns
the process-wide terminal state: non-canonical mode, the alternate screen,
cursor visibility, and SIGWINCH-based resize detection.  ``ProcessTerminal``
is a context manager; leaving the ``with`` block restores everything on every
exit path.
"""

from __future__ import annotations

import logging
import os
import select
import signal
import sys
import termios
import tty
from typing import Protocol, TextIO

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

ALT_SCREEN_ENABLE = "\x1b[?1049h"
ALT_SCREEN_DISABLE = "\x1b[?1049l"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
CLEAR_SCREEN = "\x1b[H\x1b[J"

_DEFAULT_ROWS = 24
_DEFAULT_COLUMNS = 80


class TerminalSetupError(RuntimeError):
    """The terminal could not be put into (or taken out of) editing mode."""


# ---------------------------------------------------------------------------
# Resize flag
# ---------------------------------------------------------------------------


class ResizeSignal:
    """Coalesced "terminal size changed" flag.

    :meth:`set` is the only thing the signal handler calls; it assigns one
    attribute and nothing else.  Several resizes before :meth:`consume`
    collapse into a single redraw.
    """

    __slots__ = ("_pending",)

    def __init__(self) -> None:
        self._pending = False

    def set(self) -> None:
        self._pending = True

    @property
    def is_set(self) -> bool:
        return self._pending

    def consume(self) -> bool:
        """Clear the flag, returning whether it was set."""
        pending = self._pending
        self._pending = False
        return pending


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface the editor loop needs from a terminal."""

    resize: ResizeSignal

    @property
    def rows(self) -> int: ...

    @property
    def columns(self) -> int: ...

    def read_byte(self) -> int | None:
        """Block for one input byte.

        Returns ``None`` when the wait was interrupted by a signal (the caller
        should check :attr:`resize`).  Raises ``EOFError`` once input is closed.
        """
        ...

    def write(self, data: str) -> None: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Terminal backed by the process's stdin/stdout.

    Input is switched to non-canonical, no-echo mode (``VMIN=1``, ``VTIME=0``)
    via :func:`tty.setcbreak`.  Output post-processing and signal keys stay on.

    Resize notification uses a self-pipe registered with
    :func:`signal.set_wakeup_fd`: the SIGWINCH handler only sets
    :attr:`resize`, and the write to the wakeup pipe makes a blocked
    :meth:`read_byte` return ``None`` so the loop can redraw.
    """

    def __init__(self, stdin_fd: int | None = None, stdout: TextIO | None = None) -> None:
        self.resize = ResizeSignal()
        self._fd = stdin_fd
        self._stdout = stdout if stdout is not None else sys.stdout
        self._original_termios: list | None = None
        self._prev_sigwinch_handler: signal.Handlers | None = None
        self._prev_wakeup_fd: int | None = None
        self._wakeup_r: int | None = None
        self._wakeup_w: int | None = None
        self._screen_active = False

    # -- properties ---------------------------------------------------------

    @property
    def rows(self) -> int:
        try:
            return os.get_terminal_size(self._stdout.fileno()).lines
        except (ValueError, OSError):
            return _DEFAULT_ROWS

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(self._stdout.fileno()).columns
        except (ValueError, OSError):
            return _DEFAULT_COLUMNS

    def _input_fd(self) -> int:
        if self._fd is None:
            try:
                self._fd = sys.stdin.fileno()
            except (ValueError, OSError) as exc:
                raise TerminalSetupError("standard input is not a terminal") from exc
        return self._fd

    # -- context manager ----------------------------------------------------

    def __enter__(self) -> ProcessTerminal:
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    # -- start / stop -------------------------------------------------------

    def start(self) -> None:
        """Enter editing mode. Raises :class:`TerminalSetupError` on failure."""
        fd = self._input_fd()
        if not os.isatty(fd):
            raise TerminalSetupError("standard input is not a terminal")

        try:
            self._original_termios = termios.tcgetattr(fd)
            tty.setcbreak(fd, termios.TCSAFLUSH)
        except termios.error as exc:
            self._original_termios = None
            raise TerminalSetupError(f"cannot configure terminal: {exc}") from exc

        try:
            self._install_resize_handler()
        except (OSError, ValueError) as exc:
            self.stop()
            raise TerminalSetupError(f"cannot install resize handler: {exc}") from exc

        self._raw_write(ALT_SCREEN_ENABLE + HIDE_CURSOR)
        self._screen_active = True
        logger.debug("terminal started (%dx%d)", self.columns, self.rows)

    def stop(self) -> None:
        """Restore the terminal. Safe to call more than once."""
        if self._screen_active:
            self._raw_write(ALT_SCREEN_DISABLE + SHOW_CURSOR)
            self._screen_active = False

        self._remove_resize_handler()

        if self._original_termios is not None:
            try:
                termios.tcsetattr(self._fd, termios.TCSAFLUSH, self._original_termios)
            except termios.error as exc:
                logger.warning("could not restore terminal attributes: %s", exc)
            self._original_termios = None
            logger.debug("terminal restored")

    # -- I/O ----------------------------------------------------------------

    def read_byte(self) -> int | None:
        fd = self._input_fd()
        watched = [fd]
        if self._wakeup_r is not None:
            watched.append(self._wakeup_r)

        readable, _, _ = select.select(watched, [], [])
        if self._wakeup_r is not None and self._wakeup_r in readable:
            self._drain_wakeup()
            return None

        data = os.read(fd, 1)
        if not data:
            raise EOFError("terminal input closed")
        return data[0]

    def write(self, data: str) -> None:
        self._raw_write(data)

    # -- private: resize handling -------------------------------------------

    def _on_sigwinch(self, signum: int, frame: object) -> None:
        self.resize.set()

    def _install_resize_handler(self) -> None:
        self._wakeup_r, self._wakeup_w = os.pipe()
        os.set_blocking(self._wakeup_r, False)
        os.set_blocking(self._wakeup_w, False)
        self._prev_wakeup_fd = signal.set_wakeup_fd(self._wakeup_w)
        self._prev_sigwinch_handler = signal.signal(signal.SIGWINCH, self._on_sigwinch)

    def _remove_resize_handler(self) -> None:
        if self._prev_sigwinch_handler is not None:
            signal.signal(signal.SIGWINCH, self._prev_sigwinch_handler)
            self._prev_sigwinch_handler = None

        if self._prev_wakeup_fd is not None:
            signal.set_wakeup_fd(self._prev_wakeup_fd)
            self._prev_wakeup_fd = None

        for fd in (self._wakeup_r, self._wakeup_w):
            if fd is not None:
                os.close(fd)
        self._wakeup_r = self._wakeup_w = None

    def _drain_wakeup(self) -> None:
        if self._wakeup_r is None:
            return
        while True:
            try:
                if not os.read(self._wakeup_r, 512):
                    return
            except BlockingIOError:
                return

    # -- private: raw write -------------------------------------------------

    def _raw_write(self, data: str) -> None:
        """Write directly to stdout, bypassing buffering."""
        try:
            self._stdout.write(data)
            self._stdout.flush()
        except OSError:
            pass
