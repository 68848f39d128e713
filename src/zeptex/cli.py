"""CLI entry point for zeptex. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import sys

import click

from zeptex import __version__
from zeptex.buffer import LineBuffer, load_lines
from zeptex.config import LOG_LEVELS, EditorSettings, load_settings
from zeptex.editor import Editor, EditorState
from zeptex.input import PendingCommand
from zeptex.terminal import ProcessTerminal, TerminalSetupError

logger = logging.getLogger(__name__)


def configure_logging(settings: EditorSettings) -> None:
    """Send log records to the configured file, or nowhere.

    The editor owns the screen, so there is never a console handler.
    """
    if not settings.log_file:
        return
    logging.basicConfig(
        filename=settings.log_file,
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_state(filename: str | None, settings: EditorSettings) -> EditorState:
    lines: list[str] = []
    if filename:
        lines = load_lines(
            filename,
            max_lines=settings.max_lines,
            max_line_length=settings.max_line_length,
        )
    return EditorState(
        buffer=LineBuffer(lines, capacity=settings.max_lines),
        pending=PendingCommand(settings.max_line_length),
        filename=filename,
    )


@click.command()
@click.argument("filename", required=False, type=click.Path(dir_okay=False))
@click.option("--log-file", type=click.Path(dir_okay=False), default=None, help="Write debug logs to this file")
@click.option("--log-level", type=click.Choice(LOG_LEVELS), default=None, help="Log level (default: warning)")
@click.version_option(__version__, prog_name="zeptex")
def main(filename, log_file, log_level):
    """Edit FILENAME one line command at a time.

    At the ':' prompt: i N TEXT inserts, a TEXT appends, d N deletes,
    w [FILE] saves and q quits. Arrow up/down scroll the view.
    """
    settings = load_settings()
    if log_file:
        settings.log_file = log_file
    if log_level:
        settings.log_level = log_level
    configure_logging(settings)

    state = build_state(filename, settings)

    try:
        with ProcessTerminal() as terminal:
            Editor(terminal, state, title=settings.title).run()
    except TerminalSetupError as e:
        logger.error("terminal setup failed: %s", e)
        click.echo(f"zeptex: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
