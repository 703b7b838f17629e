"""CLI entry point: a small echo REPL driven by the line editor."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from typing import TextIO

from termline.config import EditorConfig
from termline.line_editor import LineEditor
from termline.terminal import ProcessTerminal, Terminal, TerminalError

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="termline",
        description="Read lines with in-place editing and history, echoing each one back",
    )
    parser.add_argument("--prompt", default="> ", help="Prompt to show (default: '> ')")
    parser.add_argument("--history-size", type=int, default=None, help="Number of lines kept in history")
    parser.add_argument("--log-level", default="warning", choices=["debug", "info", "warning", "error"])
    parser.add_argument("--log-file", default=None, help="Write log records to this file")
    return parser.parse_args(argv)


def run_repl(editor: LineEditor, terminal: Terminal, prompt: str) -> int:
    """Echo every committed line until end of input. Returns the line count."""
    count = 0
    while (line := editor.read_line(prompt)) is not None:
        count += 1
        terminal.set_foreground_color("cyan")
        terminal.write(f"----> [{line}]")
        terminal.reset_color()
        terminal.write_line()
    return count


def echo_piped(stdin: TextIO, stdout: TextIO) -> int:
    """Echo lines read from a non-interactive stdin."""
    count = 0
    for raw in stdin:
        count += 1
        line = raw.rstrip("\r\n")
        stdout.write(f"----> [{line}]\n")
    return count


def configure_logging(level: str, log_file: str | None, interactive: bool) -> None:
    """Send log records to *log_file*, or to stderr when not editing a line.

    An interactive session without a log file discards records.
    """
    if log_file is None and interactive:
        logging.getLogger("termline").addHandler(logging.NullHandler())
        return

    log_config: dict[str, object] = {
        "level": getattr(logging, level.upper()),
        "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    }
    if log_file:
        log_config["filename"] = log_file
    logging.basicConfig(**log_config)  # type: ignore[arg-type]


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    interactive = sys.stdin.isatty()
    configure_logging(args.log_level, args.log_file, interactive)

    try:
        config = EditorConfig.from_env()
        if args.history_size is not None:
            config = dataclasses.replace(config, history_size=args.history_size)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    if not interactive:
        count = echo_piped(sys.stdin, sys.stdout)
        logger.info("echoed %d piped line(s)", count)
        return 0

    terminal = ProcessTerminal(write_log=config.write_log)
    editor = LineEditor(terminal, config)
    try:
        with terminal:
            count = run_repl(editor, terminal, args.prompt)
    except TerminalError as exc:
        logger.error("terminal failure: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print(file=sys.stderr)
        return 130

    logger.info("read %d line(s)", count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
