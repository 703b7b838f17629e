"""Terminal abstraction for blocking key-at-a-time interaction.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal``
implementation that puts a POSIX tty into cbreak mode, decodes key presses,
queries the cursor position, and positions/colors output via ANSI escape
sequences.
"""

from __future__ import annotations

import codecs
import logging
import os
import re
import select
import sys
import termios
import tty
from collections import deque
from typing import Literal, Protocol, TextIO

from termline.keys import KeyEvent, parse_key_event
from termline.stdin_buffer import StdinBuffer

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_QUERY_CURSOR_POSITION = "\x1b[6n"
# Also the shape of a modified F3 press (ESC[1;5R is Ctrl+F3), so while a
# report is awaited the last match in a chunk is taken as the reply.
_CURSOR_POSITION_RE = re.compile(r"^\x1b\[(\d+);(\d+)R$")
_SET_CURSOR_FMT = "\x1b[{};{}H"
_SET_FOREGROUND_FMT = "\x1b[{}m"
_RESET_FOREGROUND = "\x1b[39m"

# Seconds to wait for the rest of an escape sequence before treating what
# arrived as complete (a lone ESC becomes the Escape key).
_ESCAPE_TIMEOUT = 0.05
_CURSOR_REPORT_TIMEOUT = 1.0

Color = Literal[
    "default",
    "black",
    "red",
    "green",
    "yellow",
    "blue",
    "magenta",
    "cyan",
    "white",
    "bright_black",
    "bright_red",
    "bright_green",
    "bright_yellow",
    "bright_blue",
    "bright_magenta",
    "bright_cyan",
    "bright_white",
]

FOREGROUND_CODES: dict[str, int] = {
    "default": 39,
    "black": 30,
    "red": 31,
    "green": 32,
    "yellow": 33,
    "blue": 34,
    "magenta": 35,
    "cyan": 36,
    "white": 37,
    "bright_black": 90,
    "bright_red": 91,
    "bright_green": 92,
    "bright_yellow": 93,
    "bright_blue": 94,
    "bright_magenta": 95,
    "bright_cyan": 96,
    "bright_white": 97,
}


class TerminalError(Exception):
    """The underlying terminal could not be read from or written to."""


def foreground_sequence(color: str) -> str:
    """Return the SGR sequence selecting *color* as the foreground."""
    try:
        code = FOREGROUND_CODES[color]
    except KeyError:
        raise ValueError(f"unknown color: {color!r}") from None
    return _SET_FOREGROUND_FMT.format(code)


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface the line editor needs from a terminal.

    Rows and columns are 0-based screen coordinates. ``read_key_event``
    blocks until a key is pressed and raises ``EOFError`` once input is
    exhausted.
    """

    def read_key_event(self, intercept: bool = True) -> KeyEvent: ...

    def write(self, text: str) -> None: ...

    def write_line(self, text: str = "") -> None: ...

    @property
    def cursor_row(self) -> int: ...

    @property
    def buffer_width(self) -> int: ...

    @property
    def window_height(self) -> int: ...

    def set_cursor_position(self, col: int, row: int) -> None: ...

    def set_foreground_color(self, color: Color) -> None: ...

    def reset_color(self) -> None: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Concrete terminal implementation backed by a tty file descriptor.

    Between :meth:`start` and :meth:`stop` the tty is in cbreak mode: input
    is delivered per key without echo, while signal keys such as Ctrl+C keep
    working. Every OS-level failure surfaces as :class:`TerminalError`.
    """

    def __init__(
        self,
        stdin_fd: int | None = None,
        stdout: TextIO | None = None,
        write_log: str = "",
    ) -> None:
        self._fd = sys.stdin.fileno() if stdin_fd is None else stdin_fd
        self._stdout = sys.stdout if stdout is None else stdout
        self._write_log_path = write_log
        self._original_termios: list | None = None
        self._stdin_buffer = StdinBuffer()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending: deque[str] = deque()
        self._eof = False

    # -- start / stop -------------------------------------------------------

    def start(self) -> None:
        """Save the tty attributes and switch to cbreak mode."""
        if self._original_termios is not None:
            return
        try:
            self._original_termios = termios.tcgetattr(self._fd)
            tty.setcbreak(self._fd)
        except (termios.error, OSError) as exc:
            self._original_termios = None
            raise TerminalError(f"cannot configure terminal: {exc}") from exc
        logger.debug("terminal started in cbreak mode (fd=%d)", self._fd)

    def stop(self) -> None:
        """Restore the tty attributes saved by :meth:`start`."""
        if self._original_termios is None:
            return
        try:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._original_termios)
        except (termios.error, OSError) as exc:
            raise TerminalError(f"cannot restore terminal: {exc}") from exc
        finally:
            self._original_termios = None
        logger.debug("terminal restored")

    def __enter__(self) -> ProcessTerminal:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    # -- properties ---------------------------------------------------------

    @property
    def buffer_width(self) -> int:
        try:
            return os.get_terminal_size(self._stdout.fileno()).columns
        except (ValueError, OSError):
            return 80

    @property
    def window_height(self) -> int:
        try:
            return os.get_terminal_size(self._stdout.fileno()).lines
        except (ValueError, OSError):
            return 24

    @property
    def cursor_row(self) -> int:
        """Ask the terminal where the cursor is (Device Status Report)."""
        self.write(_QUERY_CURSOR_POSITION)
        while True:
            sequences = self._read_sequences(timeout=_CURSOR_REPORT_TIMEOUT)
            if sequences is None:
                raise TerminalError("terminal did not report the cursor position")
            for index in reversed(range(len(sequences))):
                match = _CURSOR_POSITION_RE.match(sequences[index])
                if match:
                    self._pending.extend(sequences[:index])
                    self._pending.extend(sequences[index + 1 :])
                    return int(match.group(1)) - 1
            self._pending.extend(sequences)

    # -- input --------------------------------------------------------------

    def read_key_event(self, intercept: bool = True) -> KeyEvent:
        """Block until a key is pressed and return it.

        With ``intercept=False`` the key's character is echoed.
        """
        while True:
            while not self._pending:
                sequences = self._read_sequences()
                if sequences is None:
                    raise EOFError
                self._pending.extend(sequences)

            sequence = self._pending.popleft()
            event = parse_key_event(sequence)
            if event is None:
                logger.debug("ignoring undecodable input %r", sequence)
                continue
            if not intercept and event.is_printable:
                self.write(event.character)
            return event

    def _read_sequences(self, timeout: float | None = None) -> list[str] | None:
        """Read one chunk and return the complete sequences it finished.

        Returns ``None`` at end of input, or when *timeout* elapses first.
        """
        if self._eof:
            return None
        if timeout is not None and not self._wait_readable(timeout):
            return None

        try:
            raw = os.read(self._fd, 4096)
        except InterruptedError:
            return []
        except OSError as exc:
            raise TerminalError(f"cannot read from terminal: {exc}") from exc

        if not raw:
            self._eof = True
            return self._stdin_buffer.flush() or None

        sequences = self._stdin_buffer.feed(self._decoder.decode(raw))
        # A partial escape sequence is complete if nothing follows it quickly
        while self._stdin_buffer.pending:
            if not self._wait_readable(_ESCAPE_TIMEOUT):
                sequences.extend(self._stdin_buffer.flush())
                break
            try:
                raw = os.read(self._fd, 4096)
            except OSError as exc:
                raise TerminalError(f"cannot read from terminal: {exc}") from exc
            if not raw:
                self._eof = True
                sequences.extend(self._stdin_buffer.flush())
                break
            sequences.extend(self._stdin_buffer.feed(self._decoder.decode(raw)))
        return sequences

    def _wait_readable(self, timeout: float) -> bool:
        try:
            readable, _, _ = select.select([self._fd], [], [], timeout)
        except (OSError, ValueError) as exc:
            raise TerminalError(f"cannot poll terminal: {exc}") from exc
        return bool(readable)

    # -- output -------------------------------------------------------------

    def write(self, text: str) -> None:
        """Write text to the output stream and optionally to the write log."""
        try:
            self._stdout.write(text)
            self._stdout.flush()
        except OSError as exc:
            raise TerminalError(f"cannot write to terminal: {exc}") from exc

        if self._write_log_path:
            try:
                with open(self._write_log_path, "a") as f:
                    f.write(text)
            except OSError:
                logger.warning("cannot append to write log %s", self._write_log_path)
                self._write_log_path = ""

    def write_line(self, text: str = "") -> None:
        self.write(text + "\n")

    # -- cursor / color -----------------------------------------------------

    def set_cursor_position(self, col: int, row: int) -> None:
        self.write(_SET_CURSOR_FMT.format(max(row, 0) + 1, max(col, 0) + 1))

    def set_foreground_color(self, color: Color) -> None:
        self.write(foreground_sequence(color))

    def reset_color(self) -> None:
        self.write(_RESET_FOREGROUND)
