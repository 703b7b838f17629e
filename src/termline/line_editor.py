"""LineEditor - reads one line from a terminal with in-place editing.

The editor keeps the line being typed, the cursor offset into it and the
screen geometry needed to repaint a line that wraps over several rows. Key
presses are dispatched through a per-instance binding table; every mutation
repaints the prompt and line from the first row and then places the cursor.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Callable, Mapping

from termline.config import EditorConfig
from termline.history import History
from termline.keybindings import LineAction, LineKeybindingsManager
from termline.keys import KeyEvent
from termline.terminal import Terminal, TerminalError
from termline.utils import visible_width

logger = logging.getLogger(__name__)

KeyHandler = Callable[[], None]


def cursor_position(
    cursor: int,
    prompt_width: int,
    buffer_width: int,
    first_row: int,
) -> tuple[int, int]:
    """Return the ``(row, col)`` screen cell for a line offset.

    The prompt starts at column 0 of *first_row* and the line wraps every
    *buffer_width* columns.
    """
    offset = cursor + prompt_width
    return first_row + offset // buffer_width, offset % buffer_width


class LineEditor:
    """Interactive single-line editor with history.

    One :meth:`read_line` call may be in flight per instance. The history
    outlives individual calls and is shared by all of them.
    """

    def __init__(
        self,
        terminal: Terminal,
        config: EditorConfig | None = None,
        history: History | None = None,
    ) -> None:
        self._terminal = terminal
        self._config = config or EditorConfig()
        self.history = history if history is not None else History(self._config.history_size)
        self._tab = " " * self._config.tab_width
        self._keybindings = LineKeybindingsManager(self._config.keybindings)
        self._handlers = self._build_handlers()

        # Session state, reset by begin()
        self._value: str = ""
        self._cursor: int = 0
        self._prompt: str = ""
        self._prompt_width: int = 0
        self._finished: bool = False
        self._end_of_input: bool = False

        # Geometry: must follow every change of the terminal width
        self._first_row: int = 0
        self._buffer_width: int = 1
        self._max_printed_length: int = 0

    # -- read-only state ----------------------------------------------------

    @property
    def text(self) -> str:
        return self._value

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def prompt(self) -> str:
        return self._prompt

    @property
    def first_row(self) -> int:
        return self._first_row

    @property
    def buffer_width(self) -> int:
        return self._buffer_width

    @property
    def max_printed_length(self) -> int:
        return self._max_printed_length

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def key_bindings(self) -> Mapping[tuple[str, int], KeyHandler]:
        return self._handlers

    @property
    def _printed_length(self) -> int:
        return self._prompt_width + len(self._value)

    # -- binding table ------------------------------------------------------

    def _build_handlers(self) -> Mapping[tuple[str, int], KeyHandler]:
        actions: dict[LineAction, KeyHandler] = {
            "clearLine": self._escape,
            "cursorLineStart": self._home,
            "cursorLineEnd": self._end,
            "cursorLeft": self._left_arrow,
            "cursorRight": self._right_arrow,
            "historyPrevious": self._up_arrow,
            "historyNext": self._down_arrow,
            "deleteCharBackward": self._backspace,
            "deleteCharForward": self._delete,
            "submit": self._enter,
            "tab": self._tab_key,
            "endOfInput": self._end_of_input_key,
        }
        table: dict[tuple[str, int], KeyHandler] = {}
        for key, modifiers, action in self._keybindings.bindings():
            table.setdefault((key, modifiers), actions[action])
        return MappingProxyType(table)

    # -- public API ---------------------------------------------------------

    def read_line(self, prompt: str = "") -> str | None:
        """Read one line, returning ``None`` at end of input.

        Raises :class:`TerminalError` if the terminal fails mid-edit.
        """
        try:
            self.begin(prompt)
            while not self._finished:
                try:
                    event = self._terminal.read_key_event(intercept=True)
                except EOFError:
                    logger.debug("end of input while reading line")
                    self._end_of_input = True
                    break
                self.handle_key(event)
            self._terminal.write_line()
        except OSError as exc:
            raise TerminalError(str(exc)) from exc

        if self._end_of_input:
            return None

        text = self._value
        if text or not self._config.skip_empty_history:
            self.history.add(text)
        return text

    def begin(self, prompt: str = "") -> None:
        """Start a new edit session and paint the prompt."""
        self._value = ""
        self._cursor = 0
        self._first_row = self._terminal.cursor_row
        self._buffer_width = max(self._terminal.buffer_width, 1)
        self._max_printed_length = 0
        self._prompt = prompt
        self._prompt_width = visible_width(prompt)
        self._finished = False
        self._end_of_input = False
        self._refresh()
        self._set_cursor_position(0)

    def handle_key(self, event: KeyEvent) -> None:
        """Apply one key press to the current session."""
        self._update_buffer_info()

        handler = self._handlers.get(event.binding)
        if handler is not None:
            handler()
            return

        if event.is_printable:
            self._insert(event.character)
        else:
            logger.debug("ignoring unbound key %s (modifiers=%d)", event.key, event.modifiers)

    # -- editing actions ----------------------------------------------------

    def _escape(self) -> None:
        self._value = ""
        self._refresh()
        self._set_cursor_position(0)

    def _home(self) -> None:
        self._set_cursor_position(0)

    def _end(self) -> None:
        self._set_cursor_position(len(self._value))

    def _left_arrow(self) -> None:
        if self._cursor == 0:
            return
        self._set_cursor_position(self._cursor - 1)

    def _right_arrow(self) -> None:
        if self._cursor == len(self._value):
            return
        self._set_cursor_position(self._cursor + 1)

    def _up_arrow(self) -> None:
        entry = self.history.previous()
        if entry is None:
            return
        self._replace_line(entry)

    def _down_arrow(self) -> None:
        entry = self.history.next()
        if entry is None:
            return
        self._replace_line(entry)

    def _backspace(self) -> None:
        if self._cursor == 0:
            return
        prev = self._cursor - 1
        self._value = self._value[:prev] + self._value[self._cursor :]
        self._refresh()
        self._set_cursor_position(prev)

    def _delete(self) -> None:
        if self._cursor == len(self._value):
            return
        self._value = self._value[: self._cursor] + self._value[self._cursor + 1 :]
        self._refresh()
        self._set_cursor_position(self._cursor)

    def _enter(self) -> None:
        self._finished = True

    def _tab_key(self) -> None:
        self._insert(self._tab)

    def _end_of_input_key(self) -> None:
        if self._value:
            return
        self._end_of_input = True
        self._finished = True

    def _insert(self, text: str) -> None:
        self._value = self._value[: self._cursor] + text + self._value[self._cursor :]
        self._refresh()
        self._set_cursor_position(self._cursor + len(text))

    def _replace_line(self, text: str) -> None:
        self._value = text
        self._refresh()
        self._set_cursor_position(len(text))

    # -- painting -----------------------------------------------------------

    def _refresh(self) -> None:
        """Repaint prompt and line, blanking leftovers of a longer paint."""
        printed = self._printed_length
        painted = max(printed, self._max_printed_length)

        self._terminal.set_cursor_position(0, self._first_row)
        self._terminal.write(self._prompt)
        self._terminal.write(self._value)

        # clear the rest of the line
        if printed < self._max_printed_length:
            self._terminal.write(" " * (self._max_printed_length - printed))

        self._max_printed_length = painted
        self._track_scroll(painted)

    def _set_cursor_position(self, pos: int) -> None:
        """Move the edit cursor to *pos* and the terminal cursor with it."""
        self._cursor = pos
        row, col = cursor_position(pos, self._prompt_width, self._buffer_width, self._first_row)

        last_row = self._terminal.window_height - 1
        if row > last_row:
            # The cell is below the screen: scroll the screen up to reach it
            overflow = row - last_row
            self._terminal.set_cursor_position(0, last_row)
            self._terminal.write("\n" * overflow)
            self._first_row -= overflow
            row = last_row
            logger.debug("scrolled %d row(s) to reach the cursor", overflow)

        self._terminal.set_cursor_position(col, row)

    # -- geometry -----------------------------------------------------------

    def _update_buffer_info(self) -> None:
        """Follow a change of terminal width.

        Best-effort: rows already painted with the old width are not
        re-wrapped, only ``first_row`` is re-derived from where the terminal
        reports the cursor.
        """
        width = self._terminal.buffer_width
        if width == self._buffer_width or width < 1:
            return
        self._buffer_width = width
        self._first_row = (
            self._terminal.cursor_row - (self._cursor + self._prompt_width) // width
        )
        logger.debug("buffer width changed to %d, first row now %d", width, self._first_row)

    def _track_scroll(self, painted: int) -> None:
        """Shift ``first_row`` up by the rows the terminal scrolled while painting."""
        if painted == 0:
            return
        last_row = self._first_row + (painted - 1) // self._buffer_width
        overflow = last_row - (self._terminal.window_height - 1)
        if overflow > 0:
            self._first_row -= overflow
            logger.debug("painting scrolled the screen by %d row(s)", overflow)
