"""Bounded command history with an independent browse cursor."""

from __future__ import annotations

import logging
from typing import Iterator

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_SIZE = 50


class History:
    """Committed lines, oldest first, capped at ``max_count`` entries.

    The browse cursor is ``-1`` while not browsing, otherwise the index of
    the entry last returned by :meth:`previous` or :meth:`next`.
    Consecutive duplicates are stored once; duplicates elsewhere are kept.

    Browsing does not remember the line that was being typed before the
    first :meth:`previous`; running off the newest entry with :meth:`next`
    returns ``None`` and leaves the caller's buffer untouched.
    """

    def __init__(self, max_count: int = DEFAULT_HISTORY_SIZE) -> None:
        if max_count < 1:
            raise ValueError(f"history size must be positive, got {max_count}")
        self._max_count = max_count
        self._history: list[str] = []
        self._current = -1

    @property
    def max_count(self) -> int:
        return self._max_count

    @property
    def count(self) -> int:
        return len(self._history)

    @property
    def current(self) -> int:
        """Browse cursor: ``-1`` when not browsing."""
        return self._current

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._history)

    def __len__(self) -> int:
        return len(self._history)

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._history))

    def _last(self) -> str | None:
        return self._history[-1] if self._history else None

    def add(self, text: str) -> None:
        """Append *text* unless it repeats the newest entry."""
        if self._last() != text:
            self._history.append(text)

        # A new distinct commit ends the browsing session
        if self._current != -1 and self._history[self._current] != text:
            self._current = -1

        if len(self._history) > self._max_count:
            evicted = self._history.pop(0)
            logger.debug("history full, evicted %r", evicted)
            if self._current > 0:
                self._current -= 1

    def previous(self) -> str | None:
        """Step to the next older entry, or return ``None`` at the oldest."""
        if not self._history or self._current == 0:
            return None
        if self._current == -1:
            self._current = len(self._history)
        self._current -= 1
        return self._history[self._current]

    def next(self) -> str | None:
        """Step to the next newer entry; past the newest, stop browsing."""
        if self._current == -1 or self._current + 1 == len(self._history):
            self._current = -1
            return None
        self._current += 1
        return self._history[self._current]

    def clear(self) -> None:
        self._history.clear()
        self._current = -1
