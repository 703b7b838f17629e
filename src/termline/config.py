"""Configuration for the line editor."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from termline.history import DEFAULT_HISTORY_SIZE
from termline.keybindings import LineKeybindingsConfig

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class EditorConfig:
    """Line editor options.

    ``keybindings`` overrides entries of the default key binding table,
    e.g. ``{"cursorLineStart": ["home", "ctrl+a"]}``.
    """

    history_size: int = DEFAULT_HISTORY_SIZE
    tab_width: int = 4
    skip_empty_history: bool = False
    keybindings: LineKeybindingsConfig = field(default_factory=dict)
    write_log: str = ""

    def __post_init__(self) -> None:
        if self.history_size < 1:
            raise ValueError(f"history_size must be positive, got {self.history_size}")
        if self.tab_width < 1:
            raise ValueError(f"tab_width must be positive, got {self.tab_width}")

    @classmethod
    def from_env(cls) -> EditorConfig:
        """Build a config from ``TERMLINE_*`` environment variables."""
        kwargs: dict[str, object] = {}
        history_size = os.environ.get("TERMLINE_HISTORY_SIZE")
        if history_size:
            kwargs["history_size"] = _parse_int("TERMLINE_HISTORY_SIZE", history_size)
        tab_width = os.environ.get("TERMLINE_TAB_WIDTH")
        if tab_width:
            kwargs["tab_width"] = _parse_int("TERMLINE_TAB_WIDTH", tab_width)
        skip_empty = os.environ.get("TERMLINE_SKIP_EMPTY_HISTORY")
        if skip_empty:
            kwargs["skip_empty_history"] = skip_empty.strip().lower() in _TRUE_VALUES
        kwargs["write_log"] = os.environ.get("TERMLINE_WRITE_LOG", "")
        return cls(**kwargs)  # type: ignore[arg-type]


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None
