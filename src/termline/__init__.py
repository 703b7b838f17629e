"""termline: interactive terminal line editor with history."""

# Configuration
from termline.config import EditorConfig

# History
from termline.history import DEFAULT_HISTORY_SIZE, History

# Keybindings
from termline.keybindings import (
    DEFAULT_LINE_KEYBINDINGS,
    LineAction,
    LineKeybindingsManager,
)

# Keyboard input handling
from termline.keys import Key, KeyEvent, KeyId, key_event, parse_key_event, parse_key_id

# Line editor
from termline.line_editor import LineEditor, cursor_position

# Input buffering
from termline.stdin_buffer import StdinBuffer

# Terminal interface and implementations
from termline.terminal import Color, ProcessTerminal, Terminal, TerminalError

# Utilities
from termline.utils import visible_width

__all__ = [
    # Configuration
    "EditorConfig",
    # History
    "DEFAULT_HISTORY_SIZE",
    "History",
    # Keybindings
    "DEFAULT_LINE_KEYBINDINGS",
    "LineAction",
    "LineKeybindingsManager",
    # Keys
    "Key",
    "KeyEvent",
    "KeyId",
    "key_event",
    "parse_key_event",
    "parse_key_id",
    # Line editor
    "LineEditor",
    "cursor_position",
    # Stdin buffer
    "StdinBuffer",
    # Terminal
    "Color",
    "ProcessTerminal",
    "Terminal",
    "TerminalError",
    # Utilities
    "visible_width",
]
