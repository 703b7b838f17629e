"""Line editor keybindings manager."""

from __future__ import annotations

from typing import Iterator, Literal, get_args

from termline.keys import KeyEvent, KeyId, parse_key_id

LineAction = Literal[
    # Cursor movement
    "cursorLeft",
    "cursorRight",
    "cursorLineStart",
    "cursorLineEnd",
    # Deletion
    "clearLine",
    "deleteCharBackward",
    "deleteCharForward",
    # History
    "historyPrevious",
    "historyNext",
    # Text input
    "tab",
    "submit",
    "endOfInput",
]

LINE_ACTIONS: tuple[str, ...] = get_args(LineAction)

LineKeybindingsConfig = dict[LineAction, KeyId | list[KeyId]]

# Declaration order is dispatch priority when a key is bound twice.
DEFAULT_LINE_KEYBINDINGS: dict[LineAction, KeyId | list[KeyId]] = {
    "clearLine": "escape",
    "cursorLineStart": "home",
    "cursorLineEnd": "end",
    "cursorLeft": "left",
    "cursorRight": "right",
    "historyPrevious": "up",
    "historyNext": "down",
    "deleteCharBackward": "backspace",
    "deleteCharForward": "delete",
    "submit": "enter",
    "tab": "tab",
    "endOfInput": "ctrl+d",
}


class LineKeybindingsManager:
    """Maps line editor actions to the keys that trigger them."""

    def __init__(self, config: LineKeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[LineAction, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: LineKeybindingsConfig) -> None:
        unknown = [action for action in config if action not in LINE_ACTIONS]
        if unknown:
            raise ValueError(f"unknown line editor actions: {', '.join(sorted(unknown))}")

        self._action_to_keys.clear()

        # Start with defaults
        for action, keys in DEFAULT_LINE_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        # Override with user config
        for action, keys in config.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

    def matches(self, event: KeyEvent, action: LineAction) -> bool:
        """Check if a key event triggers a specific action."""
        for key in self._action_to_keys.get(action, []):
            if parse_key_id(key) == event.binding:
                return True
        return False

    def get_keys(self, action: LineAction) -> list[KeyId]:
        """Get keys bound to an action."""
        return self._action_to_keys.get(action, [])

    def bindings(self) -> Iterator[tuple[str, int, LineAction]]:
        """Yield ``(key, modifiers, action)`` in dispatch priority order."""
        for action, keys in self._action_to_keys.items():
            for key_id in keys:
                parsed = parse_key_id(key_id)
                if parsed is None:
                    continue
                key, modifiers = parsed
                yield key, modifiers, action

    def set_config(self, config: LineKeybindingsConfig) -> None:
        """Update configuration."""
        self._build_maps(config)
