"""Tests for termline.keybindings -- line editor keybindings manager."""

from __future__ import annotations

import pytest

from termline.keybindings import (
    DEFAULT_LINE_KEYBINDINGS,
    LINE_ACTIONS,
    LineKeybindingsManager,
)
from termline.keys import KeyEvent, key_event


# ---------------------------------------------------------------------------
# DEFAULT_LINE_KEYBINDINGS constant
# ---------------------------------------------------------------------------


class TestDefaultLineKeybindings:
    """DEFAULT_LINE_KEYBINDINGS covers every action exactly once."""

    def test_every_action_has_a_default(self):
        assert set(DEFAULT_LINE_KEYBINDINGS) == set(LINE_ACTIONS)

    def test_editing_keys(self):
        assert DEFAULT_LINE_KEYBINDINGS["clearLine"] == "escape"
        assert DEFAULT_LINE_KEYBINDINGS["cursorLineStart"] == "home"
        assert DEFAULT_LINE_KEYBINDINGS["cursorLineEnd"] == "end"
        assert DEFAULT_LINE_KEYBINDINGS["deleteCharBackward"] == "backspace"
        assert DEFAULT_LINE_KEYBINDINGS["deleteCharForward"] == "delete"

    def test_history_keys(self):
        assert DEFAULT_LINE_KEYBINDINGS["historyPrevious"] == "up"
        assert DEFAULT_LINE_KEYBINDINGS["historyNext"] == "down"

    def test_submit_and_end_of_input(self):
        assert DEFAULT_LINE_KEYBINDINGS["submit"] == "enter"
        assert DEFAULT_LINE_KEYBINDINGS["endOfInput"] == "ctrl+d"


# ---------------------------------------------------------------------------
# LineKeybindingsManager
# ---------------------------------------------------------------------------


class TestLineKeybindingsManager:
    def test_defaults_without_config(self):
        kb = LineKeybindingsManager()
        assert kb.get_keys("cursorLeft") == ["left"]

    def test_matches_event(self):
        kb = LineKeybindingsManager()
        assert kb.matches(key_event("left"), "cursorLeft")
        assert not kb.matches(key_event("right"), "cursorLeft")

    def test_modifiers_must_match_exactly(self):
        kb = LineKeybindingsManager()
        assert not kb.matches(KeyEvent("", "left", 4), "cursorLeft")

    def test_override_replaces_default_keys(self):
        kb = LineKeybindingsManager({"cursorLeft": ["left", "ctrl+b"]})
        assert kb.get_keys("cursorLeft") == ["left", "ctrl+b"]
        assert kb.matches(key_event("ctrl+b"), "cursorLeft")

    def test_override_accepts_single_key(self):
        kb = LineKeybindingsManager({"submit": "ctrl+j"})
        assert kb.get_keys("submit") == ["ctrl+j"]
        assert not kb.matches(key_event("enter"), "submit")

    def test_unknown_action_rejected(self):
        with pytest.raises(ValueError, match="selectUp"):
            LineKeybindingsManager({"selectUp": "up"})  # type: ignore[dict-item]

    def test_set_config_rebuilds(self):
        kb = LineKeybindingsManager({"tab": "ctrl+i"})
        kb.set_config({})
        assert kb.get_keys("tab") == ["tab"]

    def test_bindings_follow_declaration_order(self):
        kb = LineKeybindingsManager()
        actions = [action for _, _, action in kb.bindings()]
        assert actions == list(DEFAULT_LINE_KEYBINDINGS)

    def test_bindings_are_parsed(self):
        kb = LineKeybindingsManager()
        assert ("d", 4, "endOfInput") in list(kb.bindings())

    def test_unknown_action_has_no_keys(self):
        kb = LineKeybindingsManager()
        assert kb.get_keys("nothing") == []  # type: ignore[arg-type]
