"""Tests for termline.config.EditorConfig."""

from __future__ import annotations

import pytest

from termline.config import EditorConfig

_ENV_VARS = [
    "TERMLINE_HISTORY_SIZE",
    "TERMLINE_TAB_WIDTH",
    "TERMLINE_SKIP_EMPTY_HISTORY",
    "TERMLINE_WRITE_LOG",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestEditorConfigDefaults:
    def test_defaults(self) -> None:
        config = EditorConfig()
        assert config.history_size == 50
        assert config.tab_width == 4
        assert config.skip_empty_history is False
        assert config.keybindings == {}
        assert config.write_log == ""

    def test_keybindings_not_shared(self) -> None:
        first = EditorConfig()
        first.keybindings["tab"] = "ctrl+i"
        assert EditorConfig().keybindings == {}

    @pytest.mark.parametrize("field", ["history_size", "tab_width"])
    def test_non_positive_values_rejected(self, field: str) -> None:
        with pytest.raises(ValueError, match=field):
            EditorConfig(**{field: 0})


class TestEditorConfigFromEnv:
    def test_no_variables_gives_defaults(self) -> None:
        assert EditorConfig.from_env() == EditorConfig()

    def test_reads_variables(self, monkeypatch) -> None:
        monkeypatch.setenv("TERMLINE_HISTORY_SIZE", "200")
        monkeypatch.setenv("TERMLINE_TAB_WIDTH", "2")
        monkeypatch.setenv("TERMLINE_SKIP_EMPTY_HISTORY", "yes")
        monkeypatch.setenv("TERMLINE_WRITE_LOG", "/tmp/termline.log")
        config = EditorConfig.from_env()
        assert config.history_size == 200
        assert config.tab_width == 2
        assert config.skip_empty_history is True
        assert config.write_log == "/tmp/termline.log"

    def test_false_flag(self, monkeypatch) -> None:
        monkeypatch.setenv("TERMLINE_SKIP_EMPTY_HISTORY", "0")
        assert EditorConfig.from_env().skip_empty_history is False

    def test_invalid_integer(self, monkeypatch) -> None:
        monkeypatch.setenv("TERMLINE_HISTORY_SIZE", "lots")
        with pytest.raises(ValueError, match="TERMLINE_HISTORY_SIZE"):
            EditorConfig.from_env()

    def test_out_of_range_integer(self, monkeypatch) -> None:
        monkeypatch.setenv("TERMLINE_TAB_WIDTH", "-1")
        with pytest.raises(ValueError):
            EditorConfig.from_env()
