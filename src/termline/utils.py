"""Display-width helpers for prompts."""

from __future__ import annotations

import re

import wcwidth as _wcwidth

# ---------------------------------------------------------------------------
# Regex patterns for ANSI / OSC sequences
# ---------------------------------------------------------------------------

_STRIP_RE = re.compile(
    r"\x1b\[[0-9;]*[mGKHJ]"        # CSI
    r"|\x1b\]8;;[^\x07]*\x07"       # OSC 8
)


def strip_ansi(text: str) -> str:
    """Remove color and hyperlink escape sequences from *text*."""
    return _STRIP_RE.sub("", text)


def visible_width(text: str) -> int:
    """Calculate the visible terminal width of *text*.

    * Strips ANSI escape sequences.
    * Uses a fast ASCII path when possible.
    * Control characters count as zero columns, wide characters as two.
    """
    if not text:
        return 0

    stripped = strip_ansi(text)
    if not stripped:
        return 0

    if stripped.isascii() and stripped.isprintable():
        return len(stripped)

    total = 0
    for ch in stripped:
        cp = ord(ch)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            continue
        total += max(_wcwidth.wcwidth(ch), 0)
    return total
