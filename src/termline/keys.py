"""Keyboard input decoding for the line editor.

Turns raw terminal input (legacy xterm/VT escape sequences, control
characters, ESC-prefixed Alt combinations and plain text) into
:class:`KeyEvent` values, and parses key identifiers such as ``"ctrl+a"``
or ``"shift+up"`` into the ``(key, modifiers)`` pairs the key binding table
is keyed by.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Type alias
# ---------------------------------------------------------------------------

KeyId = str

# ---------------------------------------------------------------------------
# Key helper object
# ---------------------------------------------------------------------------


class Key:
    """Named key constants and modifier combinators."""

    escape = "escape"
    enter = "enter"
    tab = "tab"
    space = "space"
    backspace = "backspace"
    delete = "delete"
    insert = "insert"
    clear = "clear"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"

    @staticmethod
    def shift(key: str) -> str:
        return f"shift+{key}"

    @staticmethod
    def alt(key: str) -> str:
        return f"alt+{key}"


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MODIFIERS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}

# Characters produced by keys that have a text representation.
KEY_CHARACTERS: dict[str, str] = {
    "escape": "\x1b",
    "enter": "\r",
    "tab": "\t",
    "space": " ",
    "backspace": "\x7f",
}

# Legacy escape sequences -> key names
LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1bOP": "f1",
    "\x1bOQ": "f2",
    "\x1bOR": "f3",
    "\x1bOS": "f4",
    "\x1b[E": "clear",
    "\x1b[Z": "shift+tab",
}

# Final byte of ``CSI 1 ; <mod> <letter>`` sequences.
_CSI_LETTER_KEYS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
    "E": "clear",
    "P": "f1",
    "Q": "f2",
    "R": "f3",
    "S": "f4",
}

# Number of ``CSI <number> ; <mod> ~`` sequences.
_CSI_TILDE_KEYS: dict[int, str] = {
    1: "home",
    2: "insert",
    3: "delete",
    4: "end",
    5: "pageUp",
    6: "pageDown",
    7: "home",
    8: "end",
    15: "f5",
    17: "f6",
    18: "f7",
    19: "f8",
    20: "f9",
    21: "f10",
    23: "f11",
    24: "f12",
}

_CSI_LETTER_RE = re.compile(r"^\x1b\[(?:1;(\d+))?([ABCDHFEPQRS])$")
_SS3_MODIFIED_RE = re.compile(r"^\x1bO(\d+)([PQRS])$")
_CSI_TILDE_RE = re.compile(r"^\x1b\[(\d+)(?:;(\d+))?~$")

# ---------------------------------------------------------------------------
# Key event
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyEvent:
    """A single decoded key press.

    ``character`` is the text the key produces (``""`` for keys such as
    arrows), ``key`` is the key name used for bindings and ``modifiers`` is
    a bitmask built from :data:`MODIFIERS`.
    """

    character: str
    key: str
    modifiers: int = 0

    @property
    def is_printable(self) -> bool:
        if len(self.character) != 1:
            return False
        code = ord(self.character)
        return code >= 32 and not (0x7F <= code <= 0x9F)

    @property
    def binding(self) -> tuple[str, int]:
        return (self.key, self.modifiers)


# ---------------------------------------------------------------------------
# Key ID parsing
# ---------------------------------------------------------------------------


def parse_key_id(key_id: KeyId) -> tuple[str, int] | None:
    """Split a key identifier like ``"ctrl+shift+a"`` into ``(key, modifiers)``.

    Returns ``None`` if the key_id has no base key.
    """
    if not key_id:
        return None

    parts = key_id.split("+")
    modifier = 0
    key_parts: list[str] = []

    for part in parts:
        lower = part.lower()
        if lower in MODIFIERS:
            modifier |= MODIFIERS[lower]
        else:
            key_parts.append(part)

    key = "+".join(key_parts) if key_parts else ""
    if not key:
        return None
    if len(key) == 1:
        key = key.lower()

    return key, modifier


def key_event(key_id: KeyId) -> KeyEvent:
    """Build the event a terminal would report for *key_id*.

    Useful for injecting synthetic key presses.
    """
    parsed = parse_key_id(key_id)
    if parsed is None:
        raise ValueError(f"invalid key id: {key_id!r}")
    key, modifiers = parsed

    if key in KEY_CHARACTERS:
        character = KEY_CHARACTERS[key] if modifiers == 0 else ""
    elif len(key) == 1:
        character = key
        if modifiers & MODIFIERS["ctrl"]:
            character = raw_ctrl_char(key) or ""
        elif modifiers & MODIFIERS["shift"]:
            character = key.upper()
    else:
        character = ""

    return KeyEvent(character=character, key=key, modifiers=modifiers)


# ---------------------------------------------------------------------------
# Raw control character helper
# ---------------------------------------------------------------------------


def raw_ctrl_char(key: str) -> str | None:
    """Return the control character for a key, or ``None`` if not applicable.

    For example, ``raw_ctrl_char("a")`` returns ``"\\x01"``.
    """
    if len(key) != 1:
        return None
    code = ord(key.lower())
    if ord("a") <= code <= ord("z"):
        return chr(code & 0x1F)
    ctrl_map: dict[str, str] = {
        "[": chr(27),
        "\\": chr(28),
        "]": chr(29),
        "^": chr(30),
        "_": chr(31),
        "@": chr(0),
    }
    return ctrl_map.get(key)


def _modifier_from_param(param: str | None) -> int:
    # xterm encodes modifiers as 1 + bitmask
    if not param:
        return 0
    return max(int(param) - 1, 0) & 0x7


def _event_for_key_id(key_id: str) -> KeyEvent:
    key, modifiers = parse_key_id(key_id)  # type: ignore[misc]
    character = KEY_CHARACTERS.get(key, "") if modifiers == 0 else ""
    return KeyEvent(character=character, key=key, modifiers=modifiers)


# ---------------------------------------------------------------------------
# parse_key_event -- determine what key was pressed from raw input
# ---------------------------------------------------------------------------


def parse_key_event(data: str) -> KeyEvent | None:  # noqa: C901
    """Decode one complete input sequence into a :class:`KeyEvent`.

    Returns ``None`` for sequences that do not correspond to a key press
    (unknown escape sequences, terminal reports, empty input).
    """
    if not data:
        return None

    # --- Legacy escape sequences ---
    if data in LEGACY_KEY_SEQUENCES:
        return _event_for_key_id(LEGACY_KEY_SEQUENCES[data])

    match = _CSI_LETTER_RE.match(data)
    if match:
        return KeyEvent(
            character="",
            key=_CSI_LETTER_KEYS[match.group(2)],
            modifiers=_modifier_from_param(match.group(1)),
        )

    match = _SS3_MODIFIED_RE.match(data)
    if match:
        return KeyEvent(
            character="",
            key=_CSI_LETTER_KEYS[match.group(2)],
            modifiers=_modifier_from_param(match.group(1)),
        )

    match = _CSI_TILDE_RE.match(data)
    if match:
        key = _CSI_TILDE_KEYS.get(int(match.group(1)))
        if key is None:
            return None
        return KeyEvent(
            character="",
            key=key,
            modifiers=_modifier_from_param(match.group(2)),
        )

    # --- Simple single-byte keys ---
    if data == "\x1b":
        return KeyEvent(character=data, key="escape")
    if data == "\r" or data == "\n":
        return KeyEvent(character=data, key="enter")
    if data == "\t":
        return KeyEvent(character=data, key="tab")
    if data == "\x7f" or data == "\x08":
        return KeyEvent(character=data, key="backspace")
    if data == "\x00":
        return KeyEvent(character=data, key="space", modifiers=MODIFIERS["ctrl"])

    # --- Ctrl + letter (0x01 - 0x1a) ---
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return KeyEvent(
            character=data,
            key=chr(ord(data) + ord("a") - 1),
            modifiers=MODIFIERS["ctrl"],
        )

    # --- Alt + key (ESC prefix) ---
    if len(data) == 2 and data[0] == "\x1b":
        inner = parse_key_event(data[1])
        if inner is None:
            return None
        return KeyEvent(
            character=inner.character if inner.is_printable else "",
            key=inner.key,
            modifiers=inner.modifiers | MODIFIERS["alt"],
        )

    # --- Alt + special key (ESC ESC [ A) ---
    if data.startswith("\x1b\x1b"):
        inner = parse_key_event(data[1:])
        if inner is None:
            return None
        return KeyEvent(character="", key=inner.key, modifiers=inner.modifiers | MODIFIERS["alt"])

    if data.startswith("\x1b"):
        return None

    # --- Plain character ---
    if len(data) == 1:
        if data == " ":
            return KeyEvent(character=data, key="space")
        if not data.isprintable():
            return None
        if data.isupper():
            return KeyEvent(character=data, key=data.lower(), modifiers=MODIFIERS["shift"])
        return KeyEvent(character=data, key=data)

    return None
