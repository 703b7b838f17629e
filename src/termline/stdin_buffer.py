"""StdinBuffer buffers input and hands back complete sequences.

Terminal reads can return partial chunks, especially for escape sequences
like cursor keys. Without buffering, a partial sequence would be decoded as
a lone Escape followed by ordinary characters.
"""

from __future__ import annotations

ESC = "\x1b"


def _is_complete_sequence(data: str) -> str:
    """Check if a string is a complete escape sequence or needs more data.

    Returns 'complete', 'incomplete', or 'not-escape'.
    """
    if not data.startswith(ESC):
        return "not-escape"

    if len(data) == 1:
        return "incomplete"

    after_esc = data[1:]

    # CSI sequences: ESC [
    if after_esc.startswith("["):
        return _is_complete_csi_sequence(data)

    # OSC sequences: ESC ]
    if after_esc.startswith("]"):
        if data.endswith(f"{ESC}\\") or data.endswith("\x07"):
            return "complete"
        return "incomplete"

    # SS3 sequences: ESC O, optionally with a modifier digit (ESC O 5 P)
    if after_esc.startswith("O"):
        if len(after_esc) < 2:
            return "incomplete"
        if after_esc[1:].isdigit():
            return "incomplete"
        return "complete"

    # Alt + special key: ESC followed by a whole CSI or SS3 sequence
    if after_esc.startswith(ESC):
        if len(after_esc) == 1:
            return "incomplete"
        if after_esc[1] in "[O":
            return _is_complete_sequence(after_esc)
        return "complete"

    # Meta key sequences: ESC followed by a single character
    return "complete"


def _is_complete_csi_sequence(data: str) -> str:
    if len(data) < 3:
        return "incomplete"

    last_char_code = ord(data[-1])
    if 0x40 <= last_char_code <= 0x7E:
        return "complete"

    return "incomplete"


def _extract_complete_sequences(buffer: str) -> tuple[list[str], str]:
    """Split accumulated buffer into complete sequences.

    Returns (sequences, remainder).
    """
    sequences: list[str] = []
    pos = 0

    while pos < len(buffer):
        remaining = buffer[pos:]

        if remaining.startswith(ESC):
            seq_end = 1
            while seq_end <= len(remaining):
                candidate = remaining[:seq_end]
                status = _is_complete_sequence(candidate)

                if status == "incomplete":
                    seq_end += 1
                    continue
                sequences.append(candidate)
                pos += seq_end
                break
            else:
                return sequences, remaining
        else:
            sequences.append(remaining[0])
            pos += 1

    return sequences, ""


class StdinBuffer:
    """Accumulates decoded input and returns complete sequences.

    The caller decides how long to wait for the rest of an incomplete
    sequence; when nothing more arrives it calls :meth:`flush` to give up
    on it (a lone ``ESC`` is then reported as the Escape key).
    """

    def __init__(self) -> None:
        self._buffer: str = ""

    @property
    def pending(self) -> bool:
        """True while an incomplete sequence is waiting for more input."""
        return bool(self._buffer)

    def feed(self, data: str) -> list[str]:
        """Add *data* and return every sequence that is now complete."""
        self._buffer += data
        sequences, remainder = _extract_complete_sequences(self._buffer)
        self._buffer = remainder
        return sequences

    def flush(self) -> list[str]:
        if not self._buffer:
            return []

        sequences = [self._buffer]
        self._buffer = ""
        return sequences

    def clear(self) -> None:
        self._buffer = ""
