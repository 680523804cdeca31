"""Low-level terminal input decoding.

Reads raw bytes from a tty file descriptor and translates them into
``KeyEvent`` records. Handles ESC-sequence timing, CSI modifier forms,
Alt-prefixed characters, and multi-byte UTF-8 input.
"""

from __future__ import annotations

import os
import select

from .events import KeyEvent

ESC_SEQUENCE_TIMEOUT_MS = 25

_CONTROL_NAMES = {
    b"\t": "tab",
    b"\r": "return",
    b"\n": "enter",
    b"\x7f": "backspace",
    b"\x08": "backspace",
    b"\x00": "space",
}

_CSI_FINAL_NAMES = {
    b"A": "up",
    b"B": "down",
    b"C": "right",
    b"D": "left",
    b"H": "home",
    b"F": "end",
}

_CSI_TILDE_NAMES = {
    "1": "home",
    "2": "insert",
    "3": "delete",
    "4": "end",
    "5": "pageup",
    "6": "pagedown",
    "7": "home",
    "8": "end",
}


def _modifiers(code: int) -> tuple[bool, bool, bool]:
    """Decode xterm modifier parameter into ``(ctrl, alt, shift)``."""
    bits = max(0, code - 1)
    return bool(bits & 4), bool(bits & 2), bool(bits & 1)


def _char_event(text: str, *, alt: bool = False) -> KeyEvent:
    if text == " ":
        return KeyEvent("space", alt=alt, sequence=text)
    if len(text) == 1 and text.isalpha() and text.isupper():
        return KeyEvent(text.lower(), alt=alt, shift=True, sequence=text)
    return KeyEvent(text, alt=alt, sequence=text)


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


class KeyReader:
    """Stateful decoder over one tty file descriptor."""

    def __init__(self, fd: int, esc_timeout_ms: int = ESC_SEQUENCE_TIMEOUT_MS) -> None:
        self.fd = fd
        self.esc_timeout_ms = esc_timeout_ms
        self._pending: list[bytes] = []

    @property
    def has_pending(self) -> bool:
        """Return whether bytes from an earlier read are still buffered."""
        return bool(self._pending)

    def _read_ready_byte(self, timeout_ms: int) -> bytes | None:
        if self._pending:
            return self._pending.pop(0)
        ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout_ms / 1000.0))
        if not ready:
            return None
        ch = os.read(self.fd, 1)
        if not ch:
            return None
        return ch

    def read_key(self, timeout_ms: int | None = None) -> KeyEvent | None:
        """Read one key event; ``None`` when ``timeout_ms`` elapses first."""
        if self._pending:
            ch = self._pending.pop(0)
        else:
            if timeout_ms is not None:
                ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout_ms / 1000.0))
                if not ready:
                    return None
            ch = os.read(self.fd, 1)
            if not ch:
                return None

        if ch in _CONTROL_NAMES:
            return KeyEvent(_CONTROL_NAMES[ch], ctrl=ch == b"\x00", sequence=ch.decode("ascii"))
        if ch == b"\x1b":
            return self._read_escape()
        code = ch[0]
        if 1 <= code <= 26:
            return KeyEvent(chr(code + 96), ctrl=True, sequence=ch.decode("ascii"))
        if code == 0x1F:
            return KeyEvent("/", ctrl=True, sequence=ch.decode("ascii"))
        return _char_event(self._read_utf8(ch))

    def _read_utf8(self, lead: bytes) -> str:
        data = bytearray(lead)
        for _ in range(_utf8_length(lead[0]) - 1):
            nxt = self._read_ready_byte(self.esc_timeout_ms)
            if nxt is None:
                break
            data += nxt
        return bytes(data).decode("utf-8", errors="replace")

    def _read_escape(self) -> KeyEvent:
        seq = self._read_ready_byte(self.esc_timeout_ms)
        if seq is None:
            return KeyEvent("escape", sequence="\x1b")
        if seq == b"\x1b":
            self._pending.append(seq)
            return KeyEvent("escape", sequence="\x1b")
        if seq == b"O":
            final = self._read_ready_byte(self.esc_timeout_ms)
            if final is not None and final in _CSI_FINAL_NAMES:
                return KeyEvent(_CSI_FINAL_NAMES[final], sequence="\x1bO" + final.decode("ascii"))
            return KeyEvent("escape", sequence="\x1b")
        if seq != b"[":
            if seq in _CONTROL_NAMES:
                return KeyEvent(_CONTROL_NAMES[seq], alt=True, sequence="\x1b" + seq.decode("ascii"))
            event = _char_event(self._read_utf8(seq), alt=True)
            return event
        return self._read_csi()

    def _read_csi(self) -> KeyEvent:
        params = bytearray()
        while True:
            part = self._read_ready_byte(self.esc_timeout_ms)
            if part is None:
                return KeyEvent("escape", sequence="\x1b")
            if part.isdigit() or part == b";":
                params += part
                if len(params) > 16:
                    return KeyEvent("escape", sequence="\x1b")
                continue
            final = part
            break

        raw = "\x1b[" + params.decode("ascii") + final.decode("ascii", errors="replace")
        fields = params.decode("ascii").split(";") if params else []
        ctrl = alt = shift = False
        if len(fields) >= 2 and fields[1].isdigit():
            ctrl, alt, shift = _modifiers(int(fields[1]))

        if final == b"Z":
            return KeyEvent("tab", shift=True, sequence=raw)
        if final in _CSI_FINAL_NAMES:
            return KeyEvent(_CSI_FINAL_NAMES[final], ctrl=ctrl, alt=alt, shift=shift, sequence=raw)
        if final == b"~" and fields:
            name = _CSI_TILDE_NAMES.get(fields[0])
            if name is not None:
                return KeyEvent(name, ctrl=ctrl, alt=alt, shift=shift, sequence=raw)
        return KeyEvent("unknown", sequence=raw)


__all__ = [
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyReader",
]
