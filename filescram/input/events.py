"""Key event record shared by the reader, router, and handlers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class KeyEvent:
    """One decoded keypress: symbolic name plus independent modifiers.

    Letters are named in lower case; an upper-case letter arrives as its
    lower-case name with ``shift=True`` and the typed character in
    ``sequence``.
    """

    name: str
    ctrl: bool = False
    alt: bool = False
    shift: bool = False
    sequence: str = ""

    def matches(self, name: str, *, ctrl: bool = False, alt: bool = False, shift: bool = False) -> bool:
        """Return whether name and every modifier match exactly."""
        return self.name == name and self.ctrl == ctrl and self.alt == alt and self.shift == shift

    @property
    def is_printable(self) -> bool:
        """Return whether this event inserts text (single char, no ctrl/alt)."""
        if self.ctrl or self.alt:
            return False
        if self.name == "space":
            return True
        return len(self.name) == 1 and self.name.isprintable()

    @property
    def text(self) -> str:
        """Return inserted text for printable events, otherwise ``""``."""
        if not self.is_printable:
            return ""
        if self.name == "space":
            return " "
        return self.sequence or self.name
