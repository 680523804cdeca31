"""Search/path/command overlay: a single-line text input plus submission parsing.

The overlay owns only its text buffer and visibility. What a submission
does (re-root, preview, run a command) is decided by the callbacks the
runtime wires in.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

OVERLAY_TITLE = "Search & Navigate"
OVERLAY_PLACEHOLDER = "Type path, filename, or /command..."
DEFAULT_HELP = "Enter: execute | Esc: cancel | /command for actions"
COMMAND_HELP = "Command mode - type /help for available commands"
PATH_HELP = "Path mode - navigating to directory or file"
SEARCH_HELP = "Search mode - finding files by name"
MAX_INPUT_LENGTH = 2048


class SubmissionKind(str, Enum):
    COMMAND = "command"
    PATH = "path"


@dataclass(frozen=True)
class OverlaySubmission:
    """Parsed overlay input: a ``/command`` with args, or a path/search term."""

    kind: SubmissionKind
    text: str
    command: str = ""
    args: tuple[str, ...] = ()


def parse_submission(text: str) -> OverlaySubmission | None:
    """Parse submitted overlay text; blank input yields ``None``."""
    trimmed = text.strip()
    if not trimmed:
        return None
    if trimmed.startswith("/"):
        parts = trimmed[1:].split()
        command = parts[0] if parts else ""
        return OverlaySubmission(
            kind=SubmissionKind.COMMAND,
            text=trimmed,
            command=command,
            args=tuple(parts[1:]),
        )
    return OverlaySubmission(kind=SubmissionKind.PATH, text=trimmed)


def _ignore_text(_text: str) -> None:
    return None


def _ignore() -> None:
    return None


@dataclass(frozen=True)
class OverlayCallbacks:
    """Operations run when the overlay submits or is cancelled."""

    on_submit: Callable[[str], None] = _ignore_text
    on_cancel: Callable[[], None] = _ignore


@dataclass
class OverlayInput:
    """Single-line input buffer shown above the panes."""

    callbacks: OverlayCallbacks = field(default_factory=OverlayCallbacks)
    value: str = ""
    visible: bool = False
    focused: bool = False

    def show(self, initial: str = "") -> None:
        self.visible = True
        self.value = initial[:MAX_INPUT_LENGTH]

    def hide(self) -> None:
        self.visible = False
        self.value = ""

    def insert(self, text: str) -> None:
        room = MAX_INPUT_LENGTH - len(self.value)
        if room > 0:
            self.value += text[:room]

    def backspace(self) -> None:
        self.value = self.value[:-1]

    def help_text(self) -> str:
        """Return the hint line for the current buffer contents."""
        if not self.value:
            return DEFAULT_HELP
        if self.value.startswith("/"):
            return COMMAND_HELP
        if "/" in self.value or "\\" in self.value:
            return PATH_HELP
        return SEARCH_HELP

    def cancel(self) -> None:
        self.hide()
        self.callbacks.on_cancel()

    def submit(self) -> None:
        """Hide the overlay, then hand the buffered text to ``on_submit``."""
        text = self.value
        self.hide()
        self.callbacks.on_submit(text)

    def handle_key(self, key: Any) -> bool:
        if not self.visible:
            return False
        if key.name == "escape":
            self.cancel()
            return True
        if key.name in {"return", "enter"}:
            self.submit()
            return True
        if key.name == "backspace":
            self.backspace()
            return True
        if key.is_printable:
            self.insert(key.text)
            return True
        return False

    # Focusable

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False


__all__ = [
    "OverlayCallbacks",
    "OverlayInput",
    "OverlaySubmission",
    "SubmissionKind",
    "parse_submission",
]
