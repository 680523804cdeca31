"""Reusable key-combo registry primitives."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .events import KeyEvent

_MODIFIER_ORDER = ("ctrl", "alt", "shift")


def chord_for(key: KeyEvent) -> str:
    """Return canonical chord token such as ``"ctrl+f"`` or ``"shift+tab"``."""
    parts = [name for name in _MODIFIER_ORDER if getattr(key, name)]
    parts.append(key.name)
    return "+".join(parts)


def normalize_chord(chord: str) -> str:
    """Normalize a user-written chord (``"Shift+Ctrl+F"``) into canonical order."""
    pieces = [piece.strip().lower() for piece in chord.split("+") if piece.strip()]
    if not pieces:
        return ""
    modifiers = {piece for piece in pieces[:-1] if piece in _MODIFIER_ORDER}
    name = pieces[-1]
    return "+".join([*(m for m in _MODIFIER_ORDER if m in modifiers), name])


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more chord tokens to a single action callback."""

    combos: tuple[str, ...]
    handler: Callable[[], bool | None]


class KeyComboRegistry:
    """Small chord-dispatch table keyed by canonical chord tokens."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[], bool | None]] = {}

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            self._handlers[normalize_chord(combo)] = binding.handler
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        """Register multiple bindings and return ``self`` for fluent usage."""
        for binding in bindings:
            self.register_binding(binding)
        return self

    def __contains__(self, key: KeyEvent) -> bool:
        return chord_for(key) in self._handlers

    def dispatch(self, key: KeyEvent) -> bool | None:
        """Invoke bound handler for ``key`` and return its handled result."""
        handler = self._handlers.get(chord_for(key))
        if handler is None:
            return None
        return handler()
