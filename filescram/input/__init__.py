"""Input-layer public API: key events, tty decoding, and routing.

Low-level decoding (`KeyReader`) is kept separate from the context-stack
router and the handler factories wired by the runtime.
"""

from .events import KeyEvent
from .handlers import (
    MODAL_CONTEXT_ID,
    NAVIGATION_KEYS,
    Hotkey,
    create_component_handler,
    create_escape_handler,
    create_hotkey_handler,
    create_input_handler,
    create_navigation_blocker,
    register_modal_context,
)
from .key_registry import KeyComboBinding, KeyComboRegistry, chord_for, normalize_chord
from .reader import ESC_SEQUENCE_TIMEOUT_MS, KeyReader
from .router import BASE_CONTEXT_ID, InputContext, InputContextNotFoundError, InputHandler, InputRouter

__all__ = [
    "KeyEvent",
    "KeyReader",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyComboBinding",
    "KeyComboRegistry",
    "chord_for",
    "normalize_chord",
    "BASE_CONTEXT_ID",
    "InputContext",
    "InputContextNotFoundError",
    "InputHandler",
    "InputRouter",
    "MODAL_CONTEXT_ID",
    "NAVIGATION_KEYS",
    "Hotkey",
    "create_input_handler",
    "create_navigation_blocker",
    "create_hotkey_handler",
    "create_component_handler",
    "create_escape_handler",
    "register_modal_context",
]
