"""Factories for common input handlers and the blocking modal context.

Every factory takes its ``can_receive_input`` predicate as a parameter, so
focus state reaches the router only through those predicates.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from .events import KeyEvent
from .key_registry import KeyComboBinding, KeyComboRegistry
from .router import InputContext, InputHandler, InputRouter, always

MODAL_CONTEXT_ID = "modal"

NAVIGATION_KEYS = frozenset(
    {
        "up",
        "down",
        "left",
        "right",
        "enter",
        "return",
        "space",
        "pageup",
        "pagedown",
        "home",
        "end",
        "tab",
    }
)


@dataclass(frozen=True)
class Hotkey:
    """One hotkey: key name, exact modifier set, and the action to run."""

    key: str
    action: Callable[[], None]
    ctrl: bool = False
    alt: bool = False
    shift: bool = False

    @property
    def chord(self) -> str:
        modifiers = [name for name in ("ctrl", "alt", "shift") if getattr(self, name)]
        return "+".join([*modifiers, self.key])


def create_input_handler(
    id: str,
    priority: int,
    handle_key: Callable[[KeyEvent], bool],
    can_receive_input: Callable[[], bool] = always,
) -> InputHandler:
    return InputHandler(id=id, priority=priority, handle_key=handle_key, can_receive_input=can_receive_input)


def create_navigation_blocker(
    id: str,
    is_active: Callable[[], bool],
    priority: int = 100,
) -> InputHandler:
    """Swallow navigation keys while ``is_active`` holds."""

    def block(key: KeyEvent) -> bool:
        return key.name in NAVIGATION_KEYS

    return create_input_handler(id, priority, block, is_active)


def create_hotkey_handler(
    id: str,
    hotkeys: Iterable[Hotkey],
    is_active: Callable[[], bool] = always,
    priority: int = 200,
) -> InputHandler:
    """Run the first hotkey whose key and modifiers match exactly."""
    registry = KeyComboRegistry()
    for hotkey in hotkeys:
        registry.register_binding(KeyComboBinding((hotkey.chord,), _run_and_consume(hotkey.action)))

    def handle(key: KeyEvent) -> bool:
        return registry.dispatch(key) is True

    return create_input_handler(id, priority, handle, is_active)


def _run_and_consume(action: Callable[[], None]) -> Callable[[], bool]:
    def run() -> bool:
        action()
        return True

    return run


def create_component_handler(
    id: str,
    component: object,
    is_active: Callable[[], bool],
    priority: int = 50,
) -> InputHandler:
    """Delegate keys to ``component.handle_key`` when the component has one."""

    def delegate(key: KeyEvent) -> bool:
        handle_key = getattr(component, "handle_key", None)
        if handle_key is None:
            return False
        return bool(handle_key(key))

    return create_input_handler(id, priority, delegate, is_active)


def create_escape_handler(
    id: str,
    on_escape: Callable[[], None],
    is_active: Callable[[], bool],
    priority: int = 150,
) -> InputHandler:
    """Consume Escape and run ``on_escape``."""

    def handle(key: KeyEvent) -> bool:
        if key.name != "escape":
            return False
        on_escape()
        return True

    return create_input_handler(id, priority, handle, is_active)


def register_modal_context(router: InputRouter, context_id: str = MODAL_CONTEXT_ID) -> InputContext:
    """Register the blocking dialog context on ``router`` and return it."""
    context = InputContext(id=context_id, name="Modal Dialog", blocks_lower_priority=True)
    router.register_context(context)
    return context


__all__ = [
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
