"""Context-stack key router.

``InputRouter`` resolves one ``KeyEvent`` to at most one consuming handler.
Global handlers run first; then contexts are scanned from the top of the
stack down. A context whose ``is_active`` predicate fails is skipped, and a
context flagged ``blocks_lower_priority`` stops the scan whether or not any
of its handlers consumed the key.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from .events import KeyEvent

LOGGER = logging.getLogger(__name__)

BASE_CONTEXT_ID = "navigation"


def always() -> bool:
    return True


@dataclass(frozen=True)
class InputHandler:
    """Prioritized key consumer gated by its own input predicate."""

    id: str
    priority: int
    handle_key: Callable[[KeyEvent], bool]
    can_receive_input: Callable[[], bool] = always


@dataclass
class InputContext:
    """Named modal scope holding handlers sorted by descending priority."""

    id: str
    name: str
    handlers: list[InputHandler] = field(default_factory=list)
    blocks_lower_priority: bool = False
    is_active: Callable[[], bool] | None = None

    def __post_init__(self) -> None:
        self.handlers = _sorted_handlers(self.handlers)


class InputContextNotFoundError(LookupError):
    """Raised when a context id is referenced before it is registered."""

    def __init__(self, context_id: str) -> None:
        super().__init__(f"Context {context_id!r} not found")
        self.context_id = context_id


def _sorted_handlers(handlers: Iterable[InputHandler]) -> list[InputHandler]:
    return sorted(handlers, key=lambda handler: -handler.priority)


def _replace_handler(handlers: list[InputHandler], handler: InputHandler) -> list[InputHandler]:
    kept = [existing for existing in handlers if existing.id != handler.id]
    kept.append(handler)
    return _sorted_handlers(kept)


def _offer(handlers: Iterable[InputHandler], key: KeyEvent) -> InputHandler | None:
    """Return the first handler that accepts input and consumes ``key``."""
    for handler in handlers:
        if handler.can_receive_input() and handler.handle_key(key):
            return handler
    return None


class InputRouter:
    """Dispatch keys through global handlers and a stack of input contexts.

    The base context (``"navigation"`` by default) is registered and pushed
    on construction.
    """

    def __init__(self, base_context_id: str = BASE_CONTEXT_ID, base_context_name: str = "File Navigation") -> None:
        self._contexts: dict[str, InputContext] = {}
        self._stack: list[str] = []
        self._global_handlers: list[InputHandler] = []
        self.base_context_id = base_context_id
        self.register_context(InputContext(id=base_context_id, name=base_context_name))
        self.push_context(base_context_id)

    # --- contexts ---------------------------------------------------------

    def register_context(self, context: InputContext) -> None:
        """Register (or replace) a context definition by id."""
        self._contexts[context.id] = context

    def get_context(self, context_id: str) -> InputContext:
        try:
            return self._contexts[context_id]
        except KeyError:
            raise InputContextNotFoundError(context_id) from None

    def push_context(self, context_id: str) -> None:
        """Move ``context_id`` to the top of the stack, adding it if absent."""
        self.get_context(context_id)
        self._stack = [existing for existing in self._stack if existing != context_id]
        self._stack.append(context_id)
        LOGGER.debug("push context %s -> %s", context_id, self._stack)

    def pop_context(self, context_id: str) -> None:
        """Remove ``context_id`` from the stack wherever it sits."""
        self._stack = [existing for existing in self._stack if existing != context_id]
        LOGGER.debug("pop context %s -> %s", context_id, self._stack)

    def current_context(self) -> InputContext | None:
        if not self._stack:
            return None
        return self._contexts.get(self._stack[-1])

    def is_context_active(self, context_id: str) -> bool:
        """Return whether ``context_id`` is currently on the stack."""
        return context_id in self._stack

    @property
    def context_stack(self) -> tuple[str, ...]:
        """Return stack bottom-to-top."""
        return tuple(self._stack)

    # --- handlers ---------------------------------------------------------

    def register_handler(self, context_id: str, handler: InputHandler) -> None:
        """Add ``handler`` to a context, replacing any handler with same id."""
        context = self.get_context(context_id)
        context.handlers = _replace_handler(context.handlers, handler)

    def unregister_handler(self, context_id: str, handler_id: str) -> None:
        context = self._contexts.get(context_id)
        if context is None:
            return
        context.handlers = [handler for handler in context.handlers if handler.id != handler_id]

    def register_global_handler(self, handler: InputHandler) -> None:
        """Add a context-independent handler, replacing any with same id."""
        self._global_handlers = _replace_handler(self._global_handlers, handler)

    def unregister_global_handler(self, handler_id: str) -> None:
        self._global_handlers = [handler for handler in self._global_handlers if handler.id != handler_id]

    @property
    def global_handlers(self) -> tuple[InputHandler, ...]:
        return tuple(self._global_handlers)

    # --- dispatch ---------------------------------------------------------

    def dispatch(self, key: KeyEvent) -> bool:
        """Route ``key`` to at most one handler; return whether it was consumed."""
        if _offer(self._global_handlers, key) is not None:
            return True

        for context_id in reversed(self._stack):
            context = self._contexts.get(context_id)
            if context is None:
                continue
            if context.is_active is not None and not context.is_active():
                continue
            if _offer(context.handlers, key) is not None:
                return True
            if context.blocks_lower_priority:
                LOGGER.debug("key %s blocked by context %s", key.name, context.id)
                return False

        LOGGER.debug("key %s not consumed", key.name)
        return False

    def debug_info(self) -> dict[str, object]:
        current = self.current_context()
        return {
            "contexts": list(self._contexts),
            "stack": list(self._stack),
            "current_context": current.name if current is not None else "none",
        }


__all__ = [
    "BASE_CONTEXT_ID",
    "InputContext",
    "InputContextNotFoundError",
    "InputHandler",
    "InputRouter",
    "always",
]
