"""Tests for context-stack dispatch in InputRouter."""

from __future__ import annotations

import unittest

from filescram.input import (
    BASE_CONTEXT_ID,
    InputContext,
    InputContextNotFoundError,
    InputHandler,
    InputRouter,
    KeyEvent,
)


def recording_handler(handler_id: str, priority: int, log: list[str], consume: bool = False, active: bool = True) -> InputHandler:
    def handle(key: KeyEvent) -> bool:
        log.append(handler_id)
        return consume

    return InputHandler(id=handler_id, priority=priority, handle_key=handle, can_receive_input=lambda: active)


class InputRouterOrderingTests(unittest.TestCase):
    def test_handlers_run_in_descending_priority_until_one_consumes(self) -> None:
        router = InputRouter()
        log: list[str] = []
        router.register_handler(BASE_CONTEXT_ID, recording_handler("low", 10, log, consume=True))
        router.register_handler(BASE_CONTEXT_ID, recording_handler("high", 90, log))
        router.register_handler(BASE_CONTEXT_ID, recording_handler("mid", 50, log, consume=True))

        self.assertTrue(router.dispatch(KeyEvent("x")))
        self.assertEqual(log, ["high", "mid"])

    def test_inactive_handler_is_skipped(self) -> None:
        router = InputRouter()
        log: list[str] = []
        router.register_handler(BASE_CONTEXT_ID, recording_handler("asleep", 90, log, consume=True, active=False))
        router.register_handler(BASE_CONTEXT_ID, recording_handler("awake", 10, log, consume=True))

        router.dispatch(KeyEvent("x"))

        self.assertEqual(log, ["awake"])

    def test_global_handlers_run_before_contexts(self) -> None:
        router = InputRouter()
        log: list[str] = []
        router.register_handler(BASE_CONTEXT_ID, recording_handler("context", 1000, log, consume=True))
        router.register_global_handler(recording_handler("global", 1, log, consume=True))

        router.dispatch(KeyEvent("x"))

        self.assertEqual(log, ["global"])

    def test_register_handler_replaces_same_id(self) -> None:
        router = InputRouter()
        log: list[str] = []
        router.register_handler(BASE_CONTEXT_ID, recording_handler("tree", 50, log))
        router.register_handler(BASE_CONTEXT_ID, recording_handler("tree", 20, log, consume=True))

        handlers = router.get_context(BASE_CONTEXT_ID).handlers
        self.assertEqual([(handler.id, handler.priority) for handler in handlers], [("tree", 20)])
        self.assertTrue(router.dispatch(KeyEvent("x")))

    def test_unregistered_handlers_no_longer_receive_keys(self) -> None:
        router = InputRouter()
        log: list[str] = []
        router.register_handler(BASE_CONTEXT_ID, recording_handler("a", 1, log))
        router.register_global_handler(recording_handler("g", 1, log))

        router.unregister_handler(BASE_CONTEXT_ID, "a")
        router.unregister_global_handler("g")
        router.unregister_handler("unknown", "a")

        self.assertFalse(router.dispatch(KeyEvent("x")))
        self.assertEqual(log, [])
        self.assertEqual(router.global_handlers, ())


class InputRouterContextTests(unittest.TestCase):
    def test_blocking_context_stops_lower_contexts_even_when_nothing_consumes(self) -> None:
        router = InputRouter()
        log: list[str] = []
        router.register_handler(BASE_CONTEXT_ID, recording_handler("below", 10, log, consume=True))
        router.register_context(InputContext(id="modal", name="Modal", blocks_lower_priority=True))
        router.register_handler("modal", recording_handler("modal-handler", 10, log))
        router.push_context("modal")

        self.assertFalse(router.dispatch(KeyEvent("x")))
        self.assertEqual(log, ["modal-handler"])

    def test_inactive_context_is_skipped_without_blocking(self) -> None:
        router = InputRouter()
        log: list[str] = []
        router.register_handler(BASE_CONTEXT_ID, recording_handler("below", 10, log, consume=True))
        router.register_context(
            InputContext(id="modal", name="Modal", blocks_lower_priority=True, is_active=lambda: False)
        )
        router.register_handler("modal", recording_handler("modal-handler", 10, log, consume=True))
        router.push_context("modal")

        self.assertTrue(router.dispatch(KeyEvent("x")))
        self.assertEqual(log, ["below"])

    def test_non_blocking_context_falls_through(self) -> None:
        router = InputRouter()
        log: list[str] = []
        router.register_handler(BASE_CONTEXT_ID, recording_handler("below", 10, log, consume=True))
        router.register_context(InputContext(id="hint", name="Hint"))
        router.register_handler("hint", recording_handler("observer", 10, log))
        router.push_context("hint")

        self.assertTrue(router.dispatch(KeyEvent("x")))
        self.assertEqual(log, ["observer", "below"])

    def test_push_existing_context_promotes_without_duplicates(self) -> None:
        router = InputRouter()
        router.register_context(InputContext(id="a", name="A"))
        router.register_context(InputContext(id="b", name="B"))
        router.push_context("a")
        router.push_context("b")

        router.push_context("a")

        self.assertEqual(router.context_stack, (BASE_CONTEXT_ID, "b", "a"))
        self.assertEqual(router.current_context().id, "a")

    def test_pop_removes_context_anywhere_in_stack(self) -> None:
        router = InputRouter()
        router.register_context(InputContext(id="a", name="A"))
        router.push_context("a")

        router.pop_context(BASE_CONTEXT_ID)

        self.assertEqual(router.context_stack, ("a",))
        self.assertFalse(router.is_context_active(BASE_CONTEXT_ID))
        self.assertTrue(router.is_context_active("a"))

    def test_unknown_context_references_raise(self) -> None:
        router = InputRouter()
        handler = InputHandler(id="h", priority=1, handle_key=lambda key: True)

        with self.assertRaises(InputContextNotFoundError) as push_error:
            router.push_context("missing")
        with self.assertRaises(InputContextNotFoundError):
            router.register_handler("missing", handler)

        self.assertEqual(push_error.exception.context_id, "missing")
        self.assertEqual(router.context_stack, (BASE_CONTEXT_ID,))

    def test_handler_exceptions_propagate(self) -> None:
        router = InputRouter()

        def explode(key: KeyEvent) -> bool:
            raise RuntimeError("boom")

        router.register_handler(BASE_CONTEXT_ID, InputHandler(id="bad", priority=1, handle_key=explode))

        with self.assertRaises(RuntimeError):
            router.dispatch(KeyEvent("x"))

    def test_debug_info_reports_stack(self) -> None:
        router = InputRouter()

        info = router.debug_info()

        self.assertEqual(info["stack"], [BASE_CONTEXT_ID])
        self.assertEqual(info["current_context"], "File Navigation")


if __name__ == "__main__":
    unittest.main()
