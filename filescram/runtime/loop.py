"""Main interactive event loop for the terminal UI.

Renders when the navigator reports a change, waits for stdin through the
asyncio event loop with a short timeout, and dispatches decoded keys.
Directory reads scheduled by the tree model make progress between polls.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ..input import KeyReader

if TYPE_CHECKING:
    from .app import Navigator
    from .terminal import TerminalController

LOGGER = logging.getLogger(__name__)

POLL_INTERVAL_MS = 120


async def wait_readable(fd: int, timeout_ms: int) -> bool:
    """Return whether ``fd`` became readable within ``timeout_ms``."""
    loop = asyncio.get_running_loop()
    ready = loop.create_future()

    def mark_ready() -> None:
        if not ready.done():
            ready.set_result(True)

    loop.add_reader(fd, mark_ready)
    try:
        await asyncio.wait_for(ready, timeout_ms / 1000.0)
        return True
    except asyncio.TimeoutError:
        return False
    finally:
        loop.remove_reader(fd)


async def run_main_loop(
    navigator: Navigator,
    terminal: TerminalController,
    stdin_fd: int,
    poll_ms: int = POLL_INTERVAL_MS,
) -> None:
    """Run until ``navigator.running`` turns false.

    Exceptions raised by key handlers propagate to the caller, which is
    expected to hold the terminal in ``raw_mode()`` so it is restored.
    """
    reader = KeyReader(stdin_fd)
    last_size: tuple[int, int] | None = None
    while navigator.running:
        size = terminal.size()
        if size != last_size:
            last_size = size
            navigator.mark_dirty()
        if navigator.needs_render:
            terminal.write(navigator.render(*size))

        if reader.has_pending or await wait_readable(stdin_fd, poll_ms):
            key = reader.read_key(timeout_ms=0)
            if key is not None:
                LOGGER.debug("key %s", key)
                navigator.handle_key(key)
        await asyncio.sleep(0)


__all__ = ["POLL_INTERVAL_MS", "run_main_loop", "wait_readable"]
