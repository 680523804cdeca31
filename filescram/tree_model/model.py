"""Lazily-materialized tree model with flatten and directional navigation.

``TreeModel`` owns the node tree, the expansion set, the flattened rows and
the selected row index. Folder children are read on first expansion through
an injected async ``read_children`` capability; concurrent expansions of the
same folder share one in-flight read.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine, Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .fs import read_children as read_directory_children
from .navigation import clamp_index, find_node, flatten_nodes, parent_row_index, row_index_for_path, wrap_index
from .types import ChildDescriptor, LoadState, TreeNode, TreeRow

LOGGER = logging.getLogger(__name__)

ChildReader = Callable[[Path], Awaitable[Sequence[ChildDescriptor]]]
Spawner = Callable[[Coroutine[Any, Any, None]], object]

DEFAULT_PAGE_ROWS = 10


def _ignore_node(_node: TreeNode) -> None:
    return None


def _ignore() -> None:
    return None


@dataclass(frozen=True)
class TreeModelCallbacks:
    """Outbound notifications raised by tree navigation."""

    on_activate: Callable[[TreeNode], None] = _ignore_node
    on_selection_changed: Callable[[TreeNode], None] = _ignore_node
    on_go_up: Callable[[], None] = _ignore


class TreeModel:
    """Node tree plus expansion state, flattened rows, and selection."""

    def __init__(
        self,
        read_children: ChildReader = read_directory_children,
        callbacks: TreeModelCallbacks | None = None,
        spawn: Spawner | None = None,
        page_rows: int = DEFAULT_PAGE_ROWS,
    ) -> None:
        self._read_children = read_children
        self.callbacks = callbacks if callbacks is not None else TreeModelCallbacks()
        self._spawn = spawn if spawn is not None else self._spawn_task
        self.page_rows = page_rows
        self._nodes: list[TreeNode] = []
        self._expanded: set[Path] = set()
        self._expand_requests: set[Path] = set()
        self._rows: list[TreeRow] = []
        self._selected_idx = 0
        self._inflight: dict[Path, asyncio.Task[None]] = {}
        self._background: set[asyncio.Task[None]] = set()
        self._root_generation = 0
        self._key_actions: dict[str, Callable[[], bool]] = {
            "right": self.step_into,
            "l": self.step_into,
            "left": self.step_out,
            "h": self.step_out,
            "space": self.toggle_selected,
            "return": self.press_enter,
            "enter": self.press_enter,
            "up": lambda: self.move_selection(-1),
            "k": lambda: self.move_selection(-1),
            "down": lambda: self.move_selection(1),
            "j": lambda: self.move_selection(1),
            "home": self.select_first,
            "end": self.select_last,
            "pageup": lambda: self.page(-1),
            "pagedown": lambda: self.page(1),
        }

    # --- tree state -------------------------------------------------------

    @property
    def nodes(self) -> list[TreeNode]:
        return self._nodes

    @property
    def rows(self) -> list[TreeRow]:
        return self._rows

    @property
    def expanded(self) -> set[Path]:
        """Return a copy of the expansion set."""
        return set(self._expanded)

    def is_expanded(self, path: Path) -> bool:
        return path in self._expanded

    def set_root(self, nodes: Iterable[TreeNode]) -> None:
        """Replace the node set, reset expansion, and select the first row.

        Reads still in flight for the previous tree finish into their
        detached nodes but no longer affect this model.
        """
        self._nodes = list(nodes)
        self._expanded.clear()
        self._expand_requests.clear()
        self._inflight.clear()
        self._root_generation += 1
        self._rows = self.flatten()
        self._selected_idx = 0
        self._notify_selection()

    def flatten(self) -> list[TreeRow]:
        """Return pre-order rows for nodes reachable through expanded folders."""
        return flatten_nodes(self._nodes, self._expanded)

    def find_node(self, path: Path) -> TreeNode | None:
        return find_node(self._nodes, path)

    def refresh(self, keep_index: bool = True) -> None:
        """Recompute rows, keeping the selected index clamped into range."""
        old_idx = self._selected_idx if keep_index else 0
        self._rows = self.flatten()
        self._selected_idx = clamp_index(old_idx, len(self._rows))

    def _rebuild_rows(self, fallback_path: Path | None = None) -> None:
        """Recompute rows and keep selection on the same path when visible."""
        previous = self.selected_row
        self._rows = self.flatten()
        target: int | None = None
        if previous is not None:
            target = row_index_for_path(self._rows, previous.id)
        if target is None and fallback_path is not None:
            target = row_index_for_path(self._rows, fallback_path)
        if target is None:
            target = self._selected_idx
        self._selected_idx = clamp_index(target, len(self._rows))
        current = self.selected_row
        if current is not None and (previous is None or previous.id != current.id):
            self._notify_selection()

    # --- expansion --------------------------------------------------------

    async def expand(self, path: Path) -> None:
        """Expand folder ``path``, reading its children first when unloaded.

        A ``collapse`` issued while the read is running wins: the children
        are still stored, but the folder stays collapsed.
        """
        node = self.find_node(path)
        if node is None or not node.is_folder:
            return
        self._expand_requests.add(path)
        await self._finish_expand(node)

    async def _finish_expand(self, node: TreeNode) -> None:
        path = node.path
        if path not in self._expand_requests:
            return
        generation = self._root_generation
        if node.load_state is not LoadState.LOADED:
            await self._ensure_loaded(node)
            if generation != self._root_generation or path in self._expanded:
                return
        if path not in self._expand_requests:
            LOGGER.debug("expand of %s dropped after collapse", path)
            return
        self._expand_requests.discard(path)
        self._expanded.add(path)
        self._rebuild_rows()

    def collapse(self, path: Path) -> None:
        """Hide children of ``path`` without discarding loaded data.

        Also cancels the intent of any expand still waiting on a read.
        """
        self._expand_requests.discard(path)
        self._expanded.discard(path)
        self._rebuild_rows(fallback_path=path)

    def toggle(self, path: Path) -> None:
        """Collapse an expanded or expanding folder, otherwise expand it.

        Loaded folders expand synchronously; unloaded ones schedule a
        background ``expand`` and return immediately.
        """
        if path in self._expanded or path in self._expand_requests:
            self.collapse(path)
            return
        self.request_expand(path)

    def request_expand(self, path: Path) -> None:
        """Expand ``path`` now when loaded, otherwise schedule it in the background."""
        node = self.find_node(path)
        if node is None or not node.is_folder or path in self._expanded:
            return
        if node.load_state is LoadState.LOADED:
            self._expanded.add(path)
            self._rebuild_rows()
            return
        self._expand_requests.add(path)
        self._spawn(self._finish_expand(node))

    async def _ensure_loaded(self, node: TreeNode) -> None:
        task = self._inflight.get(node.path)
        if node.load_state is LoadState.PENDING and task is not None:
            LOGGER.debug("joining in-flight read for %s", node.path)
            await asyncio.shield(task)
            return
        node.load_state = LoadState.PENDING
        task = asyncio.get_running_loop().create_task(self._load_children(node))
        self._inflight[node.path] = task
        await asyncio.shield(task)

    async def _load_children(self, node: TreeNode) -> None:
        try:
            try:
                children = await self._read_children(node.path)
            except OSError as exc:
                LOGGER.debug("reading %s failed: %s", node.path, exc)
                children = []
            except BaseException:
                node.load_state = LoadState.UNLOADED
                raise
            node.children = [child.to_node() for child in children]
            node.load_state = LoadState.LOADED
        finally:
            if self._inflight.get(node.path) is asyncio.current_task():
                del self._inflight[node.path]

    def is_loading(self, path: Path) -> bool:
        return path in self._inflight

    def _spawn_task(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
        task = asyncio.get_running_loop().create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background_done)
        return task

    def _background_done(self, task: asyncio.Task[None]) -> None:
        self._background.discard(task)
        if not task.cancelled() and task.exception() is not None:
            LOGGER.error("background expand failed", exc_info=task.exception())

    async def wait_for_loads(self) -> None:
        """Wait until every scheduled expansion and in-flight read finishes."""
        while self._background or self._inflight:
            pending = [*self._background, *self._inflight.values()]
            await asyncio.gather(*pending, return_exceptions=True)

    # --- selection --------------------------------------------------------

    @property
    def selected_index(self) -> int:
        return self._selected_idx

    @property
    def selected_row(self) -> TreeRow | None:
        if not self._rows:
            return None
        return self._rows[clamp_index(self._selected_idx, len(self._rows))]

    @property
    def selected_node(self) -> TreeNode | None:
        row = self.selected_row
        return self.find_node(row.id) if row is not None else None

    def _notify_selection(self) -> None:
        node = self.selected_node
        if node is not None:
            self.callbacks.on_selection_changed(node)

    def select_index(self, idx: int) -> bool:
        """Select row ``idx`` (clamped); return whether selection moved."""
        if not self._rows:
            return False
        target = clamp_index(idx, len(self._rows))
        if target == self._selected_idx:
            return False
        self._selected_idx = target
        self._notify_selection()
        return True

    def select_path(self, path: Path) -> bool:
        idx = row_index_for_path(self._rows, path)
        if idx is None:
            return False
        self.select_index(idx)
        return True

    def move_selection(self, delta: int, wrap: bool = True) -> bool:
        """Move selection by ``delta`` rows, wrapping at list ends by default."""
        if not self._rows:
            return False
        target = self._selected_idx + delta
        if wrap:
            target = wrap_index(target, len(self._rows))
        self.select_index(target)
        return True

    def select_first(self) -> bool:
        self.select_index(0)
        return bool(self._rows)

    def select_last(self) -> bool:
        self.select_index(len(self._rows) - 1)
        return bool(self._rows)

    def page(self, direction: int) -> bool:
        """Move selection one page up or down without wrapping."""
        return self.move_selection(direction * max(1, self.page_rows), wrap=False)

    # --- directional navigation -------------------------------------------

    def step_into(self) -> bool:
        """Right: activate the selected folder; files are not consumed."""
        node = self.selected_node
        if node is None or not node.is_folder:
            return False
        self.callbacks.on_activate(node)
        return True

    def step_out(self) -> bool:
        """Left: leave the tree at depth 0, otherwise walk to the visible parent."""
        row = self.selected_row
        if row is None:
            return False
        if row.depth == 0:
            self.callbacks.on_go_up()
            return True
        parent_idx = parent_row_index(self._rows, self._selected_idx)
        if parent_idx is None:
            return False
        self.select_index(parent_idx)
        return True

    def toggle_selected(self) -> bool:
        """Space: toggle the selected folder; never activates anything."""
        node = self.selected_node
        if node is None or not node.is_folder:
            return False
        self.toggle(node.path)
        return True

    def press_enter(self) -> bool:
        """Enter: toggle folders, activate files and actions."""
        node = self.selected_node
        if node is None:
            return False
        if node.is_folder:
            self.toggle(node.path)
        else:
            self.callbacks.on_activate(node)
        return True

    def handle_key(self, key: Any) -> bool:
        """Apply one navigation key; return whether it was consumed.

        Chords with Ctrl or Alt are left for hotkey handlers.
        """
        if getattr(key, "ctrl", False) or getattr(key, "alt", False):
            return False
        action = self._key_actions.get(key.name)
        if action is None:
            return False
        return action()


__all__ = [
    "ChildReader",
    "TreeModel",
    "TreeModelCallbacks",
]
