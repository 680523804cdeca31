"""Runtime composition layer for filescram.

``Navigator`` owns one input router, one focus coordinator, one tree model,
the preview pane and the overlay, and wires them together at construction.
``run_navigator`` and ``render_snapshot`` are the entry points used by the
CLI.
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from collections.abc import Callable, Sequence
from functools import partial
from pathlib import Path

from ..focus import FocusCoordinator, OverlayHidePolicy, Surface
from ..input import (
    Hotkey,
    InputContext,
    InputRouter,
    KeyEvent,
    create_component_handler,
    create_escape_handler,
    create_hotkey_handler,
)
from ..overlay import (
    OVERLAY_PLACEHOLDER,
    OVERLAY_TITLE,
    OverlayCallbacks,
    OverlayInput,
    SubmissionKind,
    parse_submission,
)
from ..preview import (
    PreviewDocument,
    PreviewLimits,
    build_file_preview,
    build_preview,
    help_document,
    message_document,
)
from ..tree_model import ChildReader, TreeModel, TreeModelCallbacks, TreeNode, build_root_node, read_children
from ..tree_model.model import Spawner
from ..ui_theme import UITheme, theme_for
from .render import FrameState, render_frame

LOGGER = logging.getLogger(__name__)

OVERLAY_CONTEXT_ID = "overlay"
PREVIEW_PAGE_ROWS = 10


def _ignore_flag(_value: bool) -> None:
    return None


class PreviewPane:
    """Scrollable holder for the current ``PreviewDocument``."""

    def __init__(self, document: PreviewDocument | None = None, page_rows: int = PREVIEW_PAGE_ROWS) -> None:
        self.document = document or message_document("Preview", "Select a file to preview its contents.")
        self.scroll = 0
        self.page_rows = page_rows
        self.focused = False

    def show(self, document: PreviewDocument) -> None:
        self.document = document
        self.scroll = 0

    def scroll_by(self, delta: int) -> bool:
        max_scroll = max(0, len(self.document.lines) - 1)
        self.scroll = max(0, min(max_scroll, self.scroll + delta))
        return True

    def handle_key(self, key: KeyEvent) -> bool:
        if key.ctrl or key.alt:
            return False
        steps = {
            "up": -1,
            "k": -1,
            "down": 1,
            "j": 1,
            "pageup": -self.page_rows,
            "pagedown": self.page_rows,
            "home": -len(self.document.lines),
            "end": len(self.document.lines),
        }
        delta = steps.get(key.name)
        if delta is None:
            return False
        return self.scroll_by(delta)

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False


class TreePane:
    """Focus holder for the tree surface; keys go straight to the model."""

    def __init__(self) -> None:
        self.focused = False

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False


class Navigator:
    """Two-pane file navigator with a search/path/command overlay."""

    def __init__(
        self,
        root: Path,
        *,
        read_children: ChildReader | None = None,
        show_hidden: bool = True,
        hide_policy: OverlayHidePolicy = OverlayHidePolicy.RESTORE_DEFAULT,
        preview_limits: PreviewLimits | None = None,
        spawn: Spawner | None = None,
        on_show_hidden_changed: Callable[[bool], None] = _ignore_flag,
        theme: UITheme | None = None,
    ) -> None:
        self.current_dir = root.resolve()
        self.show_hidden = show_hidden
        self.preview_limits = preview_limits or PreviewLimits()
        self.on_show_hidden_changed = on_show_hidden_changed
        self.theme = theme or theme_for(no_color=False)
        self.running = True
        self.status = ""
        self._dirty = True
        self._rendered_rows: object = None
        self._preview_task: asyncio.Task[None] | None = None

        self.router = InputRouter()
        self.focus = FocusCoordinator(hide_policy=hide_policy)
        self.tree = TreeModel(
            read_children=read_children or self._read_children,
            callbacks=TreeModelCallbacks(
                on_activate=self.activate,
                on_selection_changed=self.preview_node,
                on_go_up=self.go_up,
            ),
            spawn=spawn,
        )
        self.tree_pane = TreePane()
        self.preview = PreviewPane()
        self.overlay = OverlayInput(
            callbacks=OverlayCallbacks(on_submit=self.submit_overlay, on_cancel=self.close_overlay),
        )
        self.focus.set_surface(Surface.TREE, self.tree_pane)
        self.focus.set_surface(Surface.PREVIEW, self.preview)
        self.focus.set_surface(Surface.OVERLAY, self.overlay)
        self._register_input()
        self.focus.set_focus(Surface.TREE)

    async def _read_children(self, path: Path):
        return await read_children(path, self.show_hidden)

    # --- input wiring -----------------------------------------------------

    def _register_input(self) -> None:
        focus = self.focus

        def overlay_closed() -> bool:
            return not focus.overlay_visible

        self.router.register_global_handler(
            create_hotkey_handler(
                "global-interrupt",
                [Hotkey("c", self.quit, ctrl=True)],
                priority=300,
            )
        )
        self.router.register_global_handler(
            create_hotkey_handler(
                "global-overlay",
                [
                    Hotkey("f", self.open_overlay, ctrl=True),
                    Hotkey("l", self.open_overlay, ctrl=True),
                    Hotkey("/", partial(self.open_overlay, "/")),
                ],
                is_active=overlay_closed,
            )
        )
        self.router.register_global_handler(
            create_hotkey_handler(
                "global-focus",
                [
                    Hotkey("tab", focus.tab_to_next),
                    Hotkey("tab", focus.tab_to_previous, shift=True),
                ],
                is_active=overlay_closed,
            )
        )
        self.router.register_global_handler(
            create_hotkey_handler(
                "global-quit",
                [Hotkey("q", self.quit)],
                is_active=focus.can_tree_receive_input,
                priority=190,
            )
        )

        self.router.register_context(
            InputContext(
                id=OVERLAY_CONTEXT_ID,
                name="Search Overlay",
                blocks_lower_priority=True,
                is_active=lambda: focus.overlay_visible,
            )
        )
        self.router.register_handler(
            OVERLAY_CONTEXT_ID,
            create_escape_handler("overlay-escape", self.overlay.cancel, focus.can_overlay_receive_input),
        )
        self.router.register_handler(
            OVERLAY_CONTEXT_ID,
            create_component_handler("overlay-input", self.overlay, focus.can_overlay_receive_input),
        )

        base = self.router.base_context_id
        self.router.register_handler(
            base,
            create_component_handler("tree", self.tree, focus.input_predicate(Surface.TREE)),
        )
        self.router.register_handler(
            base,
            create_component_handler("preview", self.preview, focus.can_preview_receive_input, priority=40),
        )

    def handle_key(self, key: KeyEvent) -> bool:
        """Route one key through the input router and mark the frame dirty."""
        consumed = self.router.dispatch(key)
        self._dirty = True
        return consumed

    # --- tree orchestration -----------------------------------------------

    def reroot(self, path: Path) -> None:
        """Show directory ``path`` as a single expanded root."""
        self.current_dir = path.resolve()
        LOGGER.debug("reroot %s", self.current_dir)
        root = build_root_node(self.current_dir)
        self.tree.set_root([root])
        self.tree.request_expand(root.path)
        self.show_document(message_document("Preview", "Select a file to preview its contents."))

    def go_up(self) -> None:
        parent = self.current_dir.parent
        if parent != self.current_dir:
            self.reroot(parent)

    def activate(self, node: TreeNode) -> None:
        """Folders become the new root; files and actions are previewed."""
        if node.is_folder:
            self.reroot(node.path)
            return
        self.preview_node(node)

    def preview_node(self, node: TreeNode) -> None:
        self._load_preview(partial(build_preview, node, self.preview_limits))

    def preview_path(self, path: Path) -> None:
        self._load_preview(partial(build_file_preview, path, self.preview_limits))

    def show_document(self, document: PreviewDocument) -> None:
        """Show ``document`` now, dropping any preview still being read."""
        self._cancel_preview()
        self.preview.show(document)
        self._dirty = True

    def _load_preview(self, build: Callable[[], PreviewDocument]) -> None:
        """Build a preview on a worker thread; a newer request supersedes it."""
        self._cancel_preview()
        self._preview_task = asyncio.get_running_loop().create_task(self._show_built_preview(build))

    async def _show_built_preview(self, build: Callable[[], PreviewDocument]) -> None:
        document = await asyncio.to_thread(build)
        self.preview.show(document)
        self._dirty = True

    def _cancel_preview(self) -> None:
        if self._preview_task is not None and not self._preview_task.done():
            self._preview_task.cancel()
        self._preview_task = None

    def set_show_hidden(self, show_hidden: bool) -> None:
        self.show_hidden = show_hidden
        self.on_show_hidden_changed(show_hidden)
        self.reroot(self.current_dir)

    # --- overlay ----------------------------------------------------------

    def open_overlay(self, initial: str = "") -> None:
        self.overlay.show(initial)
        self.focus.set_overlay_visible(True)
        self.router.push_context(OVERLAY_CONTEXT_ID)
        self._dirty = True

    def close_overlay(self) -> None:
        if self.overlay.visible:
            self.overlay.hide()
        self.focus.set_overlay_visible(False)
        self.router.pop_context(OVERLAY_CONTEXT_ID)
        self._dirty = True

    def submit_overlay(self, text: str) -> None:
        """Close the overlay, then run a ``/command`` or open a path."""
        self.close_overlay()
        submission = parse_submission(text)
        if submission is None:
            return
        if submission.kind is SubmissionKind.COMMAND:
            self.run_command(submission.command, submission.args)
            return
        self.open_path(submission.text)

    def open_path(self, text: str) -> None:
        """Re-root on a directory, preview a file, otherwise report a search."""
        candidate = Path(text).expanduser()
        if not candidate.is_absolute():
            candidate = self.current_dir / candidate
        try:
            is_dir = candidate.is_dir()
            exists = is_dir or candidate.exists()
        except OSError:
            exists = False
        if not exists:
            self.show_document(message_document("Search", f'Search for "{text}" not implemented yet.'))
            return
        if is_dir:
            self.reroot(candidate)
            return
        self.preview_path(candidate.resolve())

    def run_command(self, command: str, args: Sequence[str] = ()) -> None:
        LOGGER.debug("command /%s %s", command, list(args))
        if command == "help":
            self.show_document(help_document(self.preview_limits))
        elif command == "up":
            self.go_up()
        elif command == "home":
            self.reroot(Path.home())
        elif command == "root":
            self.reroot(Path(self.current_dir.anchor or os.sep))
        elif command == "hidden":
            self.set_show_hidden(not self.show_hidden)
        elif command in {"search", "find"}:
            message = f"Search functionality not implemented yet.\nArgs: {' '.join(args)}"
            self.show_document(message_document("Search", message))
        else:
            message = f"Unknown command: /{command}\nType /help for available commands."
            self.show_document(message_document("Unknown Command", message))
        self._dirty = True

    # --- lifecycle and frames ---------------------------------------------

    def quit(self) -> None:
        self.running = False

    def mark_dirty(self) -> None:
        self._dirty = True

    @property
    def needs_render(self) -> bool:
        """Return whether input or a finished background load changed the view."""
        return self._dirty or self.tree.rows is not self._rendered_rows

    def frame_state(self) -> FrameState:
        return FrameState(
            root=self.current_dir,
            rows=self.tree.rows,
            expanded=self.tree.expanded,
            selected_index=self.tree.selected_index,
            focus=self.focus.current_focus,
            preview=self.preview.document,
            preview_scroll=self.preview.scroll,
            loading=self.tree.is_loading(self.current_dir),
            overlay_visible=self.overlay.visible,
            overlay_title=OVERLAY_TITLE,
            overlay_value=self.overlay.value,
            overlay_placeholder=OVERLAY_PLACEHOLDER,
            overlay_help=self.overlay.help_text(),
            status=self.status,
        )

    def render(self, columns: int, rows: int) -> str:
        """Compose the current frame and clear the dirty flag."""
        frame = render_frame(self.frame_state(), columns, rows, self.theme)
        self._dirty = False
        self._rendered_rows = self.tree.rows
        return frame

    async def shutdown(self) -> None:
        """Wait for directory reads, then for the pending preview."""
        await self.tree.wait_for_loads()
        if self._preview_task is not None:
            await asyncio.gather(self._preview_task, return_exceptions=True)


def _build_navigator(
    root: Path,
    preview_file: Path | None,
    **options,
) -> Navigator:
    navigator = Navigator(root, **options)
    navigator.reroot(root)
    if preview_file is not None:
        navigator.preview_path(preview_file.resolve())
    return navigator


async def render_snapshot(
    root: Path,
    columns: int,
    rows: int,
    preview_file: Path | None = None,
    **options,
) -> str:
    """Load the root listing and return one frame without entering raw mode."""
    navigator = _build_navigator(root, preview_file, **options)
    await navigator.shutdown()
    return navigator.render(columns, rows)


async def run_navigator(
    root: Path,
    preview_file: Path | None = None,
    stdin_fd: int | None = None,
    stdout_fd: int | None = None,
    **options,
) -> None:
    """Run the interactive navigator until the user quits."""
    from .loop import run_main_loop
    from .terminal import TerminalController

    stdin_fd = sys.stdin.fileno() if stdin_fd is None else stdin_fd
    stdout_fd = sys.stdout.fileno() if stdout_fd is None else stdout_fd
    terminal = TerminalController(stdin_fd, stdout_fd)
    navigator = _build_navigator(root, preview_file, **options)
    try:
        with terminal.raw_mode():
            await run_main_loop(navigator, terminal, stdin_fd)
    finally:
        await navigator.shutdown()


__all__ = [
    "Navigator",
    "PreviewPane",
    "TreePane",
    "render_snapshot",
    "run_navigator",
]
