"""Focus coordination across the tree, preview, and overlay surfaces.

Exactly one surface is stored as focused. While the overlay is visible it
is the effective focus regardless of the stored value, and every attempt to
move focus elsewhere is ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from enum import Enum
from typing import Protocol

LOGGER = logging.getLogger(__name__)


class Surface(str, Enum):
    """Logical surfaces that can hold keyboard focus."""

    TREE = "tree"
    PREVIEW = "preview"
    OVERLAY = "overlay"


class Focusable(Protocol):
    """Capability implemented by every concrete surface."""

    def focus(self) -> None: ...

    def blur(self) -> None: ...


class OverlayHidePolicy(str, Enum):
    """Where focus goes when the overlay closes."""

    RESTORE_DEFAULT = "default"
    RESTORE_PREVIOUS = "previous"


DEFAULT_TAB_ORDER: tuple[Surface, ...] = (Surface.TREE, Surface.PREVIEW)


class FocusCoordinator:
    """Track the focused surface and enforce overlay modal exclusivity."""

    def __init__(
        self,
        default_surface: Surface = Surface.TREE,
        tab_order: Sequence[Surface] = DEFAULT_TAB_ORDER,
        hide_policy: OverlayHidePolicy = OverlayHidePolicy.RESTORE_DEFAULT,
    ) -> None:
        if Surface.OVERLAY in tab_order:
            raise ValueError("overlay cannot be part of the tab order")
        if not tab_order:
            raise ValueError("tab order must name at least one surface")
        self.default_surface = default_surface
        self.tab_order: tuple[Surface, ...] = tuple(tab_order)
        self.hide_policy = hide_policy
        self._current = default_surface
        self._before_overlay = default_surface
        self._overlay_visible = False
        self._surfaces: dict[Surface, Focusable] = {}

    def set_surface(self, surface: Surface, component: Focusable) -> None:
        """Attach the concrete component that implements ``surface``."""
        self._surfaces[surface] = component

    @property
    def overlay_visible(self) -> bool:
        return self._overlay_visible

    @property
    def stored_focus(self) -> Surface:
        """Return the stored focus, ignoring the overlay override."""
        return self._current

    @property
    def current_focus(self) -> Surface:
        """Return the effective focus."""
        return Surface.OVERLAY if self._overlay_visible else self._current

    def set_focus(self, surface: Surface) -> None:
        """Focus ``surface`` unless the visible overlay holds focus exclusively."""
        if self._overlay_visible and surface is not Surface.OVERLAY:
            LOGGER.debug("focus to %s ignored while overlay visible", surface.value)
            return
        self._current = surface
        self._apply_focus()

    def set_overlay_visible(self, visible: bool) -> None:
        """Show or hide the overlay; showing it takes focus.

        On hide the focus goes where ``hide_policy`` says: the default
        surface, or whichever surface held focus when the overlay opened.
        """
        if visible:
            if not self._overlay_visible and self._current is not Surface.OVERLAY:
                self._before_overlay = self._current
            self._overlay_visible = True
            self.set_focus(Surface.OVERLAY)
            return
        self._overlay_visible = False
        if self._current is Surface.OVERLAY:
            self.set_focus(self._restore_target())

    def _restore_target(self) -> Surface:
        if self.hide_policy is OverlayHidePolicy.RESTORE_PREVIOUS:
            return self._before_overlay
        return self.default_surface

    def tab_to_next(self) -> None:
        self._tab(1)

    def tab_to_previous(self) -> None:
        self._tab(-1)

    def _tab(self, step: int) -> None:
        if self._overlay_visible:
            return
        try:
            idx = self.tab_order.index(self._current)
        except ValueError:
            idx = -1 if step > 0 else 0
        self.set_focus(self.tab_order[(idx + step) % len(self.tab_order)])

    def _apply_focus(self) -> None:
        """Blur every registered surface, then focus the effective one."""
        for component in self._surfaces.values():
            component.blur()
        target = self._surfaces.get(self.current_focus)
        if target is not None:
            target.focus()
        LOGGER.debug("focus -> %s", self.current_focus.value)

    # --- input predicates -------------------------------------------------

    def can_receive_input(self, surface: Surface) -> bool:
        """Return whether ``surface`` may accept keys right now."""
        if surface is Surface.OVERLAY:
            return self._overlay_visible
        return not self._overlay_visible and self._current is surface

    def input_predicate(self, surface: Surface) -> Callable[[], bool]:
        """Return a zero-arg predicate suitable for ``InputHandler`` wiring."""
        return lambda: self.can_receive_input(surface)

    def can_tree_receive_input(self) -> bool:
        return self.can_receive_input(Surface.TREE)

    def can_preview_receive_input(self) -> bool:
        return self.can_receive_input(Surface.PREVIEW)

    def can_overlay_receive_input(self) -> bool:
        return self.can_receive_input(Surface.OVERLAY)

    def debug_info(self) -> dict[str, object]:
        return {
            "current_focus": self._current.value,
            "overlay_visible": self._overlay_visible,
            "effective_focus": self.current_focus.value,
        }


__all__ = [
    "DEFAULT_TAB_ORDER",
    "Focusable",
    "FocusCoordinator",
    "OverlayHidePolicy",
    "Surface",
]
