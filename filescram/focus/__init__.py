"""Focus coordination: surface enum, focusable protocol, coordinator."""

from __future__ import annotations

from .coordinator import DEFAULT_TAB_ORDER, FocusCoordinator, Focusable, OverlayHidePolicy, Surface

__all__ = [
    "DEFAULT_TAB_ORDER",
    "Focusable",
    "FocusCoordinator",
    "OverlayHidePolicy",
    "Surface",
]
