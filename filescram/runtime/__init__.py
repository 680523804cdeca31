"""Public runtime orchestration entry points.

This package groups the interactive navigator bootstrap (`run_navigator`),
the one-shot frame renderer used by ``--render``, and the event loop.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .app import Navigator


def run_navigator(*args, **kwargs):
    """Lazily import the navigator entrypoint to keep package imports light."""
    from .app import run_navigator as _run_navigator

    return _run_navigator(*args, **kwargs)


def render_snapshot(*args, **kwargs):
    from .app import render_snapshot as _render_snapshot

    return _render_snapshot(*args, **kwargs)


def run_main_loop(*args, **kwargs):
    """Lazily import loop runner to avoid package-import cycles."""
    from .loop import run_main_loop as _run_main_loop

    return _run_main_loop(*args, **kwargs)


def __getattr__(name: str):
    if name == "Navigator":
        from . import app as _app

        return _app.Navigator
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "Navigator",
    "render_snapshot",
    "run_main_loop",
    "run_navigator",
]
