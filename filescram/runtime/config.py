"""Persistent JSON config helpers.

Stores the hidden-file preference, the overlay focus-return policy, and
preview size limits. Malformed or missing config falls back to defaults.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

from ..focus import OverlayHidePolicy
from ..preview import PreviewLimits

LOGGER = logging.getLogger(__name__)

APP_NAME = "filescram"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Write failures are logged and otherwise ignored.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        LOGGER.debug("could not write config %s: %s", CONFIG_PATH, exc)


def load_show_hidden() -> bool:
    """Return persisted hidden-file visibility preference.

    Only explicit boolean values are accepted; anything else means ``True``
    since the navigator lists dotfiles unless told otherwise.
    """
    value = load_config().get("show_hidden")
    return value if isinstance(value, bool) else True


def save_show_hidden(show_hidden: bool) -> None:
    config = load_config()
    config["show_hidden"] = bool(show_hidden)
    save_config(config)


def load_overlay_hide_policy() -> OverlayHidePolicy:
    value = load_config().get("overlay_return")
    try:
        return OverlayHidePolicy(value)
    except ValueError:
        return OverlayHidePolicy.RESTORE_DEFAULT


def save_overlay_hide_policy(policy: OverlayHidePolicy) -> None:
    config = load_config()
    config["overlay_return"] = OverlayHidePolicy(policy).value
    save_config(config)


def _positive_int(value: object) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value > 0 else None


def load_preview_limits() -> PreviewLimits:
    """Load preview byte/line limits; invalid entries keep their defaults."""
    config = load_config()
    defaults = PreviewLimits()
    max_bytes = _positive_int(config.get("preview_max_bytes"))
    max_lines = _positive_int(config.get("preview_max_lines"))
    return PreviewLimits(
        max_bytes=max_bytes if max_bytes is not None else defaults.max_bytes,
        max_lines=max_lines if max_lines is not None else defaults.max_lines,
    )


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "load_config",
    "save_config",
    "load_show_hidden",
    "save_show_hidden",
    "load_overlay_hide_policy",
    "save_overlay_hide_policy",
    "load_preview_limits",
]
