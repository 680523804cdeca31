"""Formatting helpers for flattened tree rows."""

from __future__ import annotations

import unicodedata
from pathlib import Path

from ..ui_theme import DEFAULT_THEME, UITheme
from .types import NodeKind, TreeRow

TREE_ICONS = {
    "folder_closed": "▸",
    "folder_open": "▾",
    "file": "·",
    "action": "·",
}


def string_width(text: str) -> int:
    """Return terminal cell width, counting wide East Asian glyphs as two."""
    width = 0
    for ch in text:
        if unicodedata.combining(ch):
            continue
        width += 2 if unicodedata.east_asian_width(ch) in {"W", "F"} else 1
    return width


def pad_icon(icon: str, col: int = 2) -> str:
    """Pad ``icon`` with spaces so labels start at column ``col``."""
    return icon + " " * max(0, col - string_width(icon))


def row_icon(row: TreeRow, expanded: set[Path]) -> str:
    if row.kind is NodeKind.FOLDER:
        return TREE_ICONS["folder_open"] if row.id in expanded else TREE_ICONS["folder_closed"]
    if row.kind is NodeKind.ACTION:
        return TREE_ICONS["action"]
    return TREE_ICONS["file"]


def format_tree_row(row: TreeRow, expanded: set[Path], theme: UITheme | None = None) -> str:
    """Render one row as indented, ANSI-styled ``icon label`` text."""
    active_theme = theme or DEFAULT_THEME
    reset = active_theme.reset
    if row.kind is NodeKind.FOLDER:
        label_color = active_theme.tree_folder
    elif row.kind is NodeKind.ACTION:
        label_color = active_theme.tree_action
    else:
        label_color = active_theme.tree_file
    indent = "  " * row.depth
    icon = pad_icon(row_icon(row, expanded))
    return f"{indent}{active_theme.tree_marker}{icon}{reset} {label_color}{row.label}{reset}"


def plain_tree_row(row: TreeRow, expanded: set[Path]) -> str:
    """Render one row without styling."""
    return f"{'  ' * row.depth}{pad_icon(row_icon(row, expanded))} {row.label}"
