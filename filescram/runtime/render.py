"""Frame composition for the split tree/preview terminal view.

``render_frame`` is pure: it turns a ``FrameState`` snapshot into one
ANSI string (cursor-home, clear, then every screen row) that the loop
writes in a single call.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..focus import Surface
from ..preview import PreviewDocument
from ..tree_model import TreeRow, format_tree_row, plain_tree_row
from ..tree_model.rendering import string_width
from ..ui_theme import DEFAULT_THEME, UITheme

APP_TITLE = "FILE SCRAM"
FOOTER_HINT = "→ step into | ← step out | Space/Enter toggle | Ctrl+F search | / commands | Tab pane | q quit"
MIN_TREE_WIDTH = 24
OVERLAY_WIDTH = 60


@dataclass
class FrameState:
    """Everything one frame needs, captured from the navigator."""

    root: Path
    rows: list[TreeRow]
    expanded: set[Path]
    selected_index: int
    focus: Surface
    preview: PreviewDocument
    preview_scroll: int = 0
    loading: bool = False
    overlay_visible: bool = False
    overlay_title: str = ""
    overlay_value: str = ""
    overlay_placeholder: str = ""
    overlay_help: str = ""
    status: str = ""


def clip_text(text: str, width: int) -> str:
    """Clip plain ``text`` to ``width`` terminal cells."""
    if width <= 0:
        return ""
    out: list[str] = []
    used = 0
    for ch in text:
        ch_width = string_width(ch)
        if used + ch_width > width:
            break
        out.append(ch)
        used += ch_width
    return "".join(out)


def pad_text(text: str, width: int) -> str:
    """Clip plain ``text`` and pad it with spaces to exactly ``width`` cells."""
    clipped = clip_text(text, width)
    return clipped + " " * max(0, width - string_width(clipped))


def tree_pane_width(columns: int) -> int:
    return max(min(MIN_TREE_WIDTH, columns), min(columns - 1, (columns * 2) // 5))


def tree_scroll_start(selected: int, total: int, visible: int) -> int:
    """Return the first visible row index that keeps ``selected`` on screen."""
    if visible <= 0 or total <= visible:
        return 0
    start = max(0, selected - visible + 1)
    return min(start, total - visible)


def _pane_title(title: str, width: int, focused: bool, theme: UITheme) -> str:
    marker = "▶ " if focused else "  "
    color = theme.pane_title_focused if focused else theme.pane_title
    return f"{color}{pad_text(marker + title, width)}{theme.reset}"


def _tree_line(row: TreeRow, state: FrameState, selected: bool, width: int, theme: UITheme) -> str:
    plain = plain_tree_row(row, state.expanded)
    if selected:
        return f"{theme.reverse}{pad_text(plain, width)}{theme.reset}"
    if string_width(plain) > width:
        return pad_text(plain, width)
    styled = format_tree_row(row, state.expanded, theme)
    return styled + " " * (width - string_width(plain))


def _tree_lines(state: FrameState, width: int, height: int, theme: UITheme) -> list[str]:
    title = "Files (loading…)" if state.loading else "Files"
    lines = [_pane_title(title, width, state.focus is Surface.TREE, theme)]
    visible = max(0, height - 1)
    start = tree_scroll_start(state.selected_index, len(state.rows), visible)
    for idx in range(start, min(len(state.rows), start + visible)):
        lines.append(_tree_line(state.rows[idx], state, idx == state.selected_index, width, theme))
    while len(lines) < height:
        lines.append(" " * width)
    return lines[:height]


def _preview_lines(state: FrameState, width: int, height: int, theme: UITheme) -> list[str]:
    lines = [_pane_title(state.preview.title or "Preview", width, state.focus is Surface.PREVIEW, theme)]
    body = state.preview.lines
    scroll = max(0, min(state.preview_scroll, max(0, len(body) - 1)))
    for text in body[scroll : scroll + max(0, height - 1)]:
        lines.append(pad_text(text.expandtabs(4), width))
    while len(lines) < height:
        lines.append(" " * width)
    return lines[:height]


def _overlay_box(state: FrameState, width: int, theme: UITheme) -> list[str]:
    inner = max(1, width - 2)
    title = f" {state.overlay_title} " if state.overlay_title else ""
    title = clip_text(title, inner)
    top = "┌" + title + "─" * max(0, inner - string_width(title)) + "┐"
    value = state.overlay_value
    if value:
        input_text = f"> {value}"
        if string_width(input_text) > inner:
            input_text = "> …" + value[-max(1, inner - 4) :]
        input_line = pad_text(input_text, inner)
    else:
        input_line = f"{theme.dim}{pad_text('> ' + state.overlay_placeholder, inner)}{theme.reset}"
    border = theme.overlay_border
    reset = theme.reset
    return [
        f"{border}{top}{reset}",
        f"{border}│{reset}{input_line}{border}│{reset}",
        f"{border}│{reset}{' ' * inner}{border}│{reset}",
        f"{border}│{reset}{theme.overlay_hint}{pad_text(state.overlay_help, inner)}{reset}{border}│{reset}",
        f"{border}└{'─' * inner}┘{reset}",
    ]


def render_frame(state: FrameState, columns: int, rows: int, theme: UITheme | None = None) -> str:
    """Compose one full frame of ``rows`` screen lines, each ``columns`` wide."""
    active = theme or DEFAULT_THEME
    columns = max(1, columns)
    rows = max(3, rows)
    body_rows = rows - 2

    header = pad_text(f" {APP_TITLE}  {state.root}", columns)
    lines = [f"{active.header}{header}{active.reset}"]

    left_width = tree_pane_width(columns)
    right_width = max(0, columns - left_width - 1)
    left = _tree_lines(state, left_width, body_rows, active)
    right = _preview_lines(state, right_width, body_rows, active) if right_width else [""] * body_rows
    divider = f"{active.dim}│{active.reset}" if right_width else ""
    body = [f"{left[idx]}{divider}{right[idx]}" for idx in range(body_rows)]

    if state.overlay_visible:
        box_width = max(4, min(OVERLAY_WIDTH, columns - 4))
        box = _overlay_box(state, box_width, active)
        top = max(0, (body_rows - len(box)) // 2)
        margin = max(0, (columns - box_width) // 2)
        for offset, box_line in enumerate(box):
            row = top + offset
            if row >= body_rows:
                break
            body[row] = " " * margin + box_line + " " * max(0, columns - margin - box_width)
    lines.extend(body)

    footer_text = state.status or (state.overlay_help if state.overlay_visible else FOOTER_HINT)
    lines.append(f"{active.footer}{pad_text(footer_text, columns)}{active.reset}")
    return "\033[H\033[J" + "\r\n".join(lines)


__all__ = [
    "FOOTER_HINT",
    "FrameState",
    "clip_text",
    "pad_text",
    "render_frame",
    "tree_pane_width",
    "tree_scroll_start",
]
