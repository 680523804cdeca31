"""Fixed ANSI palette used by the frame renderer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI fragments used by renderers."""

    name: str
    reset: str
    reverse: str
    dim: str
    header: str
    footer: str
    tree_marker: str
    tree_folder: str
    tree_file: str
    tree_action: str
    tree_meta: str
    pane_title: str
    pane_title_focused: str
    overlay_border: str
    overlay_hint: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    reverse="\033[7m",
    dim="\033[2m",
    header="\033[1;38;5;254m",
    footer="\033[38;5;247m",
    tree_marker="\033[38;5;44m",
    tree_folder="\033[1;34m",
    tree_file="\033[38;5;252m",
    tree_action="\033[38;5;229m",
    tree_meta="\033[38;5;109m",
    pane_title="\033[2;38;5;250m",
    pane_title_focused="\033[1;38;5;81m",
    overlay_border="\033[38;5;69m",
    overlay_hint="\033[2;38;5;250m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    reverse="",
    dim="",
    header="",
    footer="",
    tree_marker="",
    tree_folder="",
    tree_file="",
    tree_action="",
    tree_meta="",
    pane_title="",
    pane_title_focused="",
    overlay_border="",
    overlay_hint="",
)


def theme_for(no_color: bool) -> UITheme:
    """Return the colorless palette when color output is disabled."""
    return PLAIN_THEME if no_color else DEFAULT_THEME
