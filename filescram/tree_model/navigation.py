"""Pure flatten and row-index helpers for tree navigation."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

from .types import TreeNode, TreeRow


def flatten_nodes(
    nodes: Iterable[TreeNode],
    expanded: set[Path],
    depth: int = 0,
    out: list[TreeRow] | None = None,
) -> list[TreeRow]:
    """Project ``nodes`` into pre-order rows, descending only into expanded folders."""
    if out is None:
        out = []
    for node in nodes:
        out.append(
            TreeRow(
                id=node.path,
                depth=depth,
                kind=node.kind,
                label=node.name,
                meta=node.description,
            )
        )
        if node.is_folder and node.path in expanded and node.children:
            flatten_nodes(node.children, expanded, depth + 1, out)
    return out


def find_node(nodes: Iterable[TreeNode], path: Path) -> TreeNode | None:
    """Return the node with identity ``path`` via depth-first search."""
    for node in nodes:
        if node.path == path:
            return node
        if node.children:
            found = find_node(node.children, path)
            if found is not None:
                return found
    return None


def parent_row_index(rows: Sequence[TreeRow], selected_idx: int) -> int | None:
    """Return index of the nearest preceding row one level shallower.

    Scans backward from ``selected_idx``. Hitting a row shallower than the
    target depth first means the parent is not visible, so ``None`` is
    returned. Depth-0 rows have no parent inside the list.
    """
    if selected_idx < 0 or selected_idx >= len(rows):
        return None
    current_depth = rows[selected_idx].depth
    if current_depth == 0:
        return None
    target_depth = current_depth - 1
    idx = selected_idx - 1
    while idx >= 0:
        depth = rows[idx].depth
        if depth == target_depth:
            return idx
        if depth < target_depth:
            return None
        idx -= 1
    return None


def row_index_for_path(rows: Sequence[TreeRow], path: Path) -> int | None:
    """Return index of the row whose id is ``path``."""
    for idx, row in enumerate(rows):
        if row.id == path:
            return idx
    return None


def wrap_index(idx: int, count: int) -> int:
    """Wrap ``idx`` cyclically into ``[0, count)``; ``0`` when empty."""
    if count <= 0:
        return 0
    return idx % count


def clamp_index(idx: int, count: int) -> int:
    """Clamp ``idx`` into ``[0, count - 1]``; ``0`` when empty."""
    if count <= 0:
        return 0
    return max(0, min(count - 1, idx))
