"""Filesystem scanning and async child reads for lazy tree loading."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from .types import ChildDescriptor, NodeKind, TreeNode

LOGGER = logging.getLogger(__name__)


def list_directory_children(
    directory: Path,
    show_hidden: bool = True,
) -> tuple[list[ChildDescriptor], Exception | None]:
    """List children of ``directory`` sorted folders-first, then by name.

    Returns ``(children, scan_error)``. Entries that cannot be stat'ed are
    omitted; ``scan_error`` is set only when the directory itself cannot be
    scanned, in which case ``children`` is empty.
    """
    children: list[ChildDescriptor] = []
    try:
        with os.scandir(directory) as entries:
            for child in entries:
                name = child.name
                if not show_hidden and name.startswith("."):
                    continue
                try:
                    is_dir = child.is_dir()
                    stat = child.stat()
                except OSError:
                    continue
                children.append(
                    ChildDescriptor(
                        kind=NodeKind.FOLDER if is_dir else NodeKind.FILE,
                        name=name,
                        path=Path(child.path),
                        size=None if is_dir else int(stat.st_size),
                    )
                )
    except OSError as exc:
        return [], exc

    children.sort(key=lambda item: (item.kind is not NodeKind.FOLDER, item.name.casefold()))
    return children, None


async def read_children(path: Path, show_hidden: bool = True) -> list[ChildDescriptor]:
    """Read one directory off the event loop; failures yield an empty listing."""
    children, scan_error = await asyncio.to_thread(list_directory_children, path, show_hidden)
    if scan_error is not None:
        LOGGER.debug("directory read failed for %s: %s", path, scan_error)
    return children


def build_root_node(path: Path) -> TreeNode:
    """Return an unloaded folder node representing directory ``path``."""
    resolved = path.resolve()
    return TreeNode(
        name=resolved.name or str(resolved),
        kind=NodeKind.FOLDER,
        path=resolved,
        description="folder",
    )


__all__ = [
    "list_directory_children",
    "read_children",
    "build_root_node",
]
