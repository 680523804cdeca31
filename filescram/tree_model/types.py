"""Tree node and row datatypes used across tree-model modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .formatting import human_size


class NodeKind(str, Enum):
    """Kinds of entries shown in the navigable tree."""

    FILE = "file"
    FOLDER = "folder"
    ACTION = "action"


class LoadState(str, Enum):
    """Child-enumeration status for folder nodes."""

    UNLOADED = "unloaded"
    PENDING = "pending"
    LOADED = "loaded"


@dataclass(eq=False)
class TreeNode:
    """One filesystem (or synthetic action) entry owned by a ``TreeModel``.

    ``path`` is the identity key for lookups and expansion-set membership.
    ``children`` is only meaningful for folders and stays empty until the
    first load completes.
    """

    name: str
    kind: NodeKind
    path: Path
    children: list[TreeNode] = field(default_factory=list)
    load_state: LoadState = LoadState.UNLOADED
    size: int | None = None
    description: str | None = None

    @property
    def is_folder(self) -> bool:
        return self.kind is NodeKind.FOLDER

    @property
    def loaded(self) -> bool | None:
        """Return load flag for folders, ``None`` for files and actions."""
        if not self.is_folder:
            return None
        return self.load_state is LoadState.LOADED


@dataclass(frozen=True)
class TreeRow:
    """One display-ordered row projected from a visible tree node."""

    id: Path
    depth: int
    kind: NodeKind
    label: str
    meta: str | None = None


@dataclass(frozen=True)
class ChildDescriptor:
    """Directory-read result for one child entry."""

    kind: NodeKind
    name: str
    path: Path
    size: int | None = None

    def to_node(self) -> TreeNode:
        """Build an unloaded tree node for this descriptor."""
        if self.kind is NodeKind.FOLDER:
            return TreeNode(
                name=self.name,
                kind=NodeKind.FOLDER,
                path=self.path,
                description="folder",
            )
        return TreeNode(
            name=self.name,
            kind=self.kind,
            path=self.path,
            load_state=LoadState.LOADED,
            size=self.size,
            description=human_size(self.size),
        )


__all__ = [
    "NodeKind",
    "LoadState",
    "TreeNode",
    "TreeRow",
    "ChildDescriptor",
]
