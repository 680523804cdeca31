"""Tree model: node types, lazy directory reads, flatten, and navigation.

Defines ``TreeNode``/``TreeRow`` and the ``TreeModel`` that owns expansion
state and direction-sensitive selection movement.
"""

from __future__ import annotations

from .formatting import format_bytes, human_size
from .fs import build_root_node, list_directory_children, read_children
from .model import ChildReader, TreeModel, TreeModelCallbacks
from .navigation import find_node, flatten_nodes, parent_row_index, row_index_for_path
from .rendering import format_tree_row, plain_tree_row
from .types import ChildDescriptor, LoadState, NodeKind, TreeNode, TreeRow

__all__ = [
    "NodeKind",
    "LoadState",
    "TreeNode",
    "TreeRow",
    "ChildDescriptor",
    "ChildReader",
    "TreeModel",
    "TreeModelCallbacks",
    "human_size",
    "format_bytes",
    "list_directory_children",
    "read_children",
    "build_root_node",
    "flatten_nodes",
    "find_node",
    "parent_row_index",
    "row_index_for_path",
    "format_tree_row",
    "plain_tree_row",
]
