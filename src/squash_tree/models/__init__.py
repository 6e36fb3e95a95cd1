"""Data models for squash-tree."""

from squash_tree.models.squash import SquashFact, SquashStrategy
from squash_tree.models.tree import NodeStatus, TreeNode

__all__ = [
    "SquashFact",
    "SquashStrategy",
    "NodeStatus",
    "TreeNode",
]
