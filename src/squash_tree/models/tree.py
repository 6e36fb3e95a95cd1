"""Resolved squash tree nodes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class NodeStatus(str, Enum):
    """Resolution status of a tree node."""

    NORMAL = "normal"
    TRUNCATED_CYCLE = "truncated_cycle"
    UNRESOLVED = "unresolved"


@dataclass
class TreeNode:
    """A commit in a resolved squash tree.

    Built fresh for every ``show`` and discarded after rendering.
    """

    commit: str
    base: Optional[str] = None
    children: list[TreeNode] = field(default_factory=list)
    is_squash: bool = False
    status: NodeStatus = NodeStatus.NORMAL

    @property
    def is_leaf(self) -> bool:
        """True if the node has no children."""
        return not self.children

    def walk(self):
        """Yield this node and all descendants, depth first, in recorded order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def count(self) -> int:
        """Number of nodes in this subtree."""
        return sum(1 for _ in self.walk())
