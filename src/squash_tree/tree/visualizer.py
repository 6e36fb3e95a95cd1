"""Render squash trees as indented text."""

from squash_tree.models.tree import NodeStatus, TreeNode

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE = "│   "
SPACE = "    "

STATUS_MARKERS = {
    NodeStatus.TRUNCATED_CYCLE: "[cycle: truncated]",
    NodeStatus.UNRESOLVED: "[unresolved]",
}


def format_label(node: TreeNode) -> str:
    """Single-line label for a node, without tree connectors."""
    label = node.commit
    if node.is_squash:
        label += f" (squash, base: {node.base})"
    marker = STATUS_MARKERS.get(node.status)
    if marker:
        label += f" {marker}"
    return label


def visualize(root: TreeNode) -> str:
    """Render a tree as text, one node per line, children in recorded order.

    Example::

        r1 (squash, base: b1)
        ├── c1
        ├── c2 (squash, base: b2)
        │   ├── x1
        │   └── x2
        └── c3
    """
    lines = [format_label(root)]
    _render_children(root, "", lines)
    return "\n".join(lines) + "\n"


def _render_children(node: TreeNode, prefix: str, lines: list[str]) -> None:
    last_index = len(node.children) - 1
    for i, child in enumerate(node.children):
        is_last = i == last_index
        lines.append(prefix + (LAST_BRANCH if is_last else BRANCH) + format_label(child))
        _render_children(child, prefix + (SPACE if is_last else PIPE), lines)
