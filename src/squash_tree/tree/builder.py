"""Resolve a commit into its squash tree by unfolding recorded facts."""

import logging

from squash_tree.exceptions import InvalidRef
from squash_tree.git.client import VcsClient
from squash_tree.metadata.graph import MetadataGraph
from squash_tree.models.tree import NodeStatus, TreeNode

logger = logging.getLogger(__name__)


class TreeBuilder:
    """Builds squash trees from the metadata graph.

    The graph is externally writable, so it is not trusted to be acyclic:
    a commit met again on the current recursion path is cut off and marked
    ``truncated_cycle``. A recorded child that no longer resolves becomes an
    ``unresolved`` leaf instead of failing the whole build.
    """

    def __init__(self, git: VcsClient, graph: MetadataGraph):
        self.git = git
        self.graph = graph

    def build(self, start_ref: str) -> TreeNode:
        """Build the tree rooted at ``start_ref``.

        Raises:
            InvalidRef: If ``start_ref`` does not resolve.
        """
        commit = self.git.resolve(start_ref)
        return self._build(commit, frozenset())

    def _build(self, commit: str, path: frozenset) -> TreeNode:
        if commit in path:
            logger.warning(f"Squash metadata cycle at {commit}, truncating")
            return TreeNode(commit=commit, status=NodeStatus.TRUNCATED_CYCLE)

        fact = self.graph.get(commit)
        if fact is None:
            return TreeNode(commit=commit)

        node = TreeNode(commit=commit, base=fact.base, is_squash=True)
        path = path | {commit}

        for child_ref in fact.children:
            try:
                child = self.git.resolve(child_ref)
            except InvalidRef:
                logger.warning(f"Recorded child {child_ref} of {commit} no longer resolves")
                node.children.append(TreeNode(commit=child_ref, status=NodeStatus.UNRESOLVED))
                continue
            node.children.append(self._build(child, path))

        return node
