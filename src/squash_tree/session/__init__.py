"""Pending hook state for squash-tree."""

from squash_tree.session.state import PendingRewrite, PendingSquashMerge, PendingStateStore, SquashMarker

__all__ = ["PendingRewrite", "PendingSquashMerge", "PendingStateStore", "SquashMarker"]
