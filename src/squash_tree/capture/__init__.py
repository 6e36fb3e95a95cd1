"""Squash detection from git lifecycle hooks."""

from squash_tree.capture.handlers import SquashCapture, best_effort, parse_rewrite_pairs

__all__ = ["SquashCapture", "best_effort", "parse_rewrite_pairs"]
