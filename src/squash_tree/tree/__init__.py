"""Squash tree building and rendering."""

from squash_tree.tree.builder import TreeBuilder
from squash_tree.tree.visualizer import visualize

__all__ = ["TreeBuilder", "visualize"]
