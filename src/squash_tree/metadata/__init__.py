"""Squash metadata storage and recording."""

from squash_tree.metadata.graph import MetadataGraph
from squash_tree.metadata.recorder import MetadataRecorder, RecordResult

__all__ = ["MetadataGraph", "MetadataRecorder", "RecordResult"]
