"""Wires the squash-tree services together for one repository."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from squash_tree.capture.handlers import SquashCapture
from squash_tree.config import Settings, load_settings
from squash_tree.git.client import GitClient, find_repo_root
from squash_tree.metadata.graph import MetadataGraph
from squash_tree.metadata.recorder import MetadataRecorder
from squash_tree.session.state import PendingStateStore
from squash_tree.tree.builder import TreeBuilder


@dataclass
class SquashRepository:
    """Services bound to a single git repository."""

    git: GitClient
    settings: Settings

    @classmethod
    def open(cls, start: Optional[Path] = None) -> SquashRepository:
        """Open the repository containing ``start`` (default: cwd).

        Raises:
            RepoNotFound: If no repository is found.
        """
        root = find_repo_root(start)
        settings = load_settings(GitClient(root))
        return cls(git=GitClient(root, notes_ref=settings.notes_ref), settings=settings)

    @property
    def graph(self) -> MetadataGraph:
        return MetadataGraph(self.git)

    @property
    def recorder(self) -> MetadataRecorder:
        return MetadataRecorder(self.git, self.graph)

    @property
    def tree_builder(self) -> TreeBuilder:
        return TreeBuilder(self.git, self.graph)

    @property
    def capture(self) -> SquashCapture:
        return SquashCapture(self.git, self.recorder, PendingStateStore(self.git.git_dir))

    @property
    def hooks_dir(self) -> Path:
        """Repository-local hooks directory."""
        return self.git.git_dir / "hooks"
