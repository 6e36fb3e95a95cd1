"""Git access layer for squash-tree."""

from squash_tree.git.client import DEFAULT_NOTES_REF, GitClient, VcsClient, find_repo_root

__all__ = ["DEFAULT_NOTES_REF", "GitClient", "VcsClient", "find_repo_root"]
