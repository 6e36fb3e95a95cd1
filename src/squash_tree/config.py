"""Settings for squash-tree.

Resolution order (highest first):
  1. Environment variables (SQUASH_TREE_*)
  2. Repository git config (squash-tree.notesRef)
  3. Defaults
"""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from squash_tree.git.client import DEFAULT_NOTES_REF, GitClient

NOTES_REF_ENV = "SQUASH_TREE_NOTES_REF"
HOOKS_DIR_ENV = "SQUASH_TREE_HOOKS_DIR"

NOTES_REF_GIT_KEY = "squash-tree.notesRef"


def default_global_hooks_dir() -> Path:
    """Shared hooks directory used by ``init --global``."""
    return Path.home() / ".config" / "git" / "squash-tree-hooks"


class Settings(BaseModel):
    """Runtime settings."""

    notes_ref: str = Field(default=DEFAULT_NOTES_REF, min_length=1)
    global_hooks_dir: Path = Field(default_factory=default_global_hooks_dir)


def load_settings(git: Optional[GitClient] = None) -> Settings:
    """Load settings from the environment, git config and defaults.

    Args:
        git: Client for the current repository, if there is one.
    """
    values: dict = {}

    if git is not None:
        notes_ref = git.get_config(NOTES_REF_GIT_KEY)
        if notes_ref:
            values["notes_ref"] = notes_ref

    if os.environ.get(NOTES_REF_ENV):
        values["notes_ref"] = os.environ[NOTES_REF_ENV]
    if os.environ.get(HOOKS_DIR_ENV):
        values["global_hooks_dir"] = Path(os.environ[HOOKS_DIR_ENV]).expanduser()

    return Settings(**values)
