"""Pending state shared between hook invocations.

git runs each hook as a separate process, so anything one hook learns for a
later one is written to JSON files under ``<git-dir>/squash-tree/``.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class PendingRewrite:
    """Snapshot taken before a rebase: its base and the commits about to be rewritten."""

    base: str
    original_commits: list[str]
    created_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "base": self.base,
            "original_commits": self.original_commits,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PendingRewrite":
        """Create from dictionary."""
        commits = data["original_commits"]
        if not isinstance(commits, list):
            raise ValueError("original_commits must be a list")

        return cls(
            base=data["base"],
            original_commits=[str(c) for c in commits],
            created_at=(
                datetime.fromisoformat(data["created_at"])
                if data.get("created_at")
                else datetime.utcnow()
            ),
        )


@dataclass
class PendingSquashMerge:
    """A squash merge waiting for its commit.

    ``git merge --squash`` stages the result without committing, so the
    squash root only exists once a commit lands on top of ``head``.
    """

    head: str
    base: str
    children: list[str]
    created_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "head": self.head,
            "base": self.base,
            "children": self.children,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PendingSquashMerge":
        """Create from dictionary."""
        children = data["children"]
        if not isinstance(children, list):
            raise ValueError("children must be a list")

        return cls(
            head=data["head"],
            base=data["base"],
            children=[str(c) for c in children],
            created_at=(
                datetime.fromisoformat(data["created_at"])
                if data.get("created_at")
                else datetime.utcnow()
            ),
        )


@dataclass
class SquashMarker:
    """Bookkeeping left by prepare-commit-msg for squash and merge commits."""

    in_progress: bool = False
    commits: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"in_progress": self.in_progress, "commits": self.commits}

    @classmethod
    def from_dict(cls, data: dict) -> "SquashMarker":
        commits = data.get("commits", [])
        return cls(
            in_progress=bool(data.get("in_progress", False)),
            commits=[str(c) for c in commits] if isinstance(commits, list) else [],
        )


class PendingStateStore:
    """Reads and writes pending hook state for one repository."""

    STATE_DIR = "squash-tree"
    REWRITE_FILE = "pending-rewrite.json"
    MARKER_FILE = "squash-marker.json"
    SQUASH_MERGE_FILE = "pending-squash-merge.json"

    def __init__(self, git_dir: Path):
        """Initialize the store.

        Args:
            git_dir: The repository's git directory.
        """
        self.git_dir = git_dir

    @property
    def state_dir(self) -> Path:
        """Directory holding the state files."""
        return self.git_dir / self.STATE_DIR

    @property
    def rewrite_file(self) -> Path:
        return self.state_dir / self.REWRITE_FILE

    @property
    def marker_file(self) -> Path:
        return self.state_dir / self.MARKER_FILE

    @property
    def squash_merge_file(self) -> Path:
        return self.state_dir / self.SQUASH_MERGE_FILE

    def _read_json(self, path: Path) -> Optional[dict]:
        if not path.exists():
            return None

        try:
            data = json.loads(path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable state file {path}: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed state file {path}")
            return None
        return data

    def _write_json(self, path: Path, data: dict) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2))

    def load_rewrite(self) -> Optional[PendingRewrite]:
        """Load the pending rebase snapshot.

        Returns:
            PendingRewrite or None if there is none or it is malformed.
        """
        data = self._read_json(self.rewrite_file)
        if data is None:
            return None

        try:
            return PendingRewrite.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring malformed pending rewrite: {e}")
            return None

    def save_rewrite(self, pending: PendingRewrite) -> None:
        """Persist a pending rebase snapshot, replacing any previous one."""
        self._write_json(self.rewrite_file, pending.to_dict())

    def clear_rewrite(self) -> None:
        """Discard the pending rebase snapshot."""
        self.rewrite_file.unlink(missing_ok=True)

    def load_marker(self) -> SquashMarker:
        """Load the message-preparation marker, empty if absent."""
        data = self._read_json(self.marker_file)
        if data is None:
            return SquashMarker()
        return SquashMarker.from_dict(data)

    def save_marker(self, marker: SquashMarker) -> None:
        self._write_json(self.marker_file, marker.to_dict())

    def clear_marker(self) -> None:
        self.marker_file.unlink(missing_ok=True)

    def load_squash_merge(self) -> Optional[PendingSquashMerge]:
        """Load the squash merge waiting for its commit, if any."""
        data = self._read_json(self.squash_merge_file)
        if data is None:
            return None

        try:
            return PendingSquashMerge.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring malformed pending squash merge: {e}")
            return None

    def save_squash_merge(self, pending: PendingSquashMerge) -> None:
        self._write_json(self.squash_merge_file, pending.to_dict())

    def clear_squash_merge(self) -> None:
        self.squash_merge_file.unlink(missing_ok=True)
