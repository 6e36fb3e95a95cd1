"""Git access for squash tracking.

Every repository query is delegated to the ``git`` binary. Commit-graph
questions (ancestry, merge-base, ranges) are answered by git, never computed
here.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional, Protocol

from squash_tree.exceptions import GitError, InvalidRef, RepoNotFound

logger = logging.getLogger(__name__)

DEFAULT_NOTES_REF = "squash-tree"


class VcsClient(Protocol):
    """Repository capabilities the capture, recorder and tree layers rely on."""

    def resolve(self, ref: str) -> str: ...

    def is_resolvable(self, ref: str) -> bool: ...

    def is_ancestor(self, ancestor: str, descendant: str) -> bool: ...

    def merge_base(self, a: str, b: str) -> Optional[str]: ...

    def parents(self, ref: str) -> list[str]: ...

    def commit_range(self, base: str, tip: str) -> list[str]: ...

    def read_note(self, commit: str) -> Optional[str]: ...

    def add_note(self, commit: str, body: str) -> None: ...


def find_repo_root(start: Optional[Path] = None) -> Path:
    """Walk upward from ``start`` to the first directory containing ``.git``.

    Raises:
        RepoNotFound: If no repository is found before the filesystem root.
    """
    path = (start or Path.cwd()).resolve()

    for candidate in (path, *path.parents):
        git_path = candidate / ".git"
        if git_path.is_dir() or git_path.is_file():
            return candidate

    raise RepoNotFound(f"not a git repository (or any parent up to /): {path}")


class GitClient:
    """Runs git commands against one repository."""

    def __init__(self, repo_path: Path, notes_ref: str = DEFAULT_NOTES_REF):
        """Initialize the client.

        Args:
            repo_path: Path to the repository work tree.
            notes_ref: Notes ref holding squash metadata (short or full name).
        """
        self.repo_path = repo_path
        self.notes_ref = notes_ref
        self._git_dir: Optional[Path] = None

    @classmethod
    def discover(cls, start: Optional[Path] = None, notes_ref: str = DEFAULT_NOTES_REF) -> GitClient:
        """Create a client for the repository containing ``start``."""
        return cls(find_repo_root(start), notes_ref=notes_ref)

    def _run_git(self, *args: str, check: bool = True, input: Optional[str] = None) -> str:
        """Execute a git command and return stripped stdout.

        Args:
            *args: Git command arguments.
            check: Whether to raise on non-zero exit.
            input: Optional text fed to stdin.

        Returns:
            Command stdout.

        Raises:
            GitError: If the command fails and check is True.
        """
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                input=input,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found on PATH") from e

        if check and result.returncode != 0:
            raise GitError(f"git {args[0]} failed: {result.stderr.strip()}")

        return result.stdout.strip()

    def _succeeds(self, *args: str) -> bool:
        """Run a git command and report whether it exited 0."""
        result = subprocess.run(
            ["git", *args],
            cwd=self.repo_path,
            capture_output=True,
            text=True,
        )
        return result.returncode == 0

    @property
    def git_dir(self) -> Path:
        """Absolute path of the repository's git directory."""
        if self._git_dir is None:
            self._git_dir = Path(self._run_git("rev-parse", "--absolute-git-dir"))
        return self._git_dir

    def resolve(self, ref: str) -> str:
        """Canonicalize a ref to its short commit hash.

        Raises:
            InvalidRef: If the ref does not name a commit.
        """
        ref = ref.strip()
        if not ref:
            raise InvalidRef(ref, "empty ref")

        try:
            short = self._run_git("rev-parse", "--verify", "--quiet", "--short", f"{ref}^{{commit}}")
        except GitError as e:
            raise InvalidRef(ref, "git rev-parse failed") from e

        if not short:
            raise InvalidRef(ref, "git rev-parse returned nothing")
        return short

    def is_resolvable(self, ref: str) -> bool:
        """Check whether a ref still names a commit."""
        return bool(ref.strip()) and self._succeeds("rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}")

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        """Check whether ``ancestor`` is reachable from ``descendant``."""
        return self._succeeds("merge-base", "--is-ancestor", ancestor, descendant)

    def merge_base(self, a: str, b: str) -> Optional[str]:
        """Best common ancestor of two commits, or None if there is none."""
        try:
            output = self._run_git("merge-base", a, b)
        except GitError:
            return None
        return output.splitlines()[0] if output else None

    def parents(self, ref: str) -> list[str]:
        """Parent hashes of a commit, first parent first."""
        output = self._run_git("rev-list", "--parents", "-n", "1", f"{ref}^{{commit}}")
        return output.split()[1:]

    def commit_range(self, base: str, tip: str) -> list[str]:
        """Commits in ``base..tip``, oldest first."""
        output = self._run_git("rev-list", "--reverse", f"{base}..{tip}")
        return [line for line in output.splitlines() if line]

    @property
    def _notes_args(self) -> tuple[str, str]:
        return ("notes", f"--ref={self.notes_ref}")

    def read_note(self, commit: str) -> Optional[str]:
        """Read the squash note attached to a commit, if any."""
        result = subprocess.run(
            ["git", *self._notes_args, "show", commit],
            cwd=self.repo_path,
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            return None
        return result.stdout

    def add_note(self, commit: str, body: str) -> None:
        """Attach a note to a commit.

        git refuses to overwrite an existing note without ``--force``; that
        refusal surfaces here as a GitError.
        """
        self._run_git(*self._notes_args, "add", "--file=-", commit, input=body)

    def get_config(self, key: str) -> Optional[str]:
        """Read a git config value."""
        value = self._run_git("config", "--get", key, check=False)
        return value or None

    def set_global_config(self, key: str, value: str) -> None:
        """Write a value into the user's global git config."""
        self._run_git("config", "--global", key, value)
        logger.info(f"Set global git config {key}={value}")
