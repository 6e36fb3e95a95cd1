"""Shared fixtures for squash-tree tests.

Most tests run against FakeGit, an in-memory commit graph with notes. Tests
marked ``requires_git`` drive a real temporary repository and skip when git
is not installed.
"""

import subprocess
from pathlib import Path
from typing import Optional

import pytest

from squash_tree.capture.handlers import SquashCapture
from squash_tree.exceptions import GitError, InvalidRef
from squash_tree.metadata.graph import MetadataGraph
from squash_tree.metadata.recorder import MetadataRecorder
from squash_tree.session.state import PendingStateStore
from squash_tree.tree.builder import TreeBuilder


# ============================================================================
# IN-MEMORY GIT
# ============================================================================


class FakeGit:
    """In-memory stand-in for GitClient.

    Commits are named by short strings that double as their canonical hash.
    ``aliases`` maps extra refs (``HEAD``, branch names, long hashes) to commits.
    """

    def __init__(self):
        self.parents_of: dict[str, list[str]] = {}
        self.aliases: dict[str, str] = {}
        self.notes: dict[str, str] = {}
        self.gone: set[str] = set()
        self.fail_writes = False

    def commit(self, sha: str, *parents: str) -> str:
        self.parents_of[sha] = list(parents)
        return sha

    def chain(self, *shas: str, parent: Optional[str] = None) -> list[str]:
        """Add a linear series of commits on top of ``parent``."""
        previous = parent
        for sha in shas:
            self.commit(sha, *([previous] if previous else []))
            previous = sha
        return list(shas)

    def resolve(self, ref: str) -> str:
        ref = ref.strip()
        sha = self.aliases.get(ref, ref)
        if sha not in self.parents_of or sha in self.gone:
            raise InvalidRef(ref, "unknown commit")
        return sha

    def is_resolvable(self, ref: str) -> bool:
        try:
            self.resolve(ref)
        except InvalidRef:
            return False
        return True

    def _ancestors(self, sha: str) -> list[str]:
        """sha and all its ancestors, nearest first."""
        seen: list[str] = []
        queue = [sha]
        while queue:
            current = queue.pop(0)
            if current in seen:
                continue
            seen.append(current)
            queue.extend(self.parents_of.get(current, []))
        return seen

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        return self.aliases.get(ancestor, ancestor) in self._ancestors(self.aliases.get(descendant, descendant))

    def merge_base(self, a: str, b: str) -> Optional[str]:
        b_ancestors = set(self._ancestors(self.aliases.get(b, b)))
        for sha in self._ancestors(self.aliases.get(a, a)):
            if sha in b_ancestors:
                return sha
        return None

    def parents(self, ref: str) -> list[str]:
        return list(self.parents_of[self.resolve(ref)])

    def commit_range(self, base: str, tip: str) -> list[str]:
        excluded = set(self._ancestors(self.aliases.get(base, base)))
        commits = [sha for sha in self._ancestors(self.aliases.get(tip, tip)) if sha not in excluded]
        return list(reversed(commits))

    def read_note(self, commit: str) -> Optional[str]:
        return self.notes.get(commit)

    def add_note(self, commit: str, body: str) -> None:
        if self.fail_writes:
            raise GitError("git notes failed: simulated")
        if commit in self.notes:
            raise GitError(f"git notes failed: note for {commit} exists")
        self.notes[commit] = body


@pytest.fixture
def fake_git():
    return FakeGit()


@pytest.fixture
def graph(fake_git):
    return MetadataGraph(fake_git)


@pytest.fixture
def recorder(fake_git, graph):
    return MetadataRecorder(fake_git, graph)


@pytest.fixture
def builder(fake_git, graph):
    return TreeBuilder(fake_git, graph)


@pytest.fixture
def git_dir(tmp_path):
    d = tmp_path / "dot-git"
    d.mkdir()
    return d


@pytest.fixture
def store(git_dir):
    return PendingStateStore(git_dir)


@pytest.fixture
def capture(fake_git, recorder, store):
    return SquashCapture(fake_git, recorder, store)


# ============================================================================
# REAL GIT
# ============================================================================


def git_is_available() -> bool:
    """Check if git is installed and working."""
    try:
        result = subprocess.run(["git", "--version"], capture_output=True, text=True, timeout=5)
        return result.returncode == 0
    except (subprocess.SubprocessError, FileNotFoundError, OSError):
        return False


requires_git = pytest.mark.skipif(
    not git_is_available(),
    reason="Git is not installed or not available",
)


def git(repo: Path, *args: str) -> str:
    """Run git in ``repo`` and return stripped stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def make_commit(repo: Path, name: str) -> str:
    """Create a commit touching ``<name>.txt`` and return its full hash."""
    (repo / f"{name}.txt").write_text(f"{name}\n")
    git(repo, "add", f"{name}.txt")
    git(repo, "commit", "-q", "-m", name)
    return git(repo, "rev-parse", "HEAD")


@pytest.fixture
def temp_git_repo(tmp_path, monkeypatch):
    """A real repository with one initial commit, isolated from user config."""
    if not git_is_available():
        pytest.skip("Git is not available")

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.delenv("GIT_DIR", raising=False)
    monkeypatch.delenv("GIT_CONFIG_GLOBAL", raising=False)
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.delenv("SQUASH_TREE_HOOKS_DIR", raising=False)
    monkeypatch.delenv("SQUASH_TREE_NOTES_REF", raising=False)

    repo = tmp_path / "repo"
    repo.mkdir()

    try:
        git(repo, "init", "-q")
        git(repo, "config", "user.email", "test@test.com")
        git(repo, "config", "user.name", "Test User")
        git(repo, "config", "commit.gpgsign", "false")
        make_commit(repo, "initial")
    except subprocess.CalledProcessError:
        pytest.skip("Could not create git repository")

    return repo
