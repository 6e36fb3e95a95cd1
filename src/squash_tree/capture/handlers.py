"""Squash event capture from git hooks.

git never says which commits were folded into a rewritten commit. The
post-rewrite hook only receives ``<old> <new>`` pairs, so the subsumed set is
reconstructed either from a snapshot taken by pre-rebase or, when there is no
snapshot, from ancestry after the fact. Squash merges are remembered by
post-merge and recorded by post-commit on the commit that completes them.

Every handler is best effort. Whatever goes wrong is logged at debug level
and the handler returns normally: squash tracking must never change the
outcome of the user's git operation.
"""

import logging
import re
from functools import wraps
from typing import Iterable, Optional

from squash_tree.exceptions import SquashTreeError
from squash_tree.git.client import VcsClient
from squash_tree.metadata.recorder import MetadataRecorder, RecordResult
from squash_tree.models.squash import SquashStrategy
from squash_tree.session.state import PendingRewrite, PendingSquashMerge, PendingStateStore

logger = logging.getLogger(__name__)

SQUASH_COMMIT_SOURCES = ("squash", "merge")
SQUASH_MSG_COMMIT = re.compile(r"^commit ([0-9a-f]{7,64})\b", re.MULTILINE)


def best_effort(handler):
    """Swallow and log any failure of a capture handler, returning no results."""

    @wraps(handler)
    def wrapper(*args, **kwargs) -> list[RecordResult]:
        try:
            return handler(*args, **kwargs)
        except Exception as e:
            logger.debug(f"{handler.__name__} skipped: {e}", exc_info=True)
            return []

    return wrapper


def parse_rewrite_pairs(lines: Iterable[str]) -> list[tuple[str, str]]:
    """Parse post-rewrite stdin lines of the form ``<old> <new> [extra]``."""
    pairs = []
    for line in lines:
        fields = line.split()
        if len(fields) >= 2:
            pairs.append((fields[0], fields[1]))
    return pairs


class SquashCapture:
    """Hook handlers that infer squashes and hand them to the recorder."""

    def __init__(self, git: VcsClient, recorder: MetadataRecorder, store: PendingStateStore):
        self.git = git
        self.recorder = recorder
        self.store = store

    def _try_record(self, root: str, base: str, children: list[str]) -> Optional[RecordResult]:
        """Record a fact, logging instead of raising on failure."""
        try:
            result = self.recorder.record(root, base, children, SquashStrategy.AUTO)
        except SquashTreeError as e:
            logger.debug(f"Not recording squash {root}: {e}")
            return None

        if result.written:
            logger.info(f"Recorded squash {result.fact.root} ({len(result.fact.children)} commits)")
        return result

    def _read_git_file(self, *parts: str) -> Optional[str]:
        path = self.store.git_dir.joinpath(*parts)
        if not path.is_file():
            return None
        return path.read_text()

    @best_effort
    def pre_rebase(self, upstream: Optional[str], branch: Optional[str] = None) -> list[RecordResult]:
        """Snapshot the base and the commits a rebase is about to rewrite.

        Args:
            upstream: The upstream the series was forked from. No-op when empty.
            branch: The branch being rebased, or None for the current branch.
        """
        if not upstream:
            return []

        base = self.git.resolve(upstream)
        commits = self.git.commit_range(base, branch or "HEAD")

        self.store.clear_marker()
        self.store.save_rewrite(PendingRewrite(base=base, original_commits=commits))
        logger.debug(f"Snapshot of {len(commits)} commits on {base} saved")
        return []

    @best_effort
    def post_rewrite(self, command: str, pairs: list[tuple[str, str]]) -> list[RecordResult]:
        """Reconcile rewritten commits with what existed before.

        Args:
            command: ``rebase`` or ``amend``, as passed by git.
            pairs: ``(old, new)`` commit pairs read from the hook's stdin.
        """
        pending = self.store.load_rewrite() if command == "rebase" else None
        marker = self.store.load_marker()

        try:
            if pending is not None:
                return self._reconcile_with_snapshot(pending, pairs, marker.commits)
            return self._reconcile_by_ancestry(pairs)
        finally:
            if pending is not None:
                self.store.clear_rewrite()
            self.store.clear_marker()

    def _reconcile_with_snapshot(
        self,
        pending: PendingRewrite,
        pairs: list[tuple[str, str]],
        extra_commits: list[str],
    ) -> list[RecordResult]:
        candidates = list(pending.original_commits)
        candidates += [c for c in extra_commits if c not in candidates]

        rewritten_into: dict[str, str] = {}
        new_commits: list[str] = []
        for old, new in pairs:
            if not new or old == new:
                continue
            rewritten_into[old] = new
            if new not in new_commits:
                new_commits.append(new)

        results = []
        for new in new_commits:
            subsumed = [
                commit
                for commit in candidates
                if rewritten_into.get(commit, new) == new and self._is_subsumed(commit, new)
            ]
            if len(subsumed) > 1:
                result = self._try_record(new, pending.base, subsumed)
                if result is not None:
                    results.append(result)
        return results

    def _is_subsumed(self, commit: str, new_tip: str) -> bool:
        """A commit is subsumed if it vanished or is no longer in the new history."""
        if not self.git.is_resolvable(commit):
            return True
        return not self.git.is_ancestor(commit, new_tip)

    def _reconcile_by_ancestry(self, pairs: list[tuple[str, str]]) -> list[RecordResult]:
        results = []
        for old, new in pairs:
            if not new or old == new:
                continue

            parents = self.git.parents(new)
            if len(parents) > 1:
                # Only linear old -> new rewrites are reconstructed.
                logger.debug(f"Skipping {new}: rewritten into a merge commit")
                continue

            base = self.git.merge_base(old, new) or (parents[0] if parents else None)
            if base is None:
                continue

            children = self.git.commit_range(base, old)
            if len(children) > 1:
                result = self._try_record(new, base, children)
                if result is not None:
                    results.append(result)
        return results

    @best_effort
    def post_merge(self, squash_flag: bool = False) -> list[RecordResult]:
        """Remember a squash merge until the commit that completes it.

        ``git merge --squash`` only stages the result, so HEAD is still the
        pre-merge tip here. The fact is written by post_commit once a commit
        lands on top of that tip.

        Args:
            squash_flag: git's post-merge argument, true for ``merge --squash``.
        """
        squash_msg = self._read_git_file("SQUASH_MSG")
        if not squash_flag and squash_msg is None:
            return []

        source = self._merge_source(squash_msg)
        if source is None:
            logger.debug("Squash merge without a resolvable source head")
            return []

        head = self.git.resolve("HEAD")
        base = self.git.merge_base(head, source)
        if base is None:
            parents = self.git.parents(head)
            base = parents[0] if parents else None
        if base is None:
            return []

        children = self.git.commit_range(base, source)
        if not children:
            return []

        self.store.save_squash_merge(PendingSquashMerge(head=head, base=base, children=children))
        logger.debug(f"Squash merge of {len(children)} commits onto {head} pending")
        return []

    @best_effort
    def post_commit(self) -> list[RecordResult]:
        """Record a pending squash merge under the commit that completes it."""
        pending = self.store.load_squash_merge()
        if pending is None:
            return []

        try:
            head = self.git.resolve("HEAD")
            parents = self.git.parents(head)
            if not parents or self.git.resolve(parents[0]) != self.git.resolve(pending.head):
                logger.debug(f"Dropping pending squash merge: {head} is not on top of {pending.head}")
                return []

            result = self._try_record(head, pending.base, pending.children)
            return [result] if result is not None else []
        finally:
            self.store.clear_squash_merge()

    def _merge_source(self, squash_msg: Optional[str]) -> Optional[str]:
        """Head of the merged branch, from MERGE_HEAD or else SQUASH_MSG."""
        merge_head = self._read_git_file("MERGE_HEAD")
        if merge_head and merge_head.split():
            return merge_head.split()[0]

        if squash_msg:
            # git lists squashed commits newest first
            match = SQUASH_MSG_COMMIT.search(squash_msg)
            if match:
                return match.group(1)
        return None

    @best_effort
    def prepare_commit_msg(
        self,
        message_file: Optional[str] = None,
        source: Optional[str] = None,
        sha: Optional[str] = None,
    ) -> list[RecordResult]:
        """Mark a squash or merge commit in progress for post-rewrite to pick up.

        Also drops a pending squash merge once SQUASH_MSG is gone, which means
        the merge was abandoned (for example by ``git reset``).
        """
        if self._read_git_file("SQUASH_MSG") is None:
            self.store.clear_squash_merge()

        if source not in SQUASH_COMMIT_SOURCES:
            return []

        marker = self.store.load_marker()
        marker.in_progress = True

        stopped = self._read_git_file("rebase-merge", "stopped-sha")
        if stopped:
            stopped_sha = stopped.strip()
            if stopped_sha and stopped_sha not in marker.commits:
                marker.commits.append(stopped_sha)

        self.store.save_marker(marker)
        return []
