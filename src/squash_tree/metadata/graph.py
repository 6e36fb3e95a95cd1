"""Metadata graph: commit -> at most one recorded squash fact, backed by git notes."""

import logging
from typing import Optional

from squash_tree.exceptions import GitError, InvalidFact, WriteFailure
from squash_tree.git.client import VcsClient
from squash_tree.models.squash import SquashFact

logger = logging.getLogger(__name__)


class MetadataGraph:
    """Reads and writes squash facts in the notes ref.

    Facts are keyed by their root commit. Writes never overwrite an existing
    fact: the first write for a root wins.
    """

    def __init__(self, git: VcsClient):
        self.git = git

    def get(self, commit: str) -> Optional[SquashFact]:
        """Return the fact recorded for ``commit``, or None.

        A note that does not parse as a squash record is logged and treated
        as absent.
        """
        body = self.git.read_note(commit)
        if body is None or not body.strip():
            return None

        try:
            return SquashFact.from_note(body)
        except InvalidFact as e:
            logger.warning(f"Ignoring malformed squash note on {commit}: {e}")
            return None

    def has(self, commit: str) -> bool:
        """Check whether a fact is recorded for ``commit``."""
        return self.get(commit) is not None

    def put(self, fact: SquashFact) -> bool:
        """Write a fact unless one already exists for its root.

        Returns:
            True if the fact was written, False if the root already had one.

        Raises:
            WriteFailure: If the notes store rejects the write.
        """
        if self.has(fact.root):
            return False

        try:
            self.git.add_note(fact.root, fact.to_note())
        except GitError as e:
            if self.has(fact.root):
                logger.debug(f"Concurrent write for {fact.root} already landed")
                return False
            raise WriteFailure(f"failed to write squash metadata for {fact.root}: {e}") from e

        logger.debug(f"Recorded squash {fact.root} with {len(fact.children)} children")
        return True
