"""Validate and persist squash facts."""

import logging
from dataclasses import dataclass

from squash_tree.exceptions import FlagError
from squash_tree.git.client import VcsClient
from squash_tree.metadata.graph import MetadataGraph
from squash_tree.models.squash import SquashFact, SquashStrategy

logger = logging.getLogger(__name__)


@dataclass
class RecordResult:
    """Outcome of a record call."""

    fact: SquashFact
    written: bool


class MetadataRecorder:
    """Records one squash fact per root, exactly once."""

    def __init__(self, git: VcsClient, graph: MetadataGraph):
        self.git = git
        self.graph = graph

    def record(
        self,
        root: str,
        base: str,
        children: list[str],
        strategy: SquashStrategy | str = SquashStrategy.AUTO,
    ) -> RecordResult:
        """Canonicalize refs and write the fact if the root has none yet.

        Args:
            root: The squash commit.
            base: The commit the squashed commits branched from.
            children: Subsumed commits in original order. Blank entries are skipped.
            strategy: ``auto`` for hook-recorded facts, ``manual`` for corrections.

        Returns:
            RecordResult with ``written=False`` when an earlier fact for the
            root was kept.

        Raises:
            InvalidRef: If any ref cannot be resolved.
            FlagError: If no children remain after dropping blanks.
            InvalidFact: If the canonical fact violates its invariants.
            WriteFailure: If the notes store rejects the write.
        """
        wanted = [c.strip() for c in children if c and c.strip()]
        if not wanted:
            raise FlagError("at least one child required")

        root_short = self.git.resolve(root)
        base_short = self.git.resolve(base)
        children_short = [self.git.resolve(c) for c in wanted]

        existing = self.graph.get(root_short)
        if existing is not None:
            logger.debug(f"Squash metadata for {root_short} already recorded, keeping it")
            return RecordResult(fact=existing, written=False)

        fact = SquashFact.create(root_short, base_short, children_short, strategy)
        written = self.graph.put(fact)
        if not written:
            fact = self.graph.get(root_short) or fact
        return RecordResult(fact=fact, written=written)
