"""Git hook entry points.

These commands are run by the installed hook scripts. They never fail:
whatever happens, they exit 0 so the user's git operation is unaffected.
"""

import logging
import sys
from typing import Annotated, Optional

import typer

from squash_tree.capture.handlers import SquashCapture, parse_rewrite_pairs
from squash_tree.repository import SquashRepository

logger = logging.getLogger(__name__)


def _open_capture() -> Optional[SquashCapture]:
    try:
        return SquashRepository.open().capture
    except Exception as e:
        logger.debug(f"Squash capture unavailable: {e}")
        return None


def pre_rebase(
    upstream: Annotated[Optional[str], typer.Argument(help="Upstream the series was forked from")] = None,
    branch: Annotated[Optional[str], typer.Argument(help="Branch being rebased")] = None,
) -> None:
    """pre-rebase: snapshot the commits about to be rewritten."""
    capture = _open_capture()
    if capture is not None:
        capture.pre_rebase(upstream, branch)


def post_rewrite(
    command: Annotated[str, typer.Argument(help="Rewriting command: rebase or amend")] = "",
) -> None:
    """post-rewrite: record squashes among the rewritten commits."""
    try:
        pairs = parse_rewrite_pairs(sys.stdin)
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Could not read rewritten commits: {e}")
        return

    capture = _open_capture()
    if capture is not None:
        capture.post_rewrite(command, pairs)


def post_merge(
    squash: Annotated[Optional[str], typer.Argument(help="1 if the merge was a squash merge")] = None,
) -> None:
    """post-merge: record a squash merge."""
    capture = _open_capture()
    if capture is not None:
        capture.post_merge(squash == "1")


def prepare_commit_msg(
    message_file: Annotated[Optional[str], typer.Argument(help="Commit message file")] = None,
    source: Annotated[Optional[str], typer.Argument(help="Message source")] = None,
    sha: Annotated[Optional[str], typer.Argument(help="Commit being amended")] = None,
) -> None:
    """prepare-commit-msg: mark squash and merge commits in progress."""
    capture = _open_capture()
    if capture is not None:
        capture.prepare_commit_msg(message_file, source, sha)


def post_commit() -> None:
    """post-commit: record a squash merge once its commit exists."""
    capture = _open_capture()
    if capture is not None:
        capture.post_commit()
