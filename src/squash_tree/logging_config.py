"""Logging setup for squash-tree.

Log records go to stderr so they never mix with rendered trees on stdout.
Hooks run with stderr discarded, so hook diagnostics only show up when the
hook command is run by hand with SQUASH_TREE_LOG_LEVEL=DEBUG.
"""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVEL_ENV = "SQUASH_TREE_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once per process.

    Args:
        level: Log level override. Falls back to SQUASH_TREE_LOG_LEVEL, then WARNING.
    """
    level_name = (level or os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL)).upper()
    log_level = getattr(logging, level_name, logging.WARNING)

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                show_path=log_level == logging.DEBUG,
                rich_tracebacks=True,
            )
        ],
        force=True,
    )
