"""CLI commands for squash-tree."""

from squash_tree.cli.commands import (
    add_metadata,
    help,
    hook,
    init,
    show,
)

__all__ = [
    "add_metadata",
    "help",
    "hook",
    "init",
    "show",
]
