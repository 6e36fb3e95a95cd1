"""Show the squash tree for a commit."""

from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from squash_tree.exceptions import SquashTreeError
from squash_tree.repository import SquashRepository
from squash_tree.tree.visualizer import visualize

err_console = Console(stderr=True)


def show(
    commit: Annotated[
        str,
        typer.Argument(help="Commit hash or ref to inspect"),
    ] = "HEAD",
) -> None:
    """Show the squash tree for a commit.

    Prints the commit and, if it was produced by a squash, every commit
    folded into it. Squashes of squashes expand into nested subtrees.

    Examples:
        git squash-tree HEAD
        git squash-tree show a1b2c3d
    """
    try:
        repo = SquashRepository.open()
        tree = repo.tree_builder.build(commit)
    except SquashTreeError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    print(visualize(tree), end="")
