"""Record squash metadata by hand."""

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape

from squash_tree.exceptions import FlagError, SquashTreeError
from squash_tree.models.squash import SquashStrategy
from squash_tree.repository import SquashRepository

console = Console()
err_console = Console(stderr=True)


def add_metadata(
    root: Annotated[
        Optional[str],
        typer.Option("--root", help="Squash commit (root) hash or ref"),
    ] = None,
    base: Annotated[
        Optional[str],
        typer.Option("--base", help="Base commit hash or ref"),
    ] = None,
    children: Annotated[
        Optional[str],
        typer.Option("--children", help="Comma-separated child commits, oldest first"),
    ] = None,
    strategy: Annotated[
        str,
        typer.Option("--strategy", help="Strategy: auto or manual"),
    ] = SquashStrategy.AUTO.value,
) -> None:
    """Record which commits were squashed into ROOT.

    Does nothing if ROOT already has squash metadata, so it is safe to re-run.

    Examples:
        git squash-tree add-metadata --root=HEAD --base=HEAD~1 --children=a1b2c3d,e4f5a6b
        git squash-tree add-metadata --root=abc123 --base=def456 --children=1a2b,3c4d --strategy=manual
    """
    try:
        strategy_value = _parse_args(root, base, children, strategy)
        repo = SquashRepository.open()
        result = repo.recorder.record(root, base, children.split(","), strategy_value)
    except SquashTreeError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    fact = result.fact
    if result.written:
        console.print(f"[green]Recorded squash[/green] {fact.root} ({len(fact.children)} commits)")
    else:
        console.print(f"[dim]Squash metadata for {fact.root} already recorded[/dim]")


def _parse_args(
    root: Optional[str],
    base: Optional[str],
    children: Optional[str],
    strategy: str,
) -> SquashStrategy:
    """Check required flags and parse the strategy."""
    if not root or not base or not children:
        raise FlagError("add-metadata requires --root, --base, and --children")

    try:
        return SquashStrategy(strategy)
    except ValueError:
        valid = ", ".join(s.value for s in SquashStrategy)
        raise FlagError(f"unknown strategy '{strategy}'. Valid: {valid}")
