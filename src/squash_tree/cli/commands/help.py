"""Print usage."""

from rich.console import Console

console = Console()


def help_cmd() -> None:
    """Show usage and examples."""
    from squash_tree.cli import USAGE

    console.print(USAGE, markup=False, highlight=False, soft_wrap=True, end="")
