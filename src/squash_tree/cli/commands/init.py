"""Install squash-tree git hooks."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from squash_tree.config import load_settings
from squash_tree.exceptions import SquashTreeError
from squash_tree.git.client import GitClient
from squash_tree.hooks.installer import HookInstaller, InstalledHook
from squash_tree.repository import SquashRepository

console = Console()
err_console = Console(stderr=True)


def init(
    global_: Annotated[
        bool,
        typer.Option("--global", help="Install hooks for every repository via core.hooksPath"),
    ] = False,
) -> None:
    """Install the hooks that record squash metadata.

    Without --global, writes the hooks into the current repository. With
    --global, writes them to a shared directory and points git's global
    core.hooksPath at it.

    Examples:
        git squash-tree init
        git squash-tree init --global
    """
    try:
        if global_:
            hooks_dir, installed = _install_global()
            scope = "all repositories"
        else:
            repo = SquashRepository.open()
            hooks_dir = repo.hooks_dir
            installed = HookInstaller(hooks_dir).install()
            scope = repo.git.repo_path.name
    except (SquashTreeError, OSError) as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    hook_lines = "\n".join(f"  [cyan]{escape(h.description)}[/cyan]" for h in installed)
    console.print(
        Panel(
            f"[green]Hooks installed for {escape(scope)}[/green]\n\n"
            f"[bold]Directory:[/bold] {escape(str(hooks_dir))}\n"
            f"[bold]Hooks:[/bold]\n{hook_lines}\n\n"
            f"[dim]Squash metadata will be recorded automatically.[/dim]\n"
            f"[dim]Use 'git squash-tree <commit>' to view a squash tree.[/dim]",
            title="squash-tree",
            border_style="green",
        )
    )


def _install_global() -> tuple[Path, list[InstalledHook]]:
    """Install into the shared hooks directory and register it globally."""
    settings = load_settings()
    hooks_dir = settings.global_hooks_dir
    installed = HookInstaller(hooks_dir).install()

    GitClient(Path.cwd()).set_global_config("core.hooksPath", str(hooks_dir))
    return hooks_dir, installed
