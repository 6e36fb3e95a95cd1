"""CLI module for squash-tree."""

import sys
from typing import Optional

import click
import typer
from rich.console import Console
from rich.markup import escape

from squash_tree import __version__
from squash_tree.logging_config import setup_logging

USAGE = """Usage: git squash-tree <commit>              Show squash tree for a commit
       git squash-tree show <commit>         Same as above
       git squash-tree add-metadata --root=<ref> --base=<ref> --children=<ref,ref,...> [--strategy=auto|manual]
       git squash-tree init [--global]       Install hooks in repo (or globally)
       git squash-tree help                  Show this message

Examples:
  git squash-tree HEAD
  git squash-tree init
"""

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="git-squash-tree",
    help="Show which commits were squashed into a commit.",
    add_completion=False,
    no_args_is_help=False,
    context_settings=CONTEXT_SETTINGS,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[dim]git-squash-tree[/dim] v{__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Show which commits were squashed into a commit."""
    setup_logging()
    if ctx.invoked_subcommand is None:
        err_console.print(USAGE, markup=False, highlight=False, soft_wrap=True)
        raise typer.Exit(1)


from squash_tree.cli.commands import add_metadata, hook, init, show
from squash_tree.cli.commands import help as help_cmd

app.command()(show.show)
app.command(name="add-metadata")(add_metadata.add_metadata)
app.command()(init.init)
app.command(name="help")(help_cmd.help_cmd)

# Called by the installed hook scripts, not by users
hook_app = typer.Typer(
    name="hook",
    help="Git hook entry points.",
    no_args_is_help=True,
    context_settings=CONTEXT_SETTINGS,
)
hook_app.command(name="pre-rebase")(hook.pre_rebase)
hook_app.command(name="post-rewrite")(hook.post_rewrite)
hook_app.command(name="post-merge")(hook.post_merge)
hook_app.command(name="prepare-commit-msg")(hook.prepare_commit_msg)
hook_app.command(name="post-commit")(hook.post_commit)
app.add_typer(hook_app, hidden=True)

COMMAND_NAMES = ("show", "add-metadata", "init", "help", "hook")


def normalize_args(args: list[str]) -> list[str]:
    """Treat a bare commit as the first argument as ``show <commit>``."""
    if args and args[0] not in COMMAND_NAMES and not args[0].startswith("-"):
        return ["show", *args]
    return args


def run(argv: Optional[list[str]] = None) -> None:
    """Console script entry point.

    Usage errors are reported like any other error: ``Error: ...`` on stderr
    and exit status 1.
    """
    args = normalize_args(list(sys.argv[1:] if argv is None else argv))
    try:
        exit_code = app(args=args, prog_name="git squash-tree", standalone_mode=False)
    except click.ClickException as e:
        err_console.print(f"[red]Error:[/red] {escape(e.format_message())}", soft_wrap=True)
        sys.exit(1)
    except click.exceptions.Abort:
        sys.exit(1)

    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    run()
