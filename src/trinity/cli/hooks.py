"""Git hook commands."""

from pathlib import Path
from typing import Optional

import typer

from ..exceptions import TrinityError
from ..logging_config import setup_logging
from ..validation.git import install_hook
from . import app
from ._common import console, load_config

hooks_app = typer.Typer(help="Manage git hooks that run trinity validate")
app.add_typer(hooks_app, name="hooks")


@hooks_app.command("install")
def install(
    path: Optional[Path] = typer.Option(
        None,
        "-C",
        "--path",
        help="Repository root (default: current directory)",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite hooks not written by trinity"),
):
    """Install pre-commit and pre-push hooks as enabled in the [git] config."""
    logger = setup_logging()
    root = Path(path) if path else Path.cwd()

    try:
        git = load_config(root).get_config().git
        hooks = []
        if git.pre_commit_validation:
            hooks.append(("pre-commit", git.block_commit_on_failure))
        if git.pre_push_validation:
            hooks.append(("pre-push", git.block_push_on_failure))
        if not hooks:
            console.print("[yellow]Both hooks are disabled in the \\[git] config; nothing to install.[/yellow]")
            raise typer.Exit(0)
        for hook, block in hooks:
            installed = install_hook(root, hook, force=force, block=block)
            console.print(f"[green]Installed {hook} hook[/green] at {installed}")
    except TrinityError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(e.exit_code)
