"""Init command."""

from pathlib import Path
from typing import Optional

import click
import typer

from ..config import EXAMPLE_CONFIG_FILE_NAME, TEMPLATES, TrinityConfig
from ..exceptions import TrinityError
from ..logging_config import setup_logging
from . import app
from ._common import console


@app.command()
def init(
    path: Optional[Path] = typer.Option(
        None,
        "-C",
        "--path",
        help="Project root (default: current directory)",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    template: Optional[str] = typer.Option(
        None,
        "-t",
        "--template",
        help="Settings template (default: the detected language)",
        click_type=click.Choice(sorted(TEMPLATES), case_sensitive=False),
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing trinity.toml"),
):
    """Detect the project and write trinity.toml plus an example config."""
    logger = setup_logging()
    root = Path(path) if path else Path.cwd()

    try:
        trinity_config = TrinityConfig(root)
        if trinity_config.exists() and not force:
            console.print(
                f"[yellow]{trinity_config.config_path} already exists.[/yellow] Use --force to overwrite."
            )
            raise typer.Exit(1)
        saved = trinity_config.initialize(template.lower() if template else None)
    except TrinityError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(e.exit_code)

    cfg = trinity_config.get_config()
    console.print(f"[green]Created {saved}[/green]")
    console.print(f"[green]Created {saved.parent / EXAMPLE_CONFIG_FILE_NAME}[/green]")
    console.print(
        f"Project [bold]{cfg.project.project_name}[/bold]: "
        f"[cyan]{cfg.project.language}[/cyan] ({cfg.project.framework})"
    )
