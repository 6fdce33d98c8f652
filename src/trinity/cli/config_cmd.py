"""Config command."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from ..exceptions import TrinityError
from ..logging_config import setup_logging
from . import app
from ._common import console, load_config


@app.command("config")
def show_config(
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
    json_output: bool = typer.Option(False, "--json", help="Output in machine-readable JSON format"),
):
    """Show the merged configuration and whether it is valid.

    Exits 2 when the configuration has problems.
    """
    logger = setup_logging(quiet=json_output)
    try:
        trinity_config = load_config(path)
    except TrinityError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(e.exit_code)

    cfg = trinity_config.get_config()
    validation = trinity_config.validate_config()

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "config": cfg.to_dict(),
                    "source": str(trinity_config.config_path) if trinity_config.exists() else None,
                    "valid": validation.valid,
                    "errors": validation.errors,
                },
                indent=2,
            )
        )
    else:
        source = trinity_config.config_path if trinity_config.exists() else "defaults"
        console.print(f"[bold cyan]Configuration[/bold cyan] ({source})")
        for section, values in cfg.to_dict().items():
            table = Table(title=escape(f"[{section}]"), title_justify="left", show_header=False, expand=False)
            table.add_column("Key", style="bold")
            table.add_column("Value")
            for key, value in values.items():
                table.add_row(key, escape(json.dumps(value) if not isinstance(value, str) else value))
            console.print(table)
        if validation.valid:
            console.print("[green]Configuration is valid[/green]")
        else:
            for error in validation.errors:
                console.print(f"  [red]x[/red] {escape(error)}")

    if not validation.valid:
        raise typer.Exit(2)
