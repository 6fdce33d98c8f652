"""CLI entry point; registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="trinity",
    help="Trinity - test, implementation and documentation validator",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold cyan]Trinity[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """
    Validate that a project's tests, implementation and documentation agree.

    [bold cyan]Examples:[/bold cyan]

      trinity validate

      trinity validate --mode pre-commit --fail-on errors

      trinity validate -f json -o reports/trinity.json

      trinity init --template typescript
    """


# Import subcommands to register them
from .validate import validate as _validate  # noqa: F401, E402
from .init import init as _init  # noqa: F401, E402
from .config_cmd import show_config as _show_config  # noqa: F401, E402
from .hooks import hooks_app as _hooks_app  # noqa: F401, E402
