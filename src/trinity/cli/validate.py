"""Validate command."""

from pathlib import Path
from typing import Optional, Sequence

import click
import typer

from ..baseline import load_baseline, save_baseline
from ..config import OUTPUT_FORMATS
from ..constants import ValidationMode
from ..exceptions import TrinityError
from ..logging_config import setup_logging
from ..models import TrinityValidationResult
from ..reporter import TrinityReporter
from ..scoring import ScoreCalculator
from ..validation import TrinityValidator
from . import app
from ._common import console, err_console, load_config

REPORT_EXTENSIONS = {"console": "txt", "json": "json", "html": "html"}

_TREND_STYLE = {"improving": "green", "declining": "red", "stable": "dim"}


def _print_trend(result: TrinityValidationResult, baseline: Path, weights: Sequence[float]) -> None:
    previous = load_baseline(baseline)
    if previous is None:
        err_console.print(f"[yellow]No baseline found at {baseline}[/yellow]")
        return
    trend = ScoreCalculator().calculate_trend(result.score, previous, weights)
    style = _TREND_STYLE[trend.trend]
    layers = ", ".join(f"{layer} {direction}" for layer, direction in trend.layer_trends.items())
    err_console.print(
        f"Trend vs baseline: [{style}]{trend.trend}[/{style}] ({trend.difference:+d})  [dim]{layers}[/dim]"
    )


@app.command()
def validate(
    path: Optional[Path] = typer.Option(
        None,
        "-C",
        "--path",
        help="Project root to validate (default: current directory)",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    mode: str = typer.Option(
        ValidationMode.ALL.value,
        "-m",
        "--mode",
        help="Which checks to run",
        click_type=click.Choice([m.value for m in ValidationMode], case_sensitive=False),
    ),
    output_format: Optional[str] = typer.Option(
        None,
        "-f",
        "--format",
        help="Report format (default: reporting.output_format)",
        click_type=click.Choice(list(OUTPUT_FORMATS), case_sensitive=False),
    ),
    output: Optional[Path] = typer.Option(
        None,
        "-o",
        "--output",
        help="Write the report to this file",
        dir_okay=False,
    ),
    min_score: Optional[int] = typer.Option(
        None,
        "--min-score",
        help="Minimum overall score for a valid run",
        min=0,
        max=100,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    compact: bool = typer.Option(False, "--compact", help="Short console report"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Layer details and debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="No console report; errors only"),
    baseline: Optional[Path] = typer.Option(
        None,
        "--baseline",
        help="Compare scores against a saved baseline",
        dir_okay=False,
    ),
    save_baseline_to: Optional[Path] = typer.Option(
        None,
        "--save-baseline",
        help="Save this run's scores as a baseline",
        dir_okay=False,
    ),
    fail_on: str = typer.Option(
        "invalid",
        "--fail-on",
        help="Exit 1 when the run is invalid, or only when it has errors",
        click_type=click.Choice(["invalid", "errors"], case_sensitive=False),
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also write progress logs (INFO and above) to this file",
        dir_okay=False,
    ),
):
    """
    Validate test, implementation and documentation layers.

    Exits 1 when validation fails and 2 when the configuration is unusable.
    """
    log_path = str(log_file) if log_file else None
    logger = setup_logging(verbose=verbose, quiet=quiet, log_file=log_path)

    try:
        trinity_config = load_config(path, config)
        cfg = trinity_config.require_valid()
        if cfg.reporting.verbose_logging and not (verbose or quiet):
            logger = setup_logging(verbose=True, log_file=log_path)
        validator = TrinityValidator(cfg, config_errors=trinity_config.load_errors)
        result = validator.validate_project(mode=mode.lower(), min_score=min_score)
    except TrinityError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(e.exit_code)

    fmt = (output_format or cfg.reporting.output_format).lower()
    reporter = TrinityReporter(include_warnings=cfg.reporting.include_warnings, console=console)

    target = output
    if target is None and cfg.reporting.output_file:
        target = cfg.root / cfg.reporting.output_file
    if target is None and cfg.reporting.generate_reports:
        target = cfg.root / cfg.reporting.report_directory / f"trinity-report.{REPORT_EXTENSIONS[fmt]}"

    if fmt == "console":
        if not quiet:
            reporter.print_console_report(result, compact=compact, verbose=verbose)
    elif target is None:
        typer.echo(reporter.generate_report(result, fmt))

    if target is not None:
        content = reporter.generate_report(result, fmt)
        try:
            saved = reporter.save_report(content, target, fmt)
        except TrinityError as e:
            err_console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(e.exit_code)
        if not quiet:
            err_console.print(f"[green]Report saved to {saved}[/green]")

    if baseline is not None and not quiet:
        _print_trend(result, baseline, cfg.scoring.weights)
    if save_baseline_to is not None:
        try:
            save_baseline(result, save_baseline_to)
        except TrinityError as e:
            err_console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(e.exit_code)
        if not quiet:
            err_console.print(f"[green]Baseline saved to {save_baseline_to}[/green]")

    failed = bool(result.errors) if fail_on.lower() == "errors" else not result.valid
    if failed:
        raise typer.Exit(1)
