"""Rich terminal formatter for Trinity reports."""

import io
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..constants import LAYERS
from ..models import TrinityValidationResult, ValidationError
from ..scoring import ScoreCalculator
from .base import NO_RESULT_MESSAGE, BaseFormatter, is_result

# Errors and warnings shown per list before "... and N more"
COMPACT_LIMIT = 5
DEFAULT_LIMIT = 20


def score_color(score: float) -> str:
    if score >= 95:
        return "green"
    elif score >= 90:
        return "cyan"
    elif score >= 80:
        return "yellow"
    else:
        return "red"


def _score_label(score: float) -> str:
    color = score_color(score)
    return f"[{color}]{score:.0f}%[/{color}]"


class ConsoleFormatter(BaseFormatter):
    """Header, status, score breakdown, layer details, findings and advice.

    Args:
        console: Where ``render`` writes; a stdout console by default
        compact: Only header, status, scores and the first few findings
        verbose: Add layer details and every finding
        include_warnings: Show warnings at all
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        compact: bool = False,
        verbose: bool = False,
        include_warnings: bool = True,
    ):
        self.console = console or Console()
        self.compact = compact
        self.verbose = verbose
        self.include_warnings = include_warnings

    def render(self, result: TrinityValidationResult) -> None:
        self._print(self.console, result)

    def format(self, result: TrinityValidationResult) -> str:
        buffer = io.StringIO()
        console = Console(file=buffer, width=100, no_color=True, highlight=False, soft_wrap=True)
        self._print(console, result)
        return buffer.getvalue()

    # -- private helpers --

    def _print(self, console: Console, result: TrinityValidationResult) -> None:
        if not is_result(result):
            console.print(f"[yellow]{NO_RESULT_MESSAGE}[/yellow]")
            return

        self._print_header(console, result)
        self._print_scores(console, result)
        if self.verbose and not self.compact:
            self._print_layers(console, result)
        self._print_findings(console, "Errors", result.errors, "red", "x")
        if self.include_warnings:
            self._print_findings(console, "Warnings", result.warnings, "yellow", "!")
        if not self.compact:
            self._print_recommendations(console, result.recommendations)
            self._print_footer(console, result)

    def _print_header(self, console: Console, result: TrinityValidationResult) -> None:
        meta = result.metadata
        status = "[green bold]PASSED[/green bold]" if result.valid else "[red bold]FAILED[/red bold]"
        console.print(
            Panel(
                f"Project: [bold]{escape(meta.project_name)}[/bold]  |  Mode: [cyan]{meta.mode}[/cyan]  |  "
                f"Status: {status}",
                title="[bold cyan]Trinity Validation[/bold cyan]",
                expand=False,
            )
        )
        console.print()

    def _print_scores(self, console: Console, result: TrinityValidationResult) -> None:
        score = result.score
        overall = score.overall or 0
        table = Table(title="Trinity Score", expand=False)
        table.add_column("Layer", style="bold")
        table.add_column("Score", justify="right")
        table.add_column("Grade", justify="center")
        for layer in LAYERS:
            value = score.layer(layer)
            table.add_row(layer.capitalize(), _score_label(value), ScoreCalculator.get_score_grade(value))
        table.add_section()
        table.add_row(
            "[bold]Overall[/bold]", _score_label(overall), ScoreCalculator.get_score_grade(overall)
        )
        console.print(table)
        console.print()

    def _print_layers(self, console: Console, result: TrinityValidationResult) -> None:
        table = Table(title="Layer Details", expand=False)
        table.add_column("Layer", style="bold")
        table.add_column("Files", justify="right")
        table.add_column("Valid", justify="right")
        table.add_column("Errors", justify="right", style="red")
        table.add_column("Warnings", justify="right", style="yellow")
        for name, layer in result.layers.items():
            d = layer.details
            table.add_row(
                name.capitalize(),
                str(d.total_files),
                str(d.valid_files),
                str(d.error_count),
                str(d.warning_count),
            )
        console.print(table)

        sync = result.synchronization
        console.print(
            f"Synchronization: {'[green]in sync[/green]' if sync.synchronized else '[yellow]out of sync[/yellow]'}"
            f"  |  Test coverage: {sync.coverage.test_coverage}%"
            f"  |  Documentation coverage: {sync.coverage.documentation_coverage}%"
        )
        console.print()

    def _print_findings(
        self,
        console: Console,
        title: str,
        findings: List[ValidationError],
        color: str,
        marker: str,
    ) -> None:
        if not findings:
            return
        console.print(f"[bold {color}]{title} ({len(findings)}):[/bold {color}]")
        if self.verbose and not self.compact:
            shown = findings
        else:
            shown = findings[: COMPACT_LIMIT if self.compact else DEFAULT_LIMIT]
        for finding in shown:
            console.print(f"  [{color}]{marker}[/{color}] [dim]\\[{finding.category}][/dim] {escape(finding.message)}")
        hidden = len(findings) - len(shown)
        if hidden:
            console.print(f"  [dim]... and {hidden} more[/dim]")
        console.print()

    def _print_recommendations(self, console: Console, recommendations: List[str]) -> None:
        if not recommendations:
            return
        console.print("[bold]Recommendations:[/bold]")
        for rec in recommendations:
            console.print(f"  [green]->[/green] {escape(rec)}")
        console.print()

    def _print_footer(self, console: Console, result: TrinityValidationResult) -> None:
        meta = result.metadata
        console.print(
            f"[dim]{meta.total_files} files ({meta.test_files} test, "
            f"{meta.implementation_files} implementation, {meta.documentation_files} docs) "
            f"in {meta.execution_time}ms  |  trinity {meta.trinity_version}  |  {meta.timestamp}[/dim]"
        )
