"""Report generation: console, JSON and HTML renderings plus summaries."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from rich.console import Console

from .exceptions import FileAccessError
from .formatters import ConsoleFormatter, HtmlFormatter, JsonFormatter
from .formatters.base import NO_RESULT_MESSAGE, is_result
from .logging_config import get_logger
from .models import TrinityValidationResult
from .scoring import ScoreCalculator

logger = get_logger(__name__)


class TrinityReporter:
    """Renders validation results; never mutates them.

    Args:
        include_warnings: Whether warnings appear in console and HTML output
        console: Console for ``print_console_report``
    """

    def __init__(self, include_warnings: bool = True, console: Optional[Console] = None):
        self.include_warnings = include_warnings
        self.console = console or Console()
        self.calculator = ScoreCalculator()

    def print_console_report(
        self, result: TrinityValidationResult, compact: bool = False, verbose: bool = False
    ) -> None:
        ConsoleFormatter(
            console=self.console,
            compact=compact,
            verbose=verbose,
            include_warnings=self.include_warnings,
        ).render(result)

    def generate_console_report(
        self, result: TrinityValidationResult, compact: bool = False, verbose: bool = False
    ) -> str:
        """Plain-text version of the console report, for writing to a file."""
        return ConsoleFormatter(
            compact=compact, verbose=verbose, include_warnings=self.include_warnings
        ).format(result)

    def generate_json_report(self, result: TrinityValidationResult) -> str:
        return JsonFormatter().format(result)

    def generate_html_report(self, result: TrinityValidationResult) -> str:
        return HtmlFormatter(include_warnings=self.include_warnings).format(result)

    def generate_report(self, result: TrinityValidationResult, output_format: str) -> str:
        """Render ``result`` as ``console`` text, ``json`` or ``html``.

        Raises:
            ValueError: If ``output_format`` is not recognized
        """
        renderers = {
            "console": self.generate_console_report,
            "json": self.generate_json_report,
            "html": self.generate_html_report,
        }
        renderer = renderers.get(output_format)
        if renderer is None:
            raise ValueError(
                f"Unknown output format: {output_format!r}. Choose from: {', '.join(sorted(renderers))}"
            )
        return renderer(result)

    def save_report(self, content: str, path: Union[str, Path], output_format: str = "json") -> Path:
        """Write ``content`` to ``path``, creating parent directories.

        Raises:
            FileAccessError: If the file cannot be written
        """
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as e:
            raise FileAccessError(target, str(e))
        logger.info(f"Saved {output_format} report to {target}")
        return target

    def generate_summary_report(self, results: Sequence[TrinityValidationResult]) -> str:
        """JSON summary across several runs: pass count and average scores."""
        runs = [r for r in results if is_result(r)]
        if not runs:
            return json.dumps({"error": NO_RESULT_MESSAGE}, indent=2)

        def average(values: List[int]) -> int:
            return round(sum(values) / len(values))

        summary: Dict[str, Any] = {
            "total_runs": len(runs),
            "passed": sum(1 for r in runs if r.valid),
            "failed": sum(1 for r in runs if not r.valid),
            "average_scores": {
                "test": average([r.score.test for r in runs]),
                "implementation": average([r.score.implementation for r in runs]),
                "documentation": average([r.score.documentation for r in runs]),
                "overall": average([r.score.overall or 0 for r in runs]),
            },
            "total_errors": sum(len(r.errors) for r in runs),
            "total_warnings": sum(len(r.warnings) for r in runs),
            "runs": [
                {
                    "project": r.metadata.project_name,
                    "mode": r.metadata.mode,
                    "timestamp": r.metadata.timestamp,
                    "valid": r.valid,
                    "overall": r.score.overall,
                }
                for r in runs
            ],
        }
        return json.dumps(summary, indent=2)

    def generate_trend_report(
        self,
        current: TrinityValidationResult,
        previous: Optional[TrinityValidationResult] = None,
    ) -> str:
        """JSON comparison of ``current`` against an earlier run."""
        if not is_result(current):
            return json.dumps({"error": NO_RESULT_MESSAGE}, indent=2)

        prev_score = previous.score if is_result(previous) else None
        trend = self.calculator.calculate_trend(current.score, prev_score)
        report = {
            "current": {
                "timestamp": current.metadata.timestamp,
                "score": current.score.overall,
                "valid": current.valid,
            },
            "previous": {
                "timestamp": previous.metadata.timestamp,
                "score": previous.score.overall,
                "valid": previous.valid,
            }
            if prev_score is not None
            else None,
            "trend": trend.trend,
            "difference": trend.difference,
            "layer_trends": trend.layer_trends,
        }
        return json.dumps(report, indent=2)
