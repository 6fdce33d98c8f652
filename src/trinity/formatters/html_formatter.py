"""Self-contained HTML formatter for Trinity reports."""

from html import escape
from typing import List

from ..constants import LAYERS
from ..models import TrinityValidationResult, ValidationError
from ..scoring import ScoreCalculator
from .base import NO_RESULT_MESSAGE, BaseFormatter, is_result
from .console_formatter import score_color

_STYLE = """
body { font-family: -apple-system, "Segoe UI", Helvetica, Arial, sans-serif; margin: 2rem; color: #222; }
h1 { margin-bottom: 0.2rem; }
.meta { color: #666; font-size: 0.9rem; }
.status { font-weight: bold; padding: 0.2rem 0.6rem; border-radius: 4px; color: #fff; }
.passed { background: #2e7d32; } .failed { background: #c62828; }
table { border-collapse: collapse; margin: 1rem 0; }
th, td { border: 1px solid #ddd; padding: 0.4rem 0.8rem; text-align: left; }
th { background: #f5f5f5; }
.green { color: #2e7d32; } .cyan { color: #00838f; } .yellow { color: #f9a825; } .red { color: #c62828; }
li.error { color: #c62828; } li.warning { color: #8d6e00; }
"""


def _page(title: str, body: str) -> str:
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n<head>\n<meta charset="utf-8">\n'
        f"<title>{escape(title)}</title>\n<style>{_STYLE}</style>\n</head>\n"
        f"<body>\n{body}\n</body>\n</html>\n"
    )


class HtmlFormatter(BaseFormatter):
    """One HTML page with inline CSS and no external assets."""

    def __init__(self, include_warnings: bool = True):
        self.include_warnings = include_warnings

    def render(self, result: TrinityValidationResult) -> None:
        print(self.format(result))

    def format(self, result: TrinityValidationResult) -> str:
        if not is_result(result):
            return _page("Trinity Validation Report", f"<p>{NO_RESULT_MESSAGE}</p>")

        meta = result.metadata
        status = "passed" if result.valid else "failed"
        parts = [
            f"<h1>Trinity Validation: {escape(meta.project_name)}</h1>",
            f'<p class="meta">Mode {escape(meta.mode)} &middot; {escape(meta.timestamp)} '
            f"&middot; {meta.execution_time}ms &middot; trinity {escape(meta.trinity_version)}</p>",
            f'<p><span class="status {status}">{status.upper()}</span></p>',
            self._scores(result),
            self._layers(result),
            self._findings("Errors", result.errors),
        ]
        if self.include_warnings:
            parts.append(self._findings("Warnings", result.warnings))
        if result.recommendations:
            items = "".join(f"<li>{escape(r)}</li>" for r in result.recommendations)
            parts.append(f"<h2>Recommendations</h2>\n<ul>{items}</ul>")
        return _page(f"Trinity Validation Report - {meta.project_name}", "\n".join(parts))

    def _scores(self, result: TrinityValidationResult) -> str:
        rows = []
        overall = result.score.overall or 0
        for name, value in [(layer, result.score.layer(layer)) for layer in LAYERS] + [
            ("overall", overall)
        ]:
            rows.append(
                f"<tr><td>{name.capitalize()}</td>"
                f'<td class="{score_color(value)}">{value}%</td>'
                f"<td>{ScoreCalculator.get_score_grade(value)}</td></tr>"
            )
        return (
            "<h2>Trinity Score</h2>\n<table>\n<tr><th>Layer</th><th>Score</th><th>Grade</th></tr>\n"
            + "\n".join(rows)
            + "\n</table>"
        )

    def _layers(self, result: TrinityValidationResult) -> str:
        rows = [
            f"<tr><td>{escape(name.capitalize())}</td><td>{layer.details.total_files}</td>"
            f"<td>{layer.details.valid_files}</td><td>{layer.details.error_count}</td>"
            f"<td>{layer.details.warning_count}</td></tr>"
            for name, layer in result.layers.items()
        ]
        sync = result.synchronization
        return (
            "<h2>Layers</h2>\n<table>\n"
            "<tr><th>Layer</th><th>Files</th><th>Valid</th><th>Errors</th><th>Warnings</th></tr>\n"
            + "\n".join(rows)
            + "\n</table>\n"
            f"<p>Synchronized: {'yes' if sync.synchronized else 'no'} &middot; "
            f"test coverage {sync.coverage.test_coverage}% &middot; "
            f"documentation coverage {sync.coverage.documentation_coverage}%</p>"
        )

    def _findings(self, title: str, findings: List[ValidationError]) -> str:
        if not findings:
            return ""
        items = "".join(
            f'<li class="{escape(f.severity)}">[{escape(f.category)}] {escape(f.message)}</li>'
            for f in findings
        )
        return f"<h2>{title} ({len(findings)})</h2>\n<ul>{items}</ul>"
