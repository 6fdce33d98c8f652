"""Score calculation for the three layers and the overall Trinity score.

All functions here are pure: counts in, integer score out. Every score is
clamped to [0, 100].
"""

import math
from dataclasses import dataclass, fields
from typing import Dict, Optional, Sequence

from .constants import MIN_TRINITY_SCORE, PERFECT_SCORE, TREND_DEAD_ZONE
from .models import ScoreTrend, TrinityScore

GRADES = (
    (98, "A+"),
    (95, "A"),
    (90, "B+"),
    (85, "B"),
    (80, "C+"),
    (75, "C"),
    (70, "D+"),
    (65, "D"),
)

# Flat per-warning deduction used only by the breakdown view
WARNING_PENALTY = 2


@dataclass
class Penalties:
    """Points deducted per occurrence of each finding kind."""

    missing_dependency: int = 5
    broken_import: int = 3
    missing_test: int = 10
    missing_documentation: int = 15
    critical_file_missing: int = 20
    failed_test: int = 25
    broken_link: int = 5
    test_structure: int = 20
    few_tests: int = 10

    def as_dict(self) -> Dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def clamp(score: float) -> int:
    return int(max(0, min(PERFECT_SCORE, score)))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class ScoreCalculator:
    """Turns finding counts into layer scores.

    Args:
        penalties: Per-finding deductions; defaults to ``Penalties()``.
    """

    def __init__(self, penalties: Optional[Penalties] = None):
        self.penalties = penalties or Penalties()

    def calculate_test_score(
        self, total_files: int, dependency_errors: int, structure_valid: bool
    ) -> int:
        if total_files == 0:
            return 0
        score = PERFECT_SCORE - dependency_errors * self.penalties.missing_dependency
        if not structure_valid:
            score -= self.penalties.test_structure
        if total_files < 3:
            score -= self.penalties.few_tests
        return clamp(score)

    def calculate_implementation_score(
        self, total_files: int, import_errors: int, missing_utilities: int
    ) -> int:
        if total_files == 0:
            return 0
        score = (
            PERFECT_SCORE
            - import_errors * self.penalties.broken_import
            - missing_utilities * self.penalties.critical_file_missing
        )
        return clamp(score)

    def calculate_documentation_score(self, completeness: int, broken_links: int) -> int:
        return clamp(completeness - broken_links * self.penalties.broken_link)

    def calculate_completeness(self, missing_required_docs: int) -> int:
        return max(0, PERFECT_SCORE - missing_required_docs * self.penalties.missing_documentation)

    def calculate_overall_score(
        self, scores: TrinityScore, weights: Sequence[float] = (1.0, 1.0, 1.0)
    ) -> int:
        """Weighted mean of the three layer scores, rounded half-up.

        If every weight is zero the overall score is 0.
        """
        w_test, w_impl, w_doc = weights
        total_weight = w_test + w_impl + w_doc
        if total_weight <= 0:
            return 0
        weighted = (
            scores.test * w_test
            + scores.implementation * w_impl
            + scores.documentation * w_doc
        )
        return clamp(round_half_up(weighted / total_weight))

    @staticmethod
    def get_score_grade(score: float) -> str:
        for threshold, grade in GRADES:
            if score >= threshold:
                return grade
        return "F"

    @staticmethod
    def is_passing_score(score: float, minimum: float = MIN_TRINITY_SCORE) -> bool:
        return score >= minimum

    @staticmethod
    def get_score_improvement(current: float, target: float = MIN_TRINITY_SCORE) -> int:
        return int(max(0, math.ceil(target - current)))

    def estimate_fixes_needed(self, current: float, target: float = MIN_TRINITY_SCORE) -> Dict[str, int]:
        """How many fixes of each kind would close the gap on their own."""
        gap = self.get_score_improvement(current, target)
        return {
            "dependency_errors": math.ceil(gap / self.penalties.missing_dependency)
            if self.penalties.missing_dependency
            else 0,
            "missing_tests": math.ceil(gap / self.penalties.missing_test)
            if self.penalties.missing_test
            else 0,
            "missing_docs": math.ceil(gap / self.penalties.missing_documentation)
            if self.penalties.missing_documentation
            else 0,
        }

    def calculate_penalty(self, kind: str, count: int) -> int:
        """Total deduction for ``count`` findings of ``kind``.

        Raises:
            KeyError: If ``kind`` is not a known penalty
        """
        table = self.penalties.as_dict()
        if kind not in table:
            raise KeyError(f"Unknown penalty kind: {kind!r}")
        return table[kind] * count

    def calculate_score_breakdown(
        self, errors: Dict[str, int], warnings: Dict[str, int]
    ) -> Dict[str, TrinityScore]:
        """Per-layer base, error and warning deductions, and the result."""
        error_weights = {
            "test": self.penalties.missing_dependency,
            "implementation": self.penalties.broken_import,
            "documentation": self.penalties.missing_documentation,
        }
        base = TrinityScore(PERFECT_SCORE, PERFECT_SCORE, PERFECT_SCORE)
        error_pen = TrinityScore(
            **{layer: errors.get(layer, 0) * w for layer, w in error_weights.items()}
        )
        warning_pen = TrinityScore(
            **{layer: warnings.get(layer, 0) * WARNING_PENALTY for layer in error_weights}
        )
        final = TrinityScore(
            **{
                layer: clamp(PERFECT_SCORE - error_pen.layer(layer) - warning_pen.layer(layer))
                for layer in error_weights
            }
        )
        return {
            "base_score": base,
            "error_penalties": error_pen,
            "warning_penalties": warning_pen,
            "final_score": final,
        }

    def calculate_trend(
        self,
        current: TrinityScore,
        previous: Optional[TrinityScore] = None,
        weights: Sequence[float] = (1.0, 1.0, 1.0),
    ) -> ScoreTrend:
        """Compare two runs; moves within the dead zone count as stable."""
        if previous is None:
            return ScoreTrend()

        difference = self.calculate_overall_score(current, weights) - self.calculate_overall_score(
            previous, weights
        )

        def direction(diff: int) -> str:
            if diff > TREND_DEAD_ZONE:
                return "up"
            if diff < -TREND_DEAD_ZONE:
                return "down"
            return "stable"

        overall = direction(difference)
        trend = {"up": "improving", "down": "declining"}.get(overall, "stable")
        return ScoreTrend(
            trend=trend,
            difference=difference,
            layer_trends={
                layer: direction(current.layer(layer) - previous.layer(layer))
                for layer in ("test", "implementation", "documentation")
            },
        )
