"""Tests for layer, overall and trend scoring."""

import pytest

from trinity.models import TrinityScore
from trinity.scoring import Penalties, ScoreCalculator, round_half_up


@pytest.fixture
def calc():
    return ScoreCalculator()


class TestLayerScores:
    def test_test_score_no_files(self, calc):
        assert calc.calculate_test_score(0, 0, True) == 0

    def test_test_score_perfect(self, calc):
        assert calc.calculate_test_score(5, 0, True) == 100

    def test_test_score_penalties(self, calc):
        # 100 - 2*5 - 20 (structure) - 10 (fewer than three files)
        assert calc.calculate_test_score(2, 2, False) == 60

    def test_test_score_clamped(self, calc):
        assert calc.calculate_test_score(10, 50, False) == 0

    def test_implementation_score(self, calc):
        assert calc.calculate_implementation_score(0, 0, 0) == 0
        assert calc.calculate_implementation_score(4, 1, 0) == 97
        assert calc.calculate_implementation_score(4, 2, 1) == 74

    def test_documentation_score(self, calc):
        assert calc.calculate_documentation_score(100, 0) == 100
        assert calc.calculate_documentation_score(85, 2) == 75
        assert calc.calculate_documentation_score(10, 5) == 0

    def test_completeness(self, calc):
        assert calc.calculate_completeness(0) == 100
        assert calc.calculate_completeness(2) == 70
        assert calc.calculate_completeness(10) == 0

    def test_custom_penalties(self):
        calc = ScoreCalculator(Penalties(broken_import=10))
        assert calc.calculate_implementation_score(3, 2, 0) == 80


class TestOverallScore:
    def test_equal_weights(self, calc):
        assert calc.calculate_overall_score(TrinityScore(0, 100, 100)) == 67

    def test_rounds_half_up(self, calc):
        # 100 + 100 + 99 = 299 / 3 = 99.67; 100 + 100 + 95 = 98.33
        assert calc.calculate_overall_score(TrinityScore(100, 100, 99)) == 100
        assert calc.calculate_overall_score(TrinityScore(100, 100, 95)) == 98
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4

    def test_weights(self, calc):
        assert calc.calculate_overall_score(TrinityScore(100, 0, 0), (2, 1, 1)) == 50

    def test_zero_weights(self, calc):
        assert calc.calculate_overall_score(TrinityScore(100, 100, 100), (0, 0, 0)) == 0

    def test_zero_implementation_keeps_overall_below_perfect(self, calc):
        assert calc.calculate_overall_score(TrinityScore(100, 0, 100)) < 100

    @pytest.mark.parametrize("test,impl,doc", [(0, 0, 0), (100, 100, 100), (37, 81, 64)])
    def test_overall_in_range(self, calc, test, impl, doc):
        assert 0 <= calc.calculate_overall_score(TrinityScore(test, impl, doc)) <= 100


class TestHelpers:
    def test_grades(self, calc):
        assert calc.get_score_grade(100) == "A+"
        assert calc.get_score_grade(95) == "A"
        assert calc.get_score_grade(90) == "B+"
        assert calc.get_score_grade(85) == "B"
        assert calc.get_score_grade(80) == "C+"
        assert calc.get_score_grade(75) == "C"
        assert calc.get_score_grade(70) == "D+"
        assert calc.get_score_grade(65) == "D"
        assert calc.get_score_grade(64) == "F"

    def test_passing(self, calc):
        assert calc.is_passing_score(90)
        assert not calc.is_passing_score(89)
        assert calc.is_passing_score(70, minimum=70)

    def test_improvement(self, calc):
        assert calc.get_score_improvement(85) == 5
        assert calc.get_score_improvement(95) == 0

    def test_fixes_needed(self, calc):
        assert calc.estimate_fixes_needed(80) == {
            "dependency_errors": 2,
            "missing_tests": 1,
            "missing_docs": 1,
        }

    def test_penalty(self, calc):
        assert calc.calculate_penalty("missing_test", 3) == 30
        with pytest.raises(KeyError):
            calc.calculate_penalty("no_such_kind", 1)

    def test_breakdown(self, calc):
        breakdown = calc.calculate_score_breakdown({"test": 2}, {"documentation": 3})
        assert breakdown["base_score"].test == 100
        assert breakdown["error_penalties"].test == 10
        assert breakdown["warning_penalties"].documentation == 6
        assert breakdown["final_score"].test == 90
        assert breakdown["final_score"].documentation == 94
        assert breakdown["final_score"].implementation == 100


class TestTrend:
    def test_no_previous(self, calc):
        trend = calc.calculate_trend(TrinityScore(90, 90, 90))
        assert trend.trend == "stable"
        assert trend.difference == 0

    def test_improving(self, calc):
        trend = calc.calculate_trend(TrinityScore(100, 100, 100), TrinityScore(80, 100, 100))
        assert trend.trend == "improving"
        assert trend.difference == 7
        assert trend.layer_trends == {"test": "up", "implementation": "stable", "documentation": "stable"}

    def test_declining(self, calc):
        trend = calc.calculate_trend(TrinityScore(70, 70, 70), TrinityScore(90, 90, 90))
        assert trend.trend == "declining"
        assert trend.layer_trends["documentation"] == "down"

    def test_dead_zone(self, calc):
        trend = calc.calculate_trend(TrinityScore(92, 90, 90), TrinityScore(90, 90, 90))
        assert trend.trend == "stable"
        assert trend.layer_trends["test"] == "stable"

    def test_weighted_difference(self, calc):
        current, previous = TrinityScore(100, 100, 100), TrinityScore(80, 100, 100)
        assert calc.calculate_trend(current, previous, (2.0, 1.0, 1.0)).difference == 10
        ignored = calc.calculate_trend(current, previous, (0.0, 1.0, 1.0))
        assert ignored.difference == 0
        assert ignored.trend == "stable"
