"""Score aggregation -- mean of three rubric scores, one decimal, half-up."""

import itertools
from decimal import ROUND_HALF_UP, Decimal

import pytest

from evalboard.evaluation.models import RubricScores
from evalboard.evaluation.scoring import round_one_decimal, total_score


class TestTotalScore:
    @pytest.mark.parametrize(
        "scores, expected",
        [
            ((8, 9, 7), 8.0),
            ((9, 8, 8), 8.3),
            ((10, 10, 9), 9.7),
            ((0, 0, 0), 0.0),
            ((10, 10, 10), 10.0),
            ((0, 0, 1), 0.3),
            ((0, 1, 1), 0.7),
        ],
    )
    def test_mean_rounded_to_one_decimal(self, scores, expected):
        assert total_score(RubricScores(*scores)) == expected

    def test_order_of_scores_does_not_matter(self):
        a = total_score(RubricScores(accuracy=3, clarity=7, completeness=10))
        b = total_score(RubricScores(accuracy=10, clarity=3, completeness=7))
        assert a == b == 6.7

    def test_result_is_float(self):
        assert isinstance(total_score(RubricScores(5, 5, 5)), float)


class TestRoundOneDecimal:
    def test_rounds_half_up(self):
        assert round_one_decimal(0.25) == 0.3
        assert round_one_decimal(8.35) == 8.4

    def test_zero(self):
        assert round_one_decimal(0) == 0.0

    def test_long_fraction(self):
        assert round_one_decimal(7.777777) == 7.8


class TestTotalScoreProperties:
    def test_every_valid_combination(self):
        """All 11^3 score triples: half-up mean, in range, same on a second call."""
        points = range(0, 11)
        for accuracy, clarity, completeness in itertools.product(points, points, points):
            scores = RubricScores(accuracy, clarity, completeness)
            mean = Decimal(accuracy + clarity + completeness) / 3
            expected = float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))

            first = total_score(scores)

            assert first == expected
            assert 0.0 <= first <= 10.0
            assert total_score(scores) == first
