"""
Score aggregation -- three rubric scores reduced to one total.

Rounding is half-up to one decimal place, done in Decimal rather than float.
"""

from decimal import ROUND_HALF_UP, Decimal

from .models import RubricScores

ONE_DECIMAL = Decimal("0.1")


def round_one_decimal(value: float | int | Decimal) -> float:
    """Round half-up to one decimal place."""
    return float(Decimal(str(value)).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))


def total_score(scores: RubricScores) -> float:
    """Mean of accuracy, clarity and completeness, rounded to one decimal."""
    total = Decimal(scores.accuracy) + Decimal(scores.clarity) + Decimal(scores.completeness)
    return float((total / 3).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))
