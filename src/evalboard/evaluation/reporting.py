"""
Reporting -- dashboard statistics, result search/sort and CSV export.

Export columns:
  timestamp, prompt, expected_output, actual_output, accuracy_score,
  clarity_score, completeness_score, total_score, model_used
"""

import csv
import io
import logging
from datetime import date

from .models import DashboardStats, EvaluationResult
from .protocols import ResultStore, TestCaseStore
from .scoring import round_one_decimal

logger = logging.getLogger(__name__)

SORT_BY_DATE = "date"
SORT_BY_SCORE = "score"
SORT_CHOICES = [SORT_BY_DATE, SORT_BY_SCORE]

EXPORT_COLUMNS = [
    "timestamp",
    "prompt",
    "expected_output",
    "actual_output",
    "accuracy_score",
    "clarity_score",
    "completeness_score",
    "total_score",
    "model_used",
]


def dashboard_stats(test_cases: TestCaseStore, results: ResultStore) -> DashboardStats:
    """Totals plus the mean total_score of all results (0.0 when there are none)."""
    return DashboardStats(
        total_test_cases=test_cases.count(),
        total_evaluations=results.count(),
        average_score=round_one_decimal(results.average_total_score()),
    )


def filter_results(
    results: list[EvaluationResult],
    search: str | None = None,
    sort_by: str = SORT_BY_DATE,
) -> list[EvaluationResult]:
    """
    Case-insensitive search over prompt and actual output, then sort.

    "date" sorts newest first, "score" sorts highest total first. Both sorts
    are stable, so ties keep their incoming order.
    """
    filtered = results
    if search and search.strip():
        needle = search.strip().lower()
        filtered = [
            r
            for r in filtered
            if needle in r.actual_output.lower()
            or (r.test_case is not None and needle in r.test_case.prompt.lower())
        ]

    if sort_by == SORT_BY_SCORE:
        return sorted(filtered, key=lambda r: r.total_score, reverse=True)
    return sorted(filtered, key=lambda r: r.created_at, reverse=True)


def export_filename(today: date | None = None) -> str:
    return f"evaluation-results-{(today or date.today()).isoformat()}.csv"


def export_results_csv(results: list[EvaluationResult]) -> str:
    """Render results as CSV text with a header row."""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=EXPORT_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for r in results:
        writer.writerow({
            "timestamp": r.created_at,
            "prompt": r.test_case.prompt if r.test_case else "",
            "expected_output": r.test_case.expected_output if r.test_case else "",
            "actual_output": r.actual_output,
            "accuracy_score": r.scores.accuracy,
            "clarity_score": r.scores.clarity,
            "completeness_score": r.scores.completeness,
            "total_score": r.total_score,
            "model_used": r.model_used,
        })
    logger.debug(f"[Reporting] Exported {len(results)} result(s) to CSV")
    return buffer.getvalue()
