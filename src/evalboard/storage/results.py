"""
SQLiteResultStore -- stores evaluation results.

Scores are stored flat (accuracy_score, clarity_score, completeness_score)
and reassembled into RubricScores on read. Listings join the owning test
case and are newest first.
"""

import logging
import sqlite3
from pathlib import Path

from ..evaluation.models import EvaluationResult, RubricScores, StoredResult, TestCase
from .schema import DEFAULT_DB_PATH, get_connection, initialize_schema, new_id, utc_now

logger = logging.getLogger(__name__)

SELECT_WITH_TEST_CASE = """
SELECT r.*,
       tc.prompt AS tc_prompt,
       tc.expected_output AS tc_expected_output,
       tc.created_at AS tc_created_at
FROM evaluation_results r
LEFT JOIN test_cases tc ON tc.id = r.test_case_id
"""


def _row_to_result(row: sqlite3.Row) -> EvaluationResult:
    test_case = None
    if row["tc_prompt"] is not None:
        test_case = TestCase(
            id=row["test_case_id"],
            prompt=row["tc_prompt"],
            expected_output=row["tc_expected_output"],
            created_at=row["tc_created_at"],
        )
    return EvaluationResult(
        id=row["id"],
        test_case_id=row["test_case_id"],
        actual_output=row["actual_output"],
        scores=RubricScores(
            accuracy=row["accuracy_score"],
            clarity=row["clarity_score"],
            completeness=row["completeness_score"],
        ),
        total_score=row["total_score"],
        model_used=row["model_used"],
        created_at=row["created_at"],
        test_case=test_case,
    )


class SQLiteResultStore:
    """
    Evaluation result persistence.

    Usage:
        store = SQLiteResultStore(Path("data/evalboard.db"))
        stored = store.insert(test_case_id=..., actual_output=..., ...)
        results = store.get_all()
    """

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self._db_path = Path(db_path)
        initialize_schema(self._db_path)

    def insert(
        self,
        test_case_id: str,
        actual_output: str,
        accuracy_score: int,
        clarity_score: int,
        completeness_score: int,
        total_score: float,
        model_used: str,
    ) -> StoredResult:
        """Insert one result row; returns the assigned id and timestamp."""
        stored = StoredResult(id=new_id(), created_at=utc_now())

        conn = get_connection(self._db_path)
        try:
            with conn:
                conn.execute(
                    """INSERT INTO evaluation_results
                       (id, test_case_id, actual_output, accuracy_score,
                        clarity_score, completeness_score, total_score,
                        model_used, created_at)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                    (
                        stored.id,
                        test_case_id,
                        actual_output,
                        accuracy_score,
                        clarity_score,
                        completeness_score,
                        total_score,
                        model_used,
                        stored.created_at,
                    ),
                )
            logger.debug(
                f"[ResultStore] Recorded result {stored.id} for test case {test_case_id}"
            )
            return stored
        finally:
            conn.close()

    def get_all(self) -> list[EvaluationResult]:
        conn = get_connection(self._db_path)
        try:
            rows = conn.execute(
                SELECT_WITH_TEST_CASE + " ORDER BY r.created_at DESC, r.rowid DESC"
            ).fetchall()
            return [_row_to_result(r) for r in rows]
        finally:
            conn.close()

    def count(self) -> int:
        conn = get_connection(self._db_path)
        try:
            return conn.execute("SELECT COUNT(*) FROM evaluation_results").fetchone()[0]
        finally:
            conn.close()

    def average_total_score(self) -> float:
        """Mean total_score across all results, 0.0 when there are none."""
        conn = get_connection(self._db_path)
        try:
            value = conn.execute(
                "SELECT AVG(total_score) FROM evaluation_results"
            ).fetchone()[0]
            return float(value) if value is not None else 0.0
        finally:
            conn.close()
