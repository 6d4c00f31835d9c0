"""
SQLiteTestCaseStore -- stores uploaded test cases.

Test cases are created in bulk and never updated. Listings are newest first.
"""

import logging
import sqlite3
from pathlib import Path

from ..evaluation.models import TestCase, TestCaseInput
from .schema import DEFAULT_DB_PATH, get_connection, initialize_schema, new_id, utc_now

logger = logging.getLogger(__name__)


def _row_to_test_case(row: sqlite3.Row) -> TestCase:
    return TestCase(
        id=row["id"],
        prompt=row["prompt"],
        expected_output=row["expected_output"],
        created_at=row["created_at"],
    )


class SQLiteTestCaseStore:
    """
    Test case persistence.

    Usage:
        store = SQLiteTestCaseStore(Path("data/evalboard.db"))
        created = store.insert_many([TestCaseInput("What is 2+2?", "4")])
        case = store.get_by_id(created[0].id)
    """

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self._db_path = Path(db_path)
        initialize_schema(self._db_path)

    def get_by_id(self, test_case_id: str) -> TestCase | None:
        conn = get_connection(self._db_path)
        try:
            row = conn.execute(
                "SELECT * FROM test_cases WHERE id = ?", (test_case_id,)
            ).fetchone()
            return _row_to_test_case(row) if row else None
        finally:
            conn.close()

    def insert_many(self, rows: list[TestCaseInput]) -> list[TestCase]:
        """Insert all rows in one transaction. Returns them in input order."""
        created_at = utc_now()
        test_cases = [
            TestCase(
                id=new_id(),
                prompt=row.prompt,
                expected_output=row.expected_output,
                created_at=created_at,
            )
            for row in rows
        ]

        conn = get_connection(self._db_path)
        try:
            with conn:
                conn.executemany(
                    """INSERT INTO test_cases (id, prompt, expected_output, created_at)
                       VALUES (?, ?, ?, ?)""",
                    [(t.id, t.prompt, t.expected_output, t.created_at) for t in test_cases],
                )
            logger.info(f"[TestCaseStore] Inserted {len(test_cases)} test case(s)")
            return test_cases
        finally:
            conn.close()

    def get_all(self) -> list[TestCase]:
        conn = get_connection(self._db_path)
        try:
            rows = conn.execute(
                "SELECT * FROM test_cases ORDER BY created_at DESC, rowid DESC"
            ).fetchall()
            return [_row_to_test_case(r) for r in rows]
        finally:
            conn.close()

    def count(self) -> int:
        conn = get_connection(self._db_path)
        try:
            return conn.execute("SELECT COUNT(*) FROM test_cases").fetchone()[0]
        finally:
            conn.close()
