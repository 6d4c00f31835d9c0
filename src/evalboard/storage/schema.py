"""
Database schema -- SQLite tables for test cases and evaluation results.

Usage:
    initialize_schema(db_path)  # Creates tables if they don't exist
    get_connection(db_path)     # Returns a connection with WAL mode enabled

All tables use TEXT primary keys (UUIDs) and TEXT timestamps (ISO format, UTC).
Deleting a test case does not cascade to its results.
"""

import logging
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path("data/evalboard.db")

SCHEMA_SQL = """
-- Test cases: uploaded prompt / expected-output pairs
CREATE TABLE IF NOT EXISTS test_cases (
    id TEXT PRIMARY KEY,
    prompt TEXT NOT NULL,
    expected_output TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_test_cases_created
    ON test_cases(created_at);

-- Evaluation results: one row per judged evaluation
CREATE TABLE IF NOT EXISTS evaluation_results (
    id TEXT PRIMARY KEY,
    test_case_id TEXT NOT NULL REFERENCES test_cases(id),
    actual_output TEXT NOT NULL,
    accuracy_score INTEGER NOT NULL,
    clarity_score INTEGER NOT NULL,
    completeness_score INTEGER NOT NULL,
    total_score REAL NOT NULL,
    model_used TEXT NOT NULL,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_results_test_case
    ON evaluation_results(test_case_id);
CREATE INDEX IF NOT EXISTS idx_results_created
    ON evaluation_results(created_at);
"""


def get_connection(db_path: Path = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Get a SQLite connection with WAL mode and foreign keys enabled."""
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    conn.row_factory = sqlite3.Row
    return conn


def initialize_schema(db_path: Path = DEFAULT_DB_PATH) -> None:
    """Create tables if they don't exist."""
    conn = get_connection(db_path)
    try:
        conn.executescript(SCHEMA_SQL)
        conn.commit()
        logger.info(f"[Schema] Initialized at {db_path}")
    finally:
        conn.close()


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()
