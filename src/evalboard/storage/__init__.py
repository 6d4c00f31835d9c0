"""
Storage -- SQLite persistence for test cases and evaluation results.

  - schema.py: table definitions and connection helper
  - test_cases.py: SQLiteTestCaseStore
  - results.py: SQLiteResultStore (listings joined with the test case)
"""

from .results import SQLiteResultStore
from .schema import DEFAULT_DB_PATH, get_connection, initialize_schema
from .test_cases import SQLiteTestCaseStore
