"""
CSV ingestion -- parse and validate uploaded test case files.

Expected CSV format:

    prompt,expected_output
    "What is 2+2?","4"
    "Explain photosynthesis","Photosynthesis is the process..."

Header names are trimmed and lower-cased, blank lines are skipped, and every
row must carry a non-empty prompt and expected_output. Errors name the
physical line the row starts on (the header is line 1), so skipped blank rows
and quoted multi-line values do not shift the numbers.
"""

import csv
import io
import logging
from typing import Any

from ..evaluation.models import TestCaseInput
from ..security.validators import ValidationError

logger = logging.getLogger(__name__)

MAX_FILE_SIZE_BYTES = 5 * 1024 * 1024
REQUIRED_COLUMNS = ("prompt", "expected_output")

SAMPLE_ROWS = [
    {
        "prompt": "What is 2 + 2?",
        "expected_output": "4",
    },
    {
        "prompt": "Explain what photosynthesis is in simple terms.",
        "expected_output": (
            "Photosynthesis is the process by which plants use sunlight, water, "
            "and carbon dioxide to produce oxygen and energy in the form of sugar."
        ),
    },
    {
        "prompt": "Write a haiku about coding.",
        "expected_output": (
            "Lines of code align\nBugs emerge from the shadows\nDebug through the night"
        ),
    },
]


class CSVValidationError(ValidationError):
    """One or more CSV rows failed validation. .errors lists them per line."""

    def __init__(self, errors: list[str]):
        super().__init__("CSV validation failed:\n" + "\n".join(errors))
        self.errors = errors


def validate_csv_file(filename: str, size_bytes: int) -> None:
    """Check file type and size without parsing content."""
    if not filename.lower().endswith(".csv"):
        raise ValidationError("Invalid file type. Please upload a CSV file.")
    if size_bytes > MAX_FILE_SIZE_BYTES:
        raise ValidationError("File too large. Maximum size is 5MB.")


def _row_errors(row: dict[str, Any], line_number: int) -> list[str]:
    errors = []
    for column in REQUIRED_COLUMNS:
        value = row.get(column)
        if not isinstance(value, str) or not value.strip():
            errors.append(f"Row {line_number}: Missing or empty '{column}' field")
            break
    return errors


def validate_rows(rows: list[dict[str, Any]], first_line: int = 2) -> list[TestCaseInput]:
    """
    Validate already-parsed rows (CSV or JSON upload) into TestCaseInputs.

    Rows are numbered consecutively from first_line.

    Raises:
        ValidationError: no rows at all.
        CSVValidationError: any row missing a prompt or expected_output.
    """
    return _validate_numbered([(index + first_line, row) for index, row in enumerate(rows)])


def _validate_numbered(numbered: list[tuple[int, dict[str, Any]]]) -> list[TestCaseInput]:
    if not numbered:
        raise ValidationError("CSV file is empty or contains no valid data.")

    test_cases: list[TestCaseInput] = []
    errors: list[str] = []
    for line_number, row in numbered:
        row_errors = _row_errors(row, line_number)
        if row_errors:
            errors.extend(row_errors)
            continue
        test_cases.append(
            TestCaseInput(
                prompt=row["prompt"].strip(),
                expected_output=row["expected_output"].strip(),
            )
        )

    if errors:
        logger.warning(f"[CSV] Rejected upload with {len(errors)} invalid row(s)")
        raise CSVValidationError(errors)
    return test_cases


def _embedded_newlines(row: dict[Any, Any]) -> int:
    count = 0
    for value in row.values():
        if isinstance(value, str):
            count += value.count("\n")
        elif isinstance(value, list):
            count += sum(v.count("\n") for v in value)
    return count


def parse_test_cases(text: str) -> list[TestCaseInput]:
    """Parse CSV text into validated TestCaseInputs."""
    if text.startswith("\ufeff"):
        text = text[1:]

    reader = csv.DictReader(io.StringIO(text))
    if reader.fieldnames is None:
        raise ValidationError("CSV file is empty or contains no valid data.")
    reader.fieldnames = [name.strip().lower() for name in reader.fieldnames]

    numbered: list[tuple[int, dict[str, Any]]] = []
    try:
        for row in reader:
            if not any(isinstance(v, str) and v.strip() for v in row.values()):
                continue
            # line_num is where the record ends; quoted newlines push it past the start
            numbered.append((reader.line_num - _embedded_newlines(row), row))
    except csv.Error as e:
        raise ValidationError(f"Failed to parse CSV file: {e}") from e

    test_cases = _validate_numbered(numbered)
    logger.info(f"[CSV] Parsed {len(test_cases)} test case(s)")
    return test_cases


def generate_sample_csv() -> str:
    """Sample CSV users can download as a template."""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(REQUIRED_COLUMNS), lineterminator="\n")
    writer.writeheader()
    writer.writerows(SAMPLE_ROWS)
    return buffer.getvalue()
