"""Test case ingestion -- CSV parsing, row validation, sample template."""
from .csv_parser import (
    MAX_FILE_SIZE_BYTES,
    CSVValidationError,
    generate_sample_csv,
    parse_test_cases,
    validate_csv_file,
    validate_rows,
)
