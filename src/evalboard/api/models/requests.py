"""
Pydantic request models -- the API contract for dashboard clients.

Field names on the wire are camelCase (testCaseId, testCaseIds,
actualOutput, testCases); snake_case names are accepted as well.
Row-level checks on uploads happen in the route so every bad row is reported
with its line number instead of a generic 422.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EvaluateRequest(BaseModel):
    """Single evaluation (test_case_id) or batch evaluation (test_case_ids)."""

    model_config = ConfigDict(populate_by_name=True)

    test_case_id: str | None = Field(None, alias="testCaseId")
    test_case_ids: list[str] | None = Field(None, alias="testCaseIds")
    actual_output: str | None = Field(
        None,
        alias="actualOutput",
        description="Output to judge; generated from the prompt when omitted",
    )


class UploadRequest(BaseModel):
    """Bulk test case upload of {prompt, expected_output} rows."""

    model_config = ConfigDict(populate_by_name=True)

    test_cases: list[dict[str, Any]] | None = Field(None, alias="testCases")
