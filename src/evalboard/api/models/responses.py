"""
Pydantic response models -- what the API returns.

Result and test case payloads keep the snake_case field names of the stored
rows; envelope keys (success, totalEvaluated, testCases) are camelCase.
"""

from pydantic import BaseModel, ConfigDict, Field

from ...evaluation.models import BatchFailure, DashboardStats, EvaluationResult, TestCase


# =============================================================================
# DOMAIN PAYLOADS
# =============================================================================


class TestCaseOut(BaseModel):
    id: str
    prompt: str
    expected_output: str
    created_at: str

    @classmethod
    def from_domain(cls, test_case: TestCase) -> "TestCaseOut":
        return cls(**test_case.to_dict())


class ScoresOut(BaseModel):
    accuracy: int
    clarity: int
    completeness: int


class EvaluationResultOut(BaseModel):
    id: str
    test_case_id: str
    actual_output: str
    scores: ScoresOut
    total_score: float
    model_used: str
    created_at: str
    test_case: TestCaseOut | None = None

    @classmethod
    def from_domain(cls, result: EvaluationResult) -> "EvaluationResultOut":
        return cls(
            id=result.id,
            test_case_id=result.test_case_id,
            actual_output=result.actual_output,
            scores=ScoresOut(**result.scores.to_dict()),
            total_score=result.total_score,
            model_used=result.model_used,
            created_at=result.created_at,
            test_case=TestCaseOut.from_domain(result.test_case) if result.test_case else None,
        )


class BatchFailureOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    test_case_id: str = Field(..., alias="testCaseId")
    error: str

    @classmethod
    def from_domain(cls, failure: BatchFailure) -> "BatchFailureOut":
        return cls(test_case_id=failure.test_case_id, error=failure.error)


# =============================================================================
# ENVELOPES
# =============================================================================


class SingleEvaluationResponse(BaseModel):
    success: bool = True
    result: EvaluationResultOut


class BatchEvaluationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    results: list[EvaluationResultOut] = Field(default_factory=list)
    total_evaluated: int = Field(0, alias="totalEvaluated")
    failures: list[BatchFailureOut] = Field(default_factory=list)


class UploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    test_cases: list[TestCaseOut] = Field(default_factory=list, alias="testCases")


class TestCaseListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    test_cases: list[TestCaseOut] = Field(default_factory=list, alias="testCases")


class ResultListResponse(BaseModel):
    success: bool = True
    results: list[EvaluationResultOut] = Field(default_factory=list)


class StatsOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_test_cases: int = Field(0, alias="totalTestCases")
    total_evaluations: int = Field(0, alias="totalEvaluations")
    average_score: float = Field(0.0, alias="averageScore")

    @classmethod
    def from_domain(cls, stats: DashboardStats) -> "StatsOut":
        return cls(
            total_test_cases=stats.total_test_cases,
            total_evaluations=stats.total_evaluations,
            average_score=stats.average_score,
        )


class StatsResponse(BaseModel):
    success: bool = True
    stats: StatsOut


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str = "0.1.0"
    model: str = ""
    uptime_seconds: float = 0.0
