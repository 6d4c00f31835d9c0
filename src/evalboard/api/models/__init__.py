"""Pydantic models for API request/response contracts."""
from .requests import EvaluateRequest, UploadRequest
from .responses import (
    BatchEvaluationResponse,
    BatchFailureOut,
    EvaluationResultOut,
    HealthResponse,
    ResultListResponse,
    ScoresOut,
    SingleEvaluationResponse,
    StatsOut,
    StatsResponse,
    TestCaseListResponse,
    TestCaseOut,
    UploadResponse,
)
