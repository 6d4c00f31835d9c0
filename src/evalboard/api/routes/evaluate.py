"""
Evaluation API -- run single or batch evaluations.

  POST /api/evaluate  {"testCaseId": "...", "actualOutput": "..."}  -- single
  POST /api/evaluate  {"testCaseIds": ["...", "..."]}               -- batch

Batch requests run sequentially with a pause between items; clients should
allow for a long response time (up to 10 minutes).

Errors:
  400 -- neither id field given, or an empty testCaseIds list
  404 -- single evaluation of an unknown test case
  500 -- any other single evaluation failure (message preserved)
"""

import logging

from fastapi import APIRouter, HTTPException, Request

from ...evaluation import EvaluationError, TestCaseNotFoundError
from ...security import ValidationError, validate_list_size
from ...services import Services
from ..models.requests import EvaluateRequest
from ..models.responses import (
    BatchEvaluationResponse,
    BatchFailureOut,
    EvaluationResultOut,
    SingleEvaluationResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()

MAX_BATCH_SIZE = 1000


def _get_services(request: Request) -> Services:
    return request.app.state.services


@router.post("/evaluate")
async def run_evaluation(body: EvaluateRequest, request: Request) -> dict:
    """
    Evaluate one test case, or a list of test cases sequentially.

    Returns a SingleEvaluationResponse or a BatchEvaluationResponse payload.
    """
    orchestrator = _get_services(request).orchestrator

    if body.test_case_id:
        try:
            result = await orchestrator.evaluate(body.test_case_id, body.actual_output)
        except EvaluationError as e:
            status = 404 if isinstance(e.__cause__, TestCaseNotFoundError) else 500
            raise HTTPException(status_code=status, detail=str(e))
        response = SingleEvaluationResponse(result=EvaluationResultOut.from_domain(result))
        return response.model_dump(by_alias=True)

    if body.test_case_ids is not None:
        try:
            validate_list_size(
                body.test_case_ids,
                "testCaseIds array",
                min_items=1,
                max_items=MAX_BATCH_SIZE,
            )
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))

        report = await orchestrator.evaluate_batch_report(body.test_case_ids)
        response = BatchEvaluationResponse(
            results=[EvaluationResultOut.from_domain(r) for r in report.results],
            total_evaluated=report.succeeded,
            failures=[BatchFailureOut.from_domain(f) for f in report.failures],
        )
        return response.model_dump(by_alias=True)

    raise HTTPException(
        status_code=400,
        detail="Invalid request: either testCaseId or testCaseIds is required",
    )
