"""
Results API -- browse, export and summarize evaluation results.

  GET /api/results         -- results joined with their test case (search, sort)
  GET /api/results/export  -- same listing as a CSV attachment
  GET /api/stats           -- totals and average score

Query parameters for listing and export:
  search -- case-insensitive match on the prompt or the actual output
  sort   -- "date" (newest first, default) or "score" (highest first)
"""

import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response

from ...evaluation.models import EvaluationResult
from ...evaluation.reporting import (
    SORT_BY_DATE,
    SORT_CHOICES,
    dashboard_stats,
    export_filename,
    export_results_csv,
    filter_results,
)
from ...services import Services
from ..models.responses import (
    EvaluationResultOut,
    ResultListResponse,
    StatsOut,
    StatsResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _get_services(request: Request) -> Services:
    return request.app.state.services


def _query_results(request: Request, search: str | None, sort: str) -> list[EvaluationResult]:
    if sort not in SORT_CHOICES:
        raise HTTPException(
            status_code=400, detail=f"sort must be one of: {', '.join(SORT_CHOICES)}"
        )
    results = _get_services(request).results.get_all()
    return filter_results(results, search=search, sort_by=sort)


@router.get("/results", response_model=ResultListResponse)
async def list_results(
    request: Request,
    search: str | None = None,
    sort: str = SORT_BY_DATE,
) -> ResultListResponse:
    """Evaluation results with their test case."""
    results = _query_results(request, search, sort)
    return ResultListResponse(results=[EvaluationResultOut.from_domain(r) for r in results])


@router.get("/results/export")
async def export_results(
    request: Request,
    search: str | None = None,
    sort: str = SORT_BY_DATE,
) -> Response:
    """Download the (filtered) results as CSV."""
    results = _query_results(request, search, sort)
    return Response(
        content=export_results_csv(results),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


@router.get("/stats", response_model=StatsResponse)
async def stats(request: Request) -> StatsResponse:
    """Dashboard headline numbers."""
    services = _get_services(request)
    summary = dashboard_stats(services.test_cases, services.results)
    return StatsResponse(stats=StatsOut.from_domain(summary))
