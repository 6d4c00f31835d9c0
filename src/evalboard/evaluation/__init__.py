"""
Evaluation pipeline -- generate, judge, aggregate, persist.

  - models.py: TestCase, RubricScores, EvaluationResult, BatchReport
  - generator.py: OutputGenerator (bare prompt -> completion)
  - judge.py: RubricJudge and the judge response parser
  - scoring.py: total_score (mean, one decimal, half-up)
  - orchestrator.py: single and sequential batch evaluation
  - reporting.py: dashboard stats, search/sort, CSV export
"""

from .errors import (
    EvaluationError,
    GenerationError,
    JudgeResponseError,
    TestCaseNotFoundError,
)
from .generator import OutputGenerator
from .judge import RubricJudge, build_judge_prompt, parse_judge_response
from .models import (
    BatchFailure,
    BatchReport,
    DashboardStats,
    EvaluationResult,
    RubricScores,
    StoredResult,
    TestCase,
    TestCaseInput,
)
from .orchestrator import EvaluationOrchestrator, OrchestratorConfig
from .scoring import total_score
