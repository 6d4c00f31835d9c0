"""
Evaluation data models -- test cases, rubric scores, evaluation results.

All models are frozen dataclasses: a test case is never mutated after upload
and an evaluation result is never mutated after it is persisted.
"""

from dataclasses import asdict, dataclass, field
from typing import Any

SCORE_MIN = 0
SCORE_MAX = 10
RUBRIC_FIELDS = ("accuracy", "clarity", "completeness")


# =============================================================================
# TEST CASE
# =============================================================================


@dataclass(frozen=True)
class TestCase:
    """A prompt / expected-output pair awaiting or having received scored output."""

    __test__ = False  # not a pytest test class

    id: str
    prompt: str
    expected_output: str
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TestCaseInput:
    """A validated upload row; the store assigns id and created_at."""

    __test__ = False

    prompt: str
    expected_output: str


# =============================================================================
# SCORES
# =============================================================================


@dataclass(frozen=True)
class RubricScores:
    """
    Three independent judge scores, each an integer in [0, 10].

    accuracy: factual correctness compared to the expected output.
    clarity: structure and readability.
    completeness: coverage of the expected key points.
    """

    accuracy: int
    clarity: int
    completeness: int

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


# =============================================================================
# EVALUATION RESULT
# =============================================================================


@dataclass(frozen=True)
class StoredResult:
    """Identity assigned by the result store on insert."""

    id: str
    created_at: str


@dataclass(frozen=True)
class EvaluationResult:
    """
    One judged evaluation of a test case.

    total_score is the mean of the three rubric scores rounded to one decimal.
    test_case is only populated on listings joined with the owning test case.
    """

    id: str
    test_case_id: str
    actual_output: str
    scores: RubricScores
    total_score: float
    model_used: str
    created_at: str
    test_case: TestCase | None = None

    def to_dict(self) -> dict[str, Any]:
        data = {
            "id": self.id,
            "test_case_id": self.test_case_id,
            "actual_output": self.actual_output,
            "scores": self.scores.to_dict(),
            "total_score": self.total_score,
            "model_used": self.model_used,
            "created_at": self.created_at,
        }
        if self.test_case is not None:
            data["test_case"] = self.test_case.to_dict()
        return data


# =============================================================================
# BATCH / DASHBOARD
# =============================================================================


@dataclass(frozen=True)
class BatchFailure:
    """A batch item that could not be evaluated."""

    test_case_id: str
    error: str


@dataclass
class BatchReport:
    """Outcome of a batch run: successes and failures, both in input order."""

    total: int
    results: list[EvaluationResult] = field(default_factory=list)
    failures: list[BatchFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return len(self.results)


@dataclass(frozen=True)
class DashboardStats:
    """Headline numbers for the dashboard."""

    total_test_cases: int = 0
    total_evaluations: int = 0
    average_score: float = 0.0
