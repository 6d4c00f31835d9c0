"""Test fixtures -- fake text model, in-memory stores, temp SQLite database."""

import itertools
from pathlib import Path

import pytest

from evalboard.config import Settings
from evalboard.evaluation.models import (
    EvaluationResult,
    RubricScores,
    StoredResult,
    TestCase,
    TestCaseInput,
)

JUDGE_JSON = '{"accuracy": 9, "clarity": 8, "completeness": 7}'


class FakeTextModel:
    """
    Text model that answers from a queue instead of calling a provider.

    Each queued item is either a string (returned) or an exception (raised).
    Every prompt received is recorded in .prompts.
    """

    def __init__(self, responses=None, model="fake-judge-1"):
        self._responses = list(responses or [])
        self._model = model
        self.prompts: list[str] = []

    @property
    def model(self) -> str:
        return self._model

    def queue(self, *responses) -> None:
        self._responses.extend(responses)

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self._responses:
            raise RuntimeError("no fake response queued")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class InMemoryTestCaseStore:
    """Dict-backed test case store with deterministic ids and timestamps."""

    def __init__(self):
        self._rows: dict[str, TestCase] = {}
        self._ids = itertools.count(1)

    def add(self, prompt: str, expected_output: str) -> TestCase:
        n = next(self._ids)
        test_case = TestCase(
            id=f"tc-{n}",
            prompt=prompt,
            expected_output=expected_output,
            created_at=f"2026-01-01T00:00:{n:02d}+00:00",
        )
        self._rows[test_case.id] = test_case
        return test_case

    def get_by_id(self, test_case_id):
        return self._rows.get(test_case_id)

    def insert_many(self, rows: list[TestCaseInput]) -> list[TestCase]:
        return [self.add(r.prompt, r.expected_output) for r in rows]

    def get_all(self):
        return sorted(self._rows.values(), key=lambda t: t.created_at, reverse=True)

    def count(self):
        return len(self._rows)


class InMemoryResultStore:
    """List-backed result store; can be told to fail on insert."""

    def __init__(self, test_cases: InMemoryTestCaseStore | None = None):
        self._test_cases = test_cases
        self.rows: list[EvaluationResult] = []
        self.fail_with: Exception | None = None
        self._ids = itertools.count(1)

    def insert(self, **fields) -> StoredResult:
        if self.fail_with is not None:
            raise self.fail_with
        n = next(self._ids)
        stored = StoredResult(id=f"res-{n}", created_at=f"2026-01-02T00:00:{n:02d}+00:00")
        test_case = self._test_cases.get_by_id(fields["test_case_id"]) if self._test_cases else None
        self.rows.append(
            EvaluationResult(
                id=stored.id,
                test_case_id=fields["test_case_id"],
                actual_output=fields["actual_output"],
                scores=RubricScores(
                    accuracy=fields["accuracy_score"],
                    clarity=fields["clarity_score"],
                    completeness=fields["completeness_score"],
                ),
                total_score=fields["total_score"],
                model_used=fields["model_used"],
                created_at=stored.created_at,
                test_case=test_case,
            )
        )
        return stored

    def get_all(self):
        return sorted(self.rows, key=lambda r: r.created_at, reverse=True)

    def count(self):
        return len(self.rows)

    def average_total_score(self):
        if not self.rows:
            return 0.0
        return sum(r.total_score for r in self.rows) / len(self.rows)


class RecordingSleep:
    """Replacement for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def fake_model():
    return FakeTextModel()


@pytest.fixture
def case_store():
    return InMemoryTestCaseStore()


@pytest.fixture
def result_store(case_store):
    return InMemoryResultStore(case_store)


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def db_path(tmp_path) -> Path:
    return tmp_path / "evalboard.db"


@pytest.fixture
def settings(db_path) -> Settings:
    return Settings(provider="google", model="fake-judge-1", db_path=db_path, batch_delay_seconds=1.0)
