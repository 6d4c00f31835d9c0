"""
Collaborator protocols for the evaluation pipeline.

Structural types only: LLMClient satisfies TextModel, the SQLite stores
satisfy TestCaseStore and ResultStore, and tests pass fakes for any of them.
"""

from typing import Protocol, runtime_checkable

from .models import EvaluationResult, StoredResult, TestCase, TestCaseInput


@runtime_checkable
class TextModel(Protocol):
    """A generative-text endpoint bound to one model id."""

    @property
    def model(self) -> str: ...

    async def complete(self, prompt: str) -> str: ...


@runtime_checkable
class TestCaseStore(Protocol):
    """Persistence for uploaded test cases."""

    def get_by_id(self, test_case_id: str) -> TestCase | None: ...

    def insert_many(self, rows: list[TestCaseInput]) -> list[TestCase]: ...

    def get_all(self) -> list[TestCase]: ...

    def count(self) -> int: ...


@runtime_checkable
class ResultStore(Protocol):
    """Persistence for evaluation results."""

    def insert(
        self,
        test_case_id: str,
        actual_output: str,
        accuracy_score: int,
        clarity_score: int,
        completeness_score: int,
        total_score: float,
        model_used: str,
    ) -> StoredResult: ...

    def get_all(self) -> list[EvaluationResult]: ...

    def count(self) -> int: ...

    def average_total_score(self) -> float: ...
