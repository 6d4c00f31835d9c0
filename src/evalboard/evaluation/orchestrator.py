"""
EvaluationOrchestrator -- single and batch evaluation of test cases.

Single evaluation, terminal states Success / Failure, nothing persisted
before the last step:

  1. Fetch      -- look up the test case (not found is fatal)
  2. Output     -- caller's actual output verbatim, else OutputGenerator
  3. Judge      -- RubricJudge scores (prompt, expected, actual)
  4. Aggregate  -- total_score()
  5. Persist    -- result store assigns id and created_at
  6. Return     -- full EvaluationResult

Any failure in 1-5 is re-raised as EvaluationError("Failed to run evaluation: ...")
chained to the original error.

Batch evaluation repeats the single flow strictly sequentially with a fixed
pause between consecutive items (the endpoints are rate limited per minute).
A failing item is logged and skipped; the batch itself never fails because of
one item.

Blocking store calls run in a worker thread so every collaborator call is an
await point; nothing else runs concurrently.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from ..security import ValidationError
from .errors import EvaluationError, TestCaseNotFoundError
from .generator import OutputGenerator
from .judge import RubricJudge
from .models import BatchFailure, BatchReport, EvaluationResult
from .protocols import ResultStore, TestCaseStore
from .scoring import total_score

logger = logging.getLogger(__name__)

DEFAULT_BATCH_DELAY_SECONDS = 1.0

ProgressCallback = Callable[[int, int], None]
SleepFunc = Callable[[float], Awaitable[None]]


@dataclass
class OrchestratorConfig:
    """Configuration for the evaluation orchestrator."""

    batch_delay_seconds: float = DEFAULT_BATCH_DELAY_SECONDS


class EvaluationOrchestrator:
    """
    Ties generation, judging, aggregation and persistence together.

    Usage:
        orchestrator = EvaluationOrchestrator(
            test_cases=SQLiteTestCaseStore(db_path),
            results=SQLiteResultStore(db_path),
            generator=OutputGenerator(llm),
            judge=RubricJudge(llm),
        )
        result = await orchestrator.evaluate(test_case_id)
        results = await orchestrator.evaluate_batch([id_1, id_2, id_3])

    The recorded model_used is the judge's model id.
    """

    def __init__(
        self,
        test_cases: TestCaseStore,
        results: ResultStore,
        generator: OutputGenerator,
        judge: RubricJudge,
        config: OrchestratorConfig | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self._test_cases = test_cases
        self._results = results
        self._generator = generator
        self._judge = judge
        self._config = config or OrchestratorConfig()
        self._sleep = sleep

    @property
    def model_name(self) -> str:
        return self._judge.model_name

    async def evaluate(
        self, test_case_id: str, actual_output: str | None = None
    ) -> EvaluationResult:
        """
        Evaluate one test case.

        Args:
            test_case_id: Id of a stored test case.
            actual_output: Output to judge. When None or empty the generator
                produces one from the test case prompt.

        Raises:
            EvaluationError: wrapping the first failure; no partial result.
        """
        try:
            return await self._run(test_case_id, actual_output)
        except Exception as e:
            logger.error(f"[Orchestrator] Evaluation of {test_case_id} failed: {e}")
            raise EvaluationError(f"Failed to run evaluation: {e}") from e

    async def _run(self, test_case_id: str, actual_output: str | None) -> EvaluationResult:
        test_case = await asyncio.to_thread(self._test_cases.get_by_id, test_case_id)
        if test_case is None:
            raise TestCaseNotFoundError(test_case_id)

        output = actual_output
        if not output:
            output = await self._generator.generate(test_case.prompt)

        logger.info(f"[Orchestrator] Judging output for test case {test_case_id}")
        scores = await self._judge.evaluate(
            test_case.prompt, test_case.expected_output, output
        )
        total = total_score(scores)
        model_used = self._judge.model_name

        stored = await asyncio.to_thread(
            self._results.insert,
            test_case_id=test_case_id,
            actual_output=output,
            accuracy_score=scores.accuracy,
            clarity_score=scores.clarity,
            completeness_score=scores.completeness,
            total_score=total,
            model_used=model_used,
        )

        logger.info(
            f"[Orchestrator] Test case {test_case_id} scored {total:.1f}/10 "
            f"(result {stored.id})"
        )
        return EvaluationResult(
            id=stored.id,
            test_case_id=test_case_id,
            actual_output=output,
            scores=scores,
            total_score=total,
            model_used=model_used,
            created_at=stored.created_at,
        )

    async def evaluate_batch(
        self,
        test_case_ids: list[str],
        on_progress: ProgressCallback | None = None,
    ) -> list[EvaluationResult]:
        """Evaluate many test cases in order; returns only the successful results."""
        report = await self.evaluate_batch_report(test_case_ids, on_progress)
        return report.results

    async def evaluate_batch_report(
        self,
        test_case_ids: list[str],
        on_progress: ProgressCallback | None = None,
    ) -> BatchReport:
        """
        Evaluate many test cases sequentially, isolating per-item failures.

        Args:
            test_case_ids: Ids in evaluation order. Must not be empty.
            on_progress: Called as on_progress(position, total) after each
                successful item, position being 1-based.

        Returns:
            BatchReport with successes and failures, each in input order.

        Raises:
            ValidationError: if test_case_ids is empty (before any work).
        """
        if not test_case_ids:
            raise ValidationError("testCaseIds array cannot be empty")

        total = len(test_case_ids)
        report = BatchReport(total=total)
        logger.info(f"[Orchestrator] Starting batch of {total} test case(s)")

        for position, test_case_id in enumerate(test_case_ids, start=1):
            if position > 1:
                await self._sleep(self._config.batch_delay_seconds)

            try:
                result = await self.evaluate(test_case_id)
            except EvaluationError as e:
                logger.warning(f"[Orchestrator] Skipping test case {test_case_id}: {e}")
                report.failures.append(BatchFailure(test_case_id=test_case_id, error=str(e)))
                continue

            report.results.append(result)
            if on_progress is not None:
                on_progress(position, total)

        logger.info(
            f"[Orchestrator] Batch complete: {report.succeeded}/{total} evaluated, "
            f"{len(report.failures)} failed"
        )
        return report
