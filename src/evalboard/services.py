"""
Service wiring -- builds the LLM client, stores and orchestrator from Settings.

Everything is constructed here and passed down explicitly; there are no
process-wide clients. Tests pass their own fakes for any collaborator.
"""

import asyncio
import logging
from dataclasses import dataclass

from .config import Settings
from .evaluation import (
    EvaluationOrchestrator,
    OrchestratorConfig,
    OutputGenerator,
    RubricJudge,
)
from .evaluation.orchestrator import SleepFunc
from .evaluation.protocols import ResultStore, TestCaseStore, TextModel
from .llm import create_client
from .storage import SQLiteResultStore, SQLiteTestCaseStore

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """The collaborators one app or CLI invocation works with."""

    settings: Settings
    test_cases: TestCaseStore
    results: ResultStore
    llm: TextModel
    orchestrator: EvaluationOrchestrator


def build_services(
    settings: Settings,
    llm: TextModel | None = None,
    test_cases: TestCaseStore | None = None,
    results: ResultStore | None = None,
    sleep: SleepFunc = asyncio.sleep,
) -> Services:
    """Construct every collaborator not supplied by the caller."""
    if llm is None:
        llm = create_client(
            provider=settings.provider,
            model=settings.model,
            timeout=settings.llm_timeout,
        )
    if test_cases is None:
        test_cases = SQLiteTestCaseStore(settings.db_path)
    if results is None:
        results = SQLiteResultStore(settings.db_path)

    orchestrator = EvaluationOrchestrator(
        test_cases=test_cases,
        results=results,
        generator=OutputGenerator(llm),
        judge=RubricJudge(llm),
        config=OrchestratorConfig(batch_delay_seconds=settings.batch_delay_seconds),
        sleep=sleep,
    )
    logger.info(
        f"[Services] Ready (model={llm.model}, db={settings.db_path}, "
        f"batch_delay={settings.batch_delay_seconds}s)"
    )
    return Services(
        settings=settings,
        test_cases=test_cases,
        results=results,
        llm=llm,
        orchestrator=orchestrator,
    )
