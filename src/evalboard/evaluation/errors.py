"""Evaluation pipeline errors. Every class carries a human-readable message."""


class EvaluationError(Exception):
    """Base class for failures of a single evaluation."""


class TestCaseNotFoundError(EvaluationError):
    """The referenced test case id does not exist."""

    __test__ = False

    def __init__(self, test_case_id: str):
        super().__init__(f"Test case with ID {test_case_id} not found")
        self.test_case_id = test_case_id


class GenerationError(EvaluationError):
    """The generative-text endpoint failed while producing an actual output."""


class JudgeResponseError(EvaluationError):
    """The judge call failed or its response was malformed, incomplete or out of range."""
