"""
Rubric Judge -- LLM-as-judge scoring of an actual output against an expected one.

The judge model receives one fixed prompt holding the original prompt, the
expected output, the actual output and a three-criterion rubric, and must
answer with a bare JSON object:

    {"accuracy": 9, "clarity": 10, "completeness": 8}

parse_judge_response() is the only place that reads that answer. Its grammar:

    response := ws? fence_open? json_object fence_close? ws?
    fence_open := "```json" newline? | "```" newline?
    fence_close := newline? "```"

After fence stripping the body must decode as strict JSON and validate:
an object, all three fields present, each an integral number in [0, 10].
Anything else raises JudgeResponseError. Scores are never defaulted or clamped.
"""

import json
import logging
from typing import Any

from .errors import JudgeResponseError
from .models import RUBRIC_FIELDS, SCORE_MAX, SCORE_MIN, RubricScores
from .protocols import TextModel

logger = logging.getLogger(__name__)

JUDGE_PROMPT_TEMPLATE = """You are an expert evaluator. Given a prompt, expected output, and actual output, score the actual output on three criteria:

1. **Accuracy (0-10)**: How factually correct is the actual output compared to the expected output? Does it contain the same key information and facts?
   - 0-3: Mostly incorrect or contradicts expected output
   - 4-6: Partially correct, some key points are accurate
   - 7-8: Mostly correct with minor inaccuracies
   - 9-10: Fully accurate, matches expected output

2. **Clarity (0-10)**: How clear, understandable, and well-structured is the actual output?
   - 0-3: Confusing, poorly structured, hard to understand
   - 4-6: Somewhat clear but could be better organized
   - 7-8: Clear and well-structured
   - 9-10: Exceptionally clear, concise, and well-organized

3. **Completeness (0-10)**: Does the actual output cover all the important points from the expected output?
   - 0-3: Missing most key points
   - 4-6: Covers some key points but misses important ones
   - 7-8: Covers most key points
   - 9-10: Comprehensive, covers all key points

**Prompt:**
{prompt}

**Expected Output:**
{expected_output}

**Actual Output:**
{actual_output}

Respond ONLY with valid JSON in this exact format (no other text, no markdown, no explanation):
{{"accuracy": X, "clarity": Y, "completeness": Z}}

Where X, Y, and Z are integers from 0 to 10."""

FENCE = "```"
JSON_FENCE = "```json"


def build_judge_prompt(prompt: str, expected_output: str, actual_output: str) -> str:
    """Embed the three texts verbatim into the judge template."""
    return JUDGE_PROMPT_TEMPLATE.format(
        prompt=prompt,
        expected_output=expected_output,
        actual_output=actual_output,
    )


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```json or ``` fence if the model added one."""
    body = text.strip()
    if body.startswith(JSON_FENCE):
        body = body[len(JSON_FENCE):]
    elif body.startswith(FENCE):
        body = body[len(FENCE):]
    else:
        return body

    if body.startswith("\n"):
        body = body[1:]
    if body.endswith(FENCE):
        body = body[: -len(FENCE)]
        if body.endswith("\n"):
            body = body[:-1]
    return body.strip()


def _validate_score(data: dict[str, Any], name: str) -> int:
    if name not in data:
        raise JudgeResponseError(f"Judge response is missing the '{name}' score")

    value = data[name]
    # bool is a subclass of int but is not a score
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise JudgeResponseError(
            f"Judge response '{name}' must be a number (got {type(value).__name__})"
        )
    if isinstance(value, float) and not value.is_integer():
        raise JudgeResponseError(f"Judge response '{name}' must be an integer (got {value})")
    if not SCORE_MIN <= value <= SCORE_MAX:
        raise JudgeResponseError(
            f"Judge response '{name}' must be between {SCORE_MIN} and {SCORE_MAX} (got {value})"
        )
    return int(value)


def parse_judge_response(text: str) -> RubricScores:
    """
    Parse the judge model's answer into RubricScores.

    Raises:
        JudgeResponseError: malformed JSON, non-object payload, missing field,
            non-numeric field, fractional field, or field outside [0, 10].
    """
    body = strip_code_fence(text or "")

    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise JudgeResponseError(f"Judge response is not valid JSON: {e.msg}") from e

    if not isinstance(data, dict):
        raise JudgeResponseError(
            f"Judge response must be a JSON object (got {type(data).__name__})"
        )

    scores = {name: _validate_score(data, name) for name in RUBRIC_FIELDS}
    return RubricScores(**scores)


class RubricJudge:
    """
    Scores (prompt, expected, actual) triples with one judge-model call each.

    Usage:
        judge = RubricJudge(llm_client)
        scores = await judge.evaluate(prompt, expected_output, actual_output)
    """

    def __init__(self, model: TextModel):
        self._model = model

    @property
    def model_name(self) -> str:
        return self._model.model

    async def evaluate(
        self, prompt: str, expected_output: str, actual_output: str
    ) -> RubricScores:
        """Make exactly one judge call and parse its answer. No retries, no cache."""
        judge_prompt = build_judge_prompt(prompt, expected_output, actual_output)

        try:
            text = await self._model.complete(judge_prompt)
        except Exception as e:
            raise JudgeResponseError(f"Failed to evaluate with LLM: {e}") from e

        try:
            scores = parse_judge_response(text)
        except JudgeResponseError as e:
            logger.warning(f"[Judge] Rejected judge response ({len(text or '')} chars): {e}")
            raise JudgeResponseError(f"Failed to evaluate with LLM: {e}") from e

        logger.debug(
            f"[Judge] Scores accuracy={scores.accuracy} clarity={scores.clarity} "
            f"completeness={scores.completeness}"
        )
        return scores
