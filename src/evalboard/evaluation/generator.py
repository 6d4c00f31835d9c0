"""Output Generator -- produce an actual output for a test case prompt."""

import logging

from .errors import GenerationError
from .protocols import TextModel

logger = logging.getLogger(__name__)


class OutputGenerator:
    """
    Sends the bare prompt to the generative-text endpoint.

    The completion is returned verbatim: no sanitization, no truncation and no
    length check on the prompt. Endpoint rejections surface as GenerationError.
    """

    def __init__(self, model: TextModel):
        self._model = model

    async def generate(self, prompt: str) -> str:
        logger.info(f"[Generator] Generating output for prompt ({len(prompt)} chars)")
        try:
            return await self._model.complete(prompt)
        except Exception as e:
            raise GenerationError(f"Failed to generate output: {e}") from e
