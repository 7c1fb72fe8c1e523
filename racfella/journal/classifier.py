"""LLM-backed journal intent classification.

The completion provider is asked for raw JSON. Whatever comes back goes
through ``parse_classification``, which either returns a fully valid
IntentResult or raises ClassificationError. Nothing partially valid gets
past that point.
"""

import asyncio
import json
import logging
import re
from typing import Any, Optional

from pydantic import ValidationError

from racfella.agents.base import CompletionProvider
from racfella.exceptions import ClassificationError
from racfella.models import Intent, IntentResult
from racfella.prompts import FALLBACK_PROMPTS, JOURNAL_INTENT_PROMPT, PromptService

logger = logging.getLogger(__name__)

# Defaults when the model omits confidence
DEFAULT_NONE_CONFIDENCE = 0.2
DEFAULT_INTENT_CONFIDENCE = 0.85

LLM_ERROR = "llm_error"
PARSE_ERROR = "parse_error"
JSON_PARSE_ERROR = "json_parse_error"

CLASSIFIER_INSTRUCTIONS = FALLBACK_PROMPTS[JOURNAL_INTENT_PROMPT]

_FENCE_RE = re.compile(r"^\s*```(?:json)?\s*|\s*```\s*$", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences a model may wrap around JSON."""
    return _FENCE_RE.sub("", text)


def fallback_result(reason: str) -> IntentResult:
    """The result returned whenever classification fails."""
    return IntentResult(intent=Intent.NONE, confidence=0, crisis_flag=False, rationale=reason)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_classification(raw: str) -> IntentResult:
    """Parse provider output into a validated IntentResult.

    Missing ``intent`` defaults to NONE. Missing or non-numeric
    ``confidence`` defaults to 0.2 for NONE and 0.85 otherwise. JSON nulls
    are treated as absent fields.

    Args:
        raw: Text returned by the completion provider.

    Returns:
        Validated IntentResult.

    Raises:
        ClassificationError: With reason "json_parse_error" if the text is
            not JSON, or "parse_error" if it does not match the schema.
    """
    clean = strip_code_fences(raw)
    try:
        payload = json.loads(clean)
    except ValueError as e:
        raise ClassificationError(JSON_PARSE_ERROR, str(e)) from e

    if not isinstance(payload, dict):
        raise ClassificationError(PARSE_ERROR, f"expected object, got {type(payload).__name__}")

    data = {key: value for key, value in payload.items() if value is not None}
    data.setdefault("intent", Intent.NONE.value)
    if not _is_number(data.get("confidence")):
        data["confidence"] = (
            DEFAULT_NONE_CONFIDENCE
            if data["intent"] == Intent.NONE.value
            else DEFAULT_INTENT_CONFIDENCE
        )

    try:
        return IntentResult.model_validate(data)
    except ValidationError as e:
        raise ClassificationError(PARSE_ERROR, str(e)) from e


class IntentClassifier:
    """Classifies journal messages with a completion provider.

    ``classify`` never raises; every failure becomes an intent=NONE,
    confidence=0 result whose rationale names the failure kind.
    """

    def __init__(self, provider: CompletionProvider, prompts: Optional[PromptService] = None):
        """Initialize the classifier.

        Args:
            provider: Completion provider used for classification.
            prompts: Optional prompt service for editable instructions.
        """
        self.provider = provider
        self.prompts = prompts

    async def _instructions(self) -> str:
        if self.prompts is None:
            return CLASSIFIER_INSTRUCTIONS
        return await asyncio.to_thread(self.prompts.get_prompt, JOURNAL_INTENT_PROMPT)

    async def build_prompt(self, text: str) -> str:
        """Build the full classification prompt for a message."""
        instructions = await self._instructions()
        return f'{instructions}\nMessage: """{text}"""\nReturn JSON only.\nJSON:'

    async def classify(self, text: str) -> IntentResult:
        """Classify a message.

        Args:
            text: Raw message text.

        Returns:
            IntentResult; the fallback result on any failure.
        """
        prompt = await self.build_prompt(text)
        try:
            raw = await self.provider.complete(prompt)
        except Exception as e:
            logger.warning("Intent classification call failed: %s", e)
            return fallback_result(LLM_ERROR)

        if not isinstance(raw, str):
            logger.warning("Intent classification returned %s, expected text", type(raw).__name__)
            return fallback_result(LLM_ERROR)

        try:
            result = parse_classification(raw)
        except ClassificationError as e:
            logger.warning("Rejected classifier output (%s): %.200s", e.reason, raw)
            return fallback_result(e.reason)

        logger.debug("Classified as %s (%.2f)", result.intent.value, result.confidence)
        return result
