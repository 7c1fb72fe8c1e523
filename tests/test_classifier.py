"""Tests for intent classification and the parse boundary.

**Feature: journal-routing**
"""

import json

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from conftest import FakeProvider
from racfella.exceptions import ClassificationError, ProviderError
from racfella.journal.classifier import (
    DEFAULT_INTENT_CONFIDENCE,
    DEFAULT_NONE_CONFIDENCE,
    IntentClassifier,
    fallback_result,
    parse_classification,
    strip_code_fences,
)
from racfella.models import Intent


class TestStripCodeFences:
    def test_json_fence(self):
        assert strip_code_fences('```json\n{"intent": "SUMMARY"}\n```') == '{"intent": "SUMMARY"}'

    def test_plain_fence(self):
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_unfenced_text_is_unchanged(self):
        assert strip_code_fences('{"a": 1}') == '{"a": 1}'


class TestParseClassification:
    def test_full_payload(self):
        result = parse_classification(
            json.dumps(
                {
                    "intent": "GET_ENTRIES",
                    "confidence": 0.9,
                    "range": {"from": "2024-01-01", "to": "2024-01-31"},
                    "tags": ["fomo"],
                    "rationale": "listing",
                }
            )
        )
        assert result.intent is Intent.GET_ENTRIES
        assert result.confidence == 0.9
        assert result.range.from_ == "2024-01-01"
        assert result.range.to == "2024-01-31"
        assert result.tags == ["fomo"]
        assert result.crisis_flag is False

    def test_fenced_payload(self):
        result = parse_classification('```json\n{"intent": "SUMMARY", "confidence": 0.8}\n```')
        assert result.intent is Intent.SUMMARY

    def test_missing_confidence_for_intent(self):
        result = parse_classification('{"intent": "SET_GOAL"}')
        assert result.confidence == DEFAULT_INTENT_CONFIDENCE

    def test_missing_confidence_for_none(self):
        result = parse_classification('{"intent": "NONE"}')
        assert result.confidence == DEFAULT_NONE_CONFIDENCE

    def test_missing_intent_defaults_to_none(self):
        result = parse_classification("{}")
        assert result.intent is Intent.NONE
        assert result.confidence == DEFAULT_NONE_CONFIDENCE

    def test_non_numeric_confidence_is_defaulted(self):
        assert parse_classification('{"intent": "CHECKIN", "confidence": "high"}').confidence == 0.85
        assert parse_classification('{"intent": "CHECKIN", "confidence": true}').confidence == 0.85

    def test_nulls_are_treated_as_absent(self):
        result = parse_classification('{"intent": "ADD_ENTRY", "confidence": null, "tags": null}')
        assert result.confidence == DEFAULT_INTENT_CONFIDENCE
        assert result.tags is None

    def test_extra_keys_are_ignored(self):
        result = parse_classification('{"intent": "GET_GOALS", "confidence": 0.7, "mood": "ok"}')
        assert result.intent is Intent.GET_GOALS

    def test_invalid_json(self):
        with pytest.raises(ClassificationError) as exc_info:
            parse_classification("Sure! The intent is SUMMARY.")
        assert exc_info.value.reason == "json_parse_error"

    def test_non_object_json(self):
        with pytest.raises(ClassificationError) as exc_info:
            parse_classification('["SUMMARY"]')
        assert exc_info.value.reason == "parse_error"

    @pytest.mark.parametrize(
        "payload",
        [
            {"intent": "DELETE_ALL", "confidence": 0.9},
            {"intent": "SUMMARY", "confidence": 1.5},
            {"intent": "SUMMARY", "confidence": -0.1},
            {"intent": "SUMMARY", "confidence": 0.9, "tags": "fomo"},
            {"intent": "SUMMARY", "confidence": 0.9, "crisis_flag": "yes"},
            {"intent": "SUMMARY", "confidence": 0.9, "goal_text": 42},
        ],
    )
    def test_schema_violations(self, payload):
        with pytest.raises(ClassificationError) as exc_info:
            parse_classification(json.dumps(payload))
        assert exc_info.value.reason == "parse_error"


class TestFallbackResult:
    """
    *For any* classification failure the result is intent NONE with
    confidence 0, no crisis flag, and the failure kind as rationale.
    """

    @given(reason=st.sampled_from(["llm_error", "parse_error", "json_parse_error"]))
    @settings(max_examples=10)
    def test_fallback_shape(self, reason):
        result = fallback_result(reason)
        assert result.intent is Intent.NONE
        assert result.confidence == 0
        assert result.crisis_flag is False
        assert result.rationale == reason


class TestIntentClassifier:
    @pytest.mark.asyncio
    async def test_prompt_contains_message(self):
        provider = FakeProvider('{"intent": "SUMMARY", "confidence": 0.9}')
        classifier = IntentClassifier(provider)

        result = await classifier.classify("weekly review please")

        assert result.intent is Intent.SUMMARY
        assert provider.calls == 1
        assert 'Message: """weekly review please"""' in provider.prompts[0]
        assert provider.prompts[0].endswith("JSON:")

    @pytest.mark.asyncio
    async def test_provider_failure_becomes_llm_error(self):
        classifier = IntentClassifier(FakeProvider(error=ProviderError("timeout")))
        result = await classifier.classify("log my day")
        assert result.intent is Intent.NONE
        assert result.confidence == 0
        assert result.rationale == "llm_error"

    @pytest.mark.asyncio
    async def test_unexpected_provider_exception_becomes_llm_error(self):
        classifier = IntentClassifier(FakeProvider(error=RuntimeError("boom")))
        result = await classifier.classify("log my day")
        assert result.rationale == "llm_error"

    @pytest.mark.asyncio
    async def test_garbage_output_becomes_json_parse_error(self):
        classifier = IntentClassifier(FakeProvider("I think you want a summary"))
        result = await classifier.classify("summary")
        assert result.intent is Intent.NONE
        assert result.rationale == "json_parse_error"

    @pytest.mark.asyncio
    async def test_uses_stored_prompt(self, temp_store):
        from racfella.prompts import PromptService

        prompts = PromptService(temp_store)
        prompts.create_prompt("journal_intent", "CUSTOM CLASSIFIER INSTRUCTIONS")
        provider = FakeProvider('{"intent": "GET_GOALS", "confidence": 0.9}')

        await IntentClassifier(provider, prompts).classify("show goals")

        assert provider.prompts[0].startswith("CUSTOM CLASSIFIER INSTRUCTIONS")


class TestParseBoundaryProperties:
    """
    *For any* text that is not a JSON object, parsing fails with a
    ClassificationError and never yields a partially valid result.
    """

    @given(text=st.text(max_size=50).filter(lambda s: "{" not in s))
    @settings(max_examples=100)
    def test_non_object_text_is_rejected(self, text):
        with pytest.raises(ClassificationError) as exc_info:
            parse_classification(text)
        assert exc_info.value.reason in ("json_parse_error", "parse_error")

    @given(confidence=st.floats(min_value=0, max_value=1, allow_nan=False))
    @settings(max_examples=50)
    def test_valid_confidence_is_preserved(self, confidence):
        result = parse_classification(json.dumps({"intent": "CHECKIN", "confidence": confidence}))
        assert result.confidence == confidence
