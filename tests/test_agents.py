"""Tests for the agents-backed completion provider."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from racfella.agents.base import (
    ADVISOR_INSTRUCTIONS,
    DEFAULT_MODEL,
    AgentCompletionProvider,
    create_advisor_provider,
    create_utility_provider,
    get_model,
)
from racfella.exceptions import ProviderError


class TestGetModel:
    def test_default(self, monkeypatch):
        monkeypatch.delenv("OPENAI_MODEL", raising=False)
        assert get_model() == DEFAULT_MODEL

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("OPENAI_MODEL", "gpt-4o")
        assert get_model() == "gpt-4o"


class TestFactories:
    def test_model_override(self):
        provider = create_utility_provider(model="gpt-4o", timeout=5)
        assert provider._agent.model == "gpt-4o"
        assert provider.timeout == 5

    def test_advisor_instructions(self):
        provider = create_advisor_provider()
        assert provider._agent.instructions == ADVISOR_INSTRUCTIONS


class TestAgentCompletionProvider:
    @pytest.mark.asyncio
    async def test_output_is_stripped(self):
        provider = AgentCompletionProvider()
        with patch("racfella.agents.base.run_agent_async", AsyncMock(return_value='  {"intent": "NONE"}\n')):
            assert await provider.complete("hi") == '{"intent": "NONE"}'

    @pytest.mark.asyncio
    async def test_sdk_failure_becomes_provider_error(self):
        provider = AgentCompletionProvider()
        with patch("racfella.agents.base.run_agent_async", AsyncMock(side_effect=RuntimeError("503"))):
            with pytest.raises(ProviderError, match="503"):
                await provider.complete("hi")

    @pytest.mark.asyncio
    async def test_non_text_output(self):
        provider = AgentCompletionProvider()
        with patch("racfella.agents.base.run_agent_async", AsyncMock(return_value={"intent": "NONE"})):
            with pytest.raises(ProviderError, match="dict"):
                await provider.complete("hi")

    @pytest.mark.asyncio
    async def test_timeout(self):
        async def slow(agent, message):
            await asyncio.sleep(5)
            return "late"

        provider = AgentCompletionProvider(timeout=0.01)
        with patch("racfella.agents.base.run_agent_async", slow):
            with pytest.raises(ProviderError, match="timed out"):
                await provider.complete("hi")
