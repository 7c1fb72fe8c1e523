"""Completion providers for Racfella.

- CompletionProvider: protocol the journal core depends on
- AgentCompletionProvider: OpenAI Agents SDK implementation
"""

from racfella.agents.base import (
    AgentCompletionProvider,
    CompletionProvider,
    create_advisor_provider,
    create_agent,
    create_utility_provider,
    get_api_key,
    get_model,
    run_agent_async,
)

__all__ = [
    "AgentCompletionProvider",
    "CompletionProvider",
    "create_advisor_provider",
    "create_agent",
    "create_utility_provider",
    "get_api_key",
    "get_model",
    "run_agent_async",
]
