"""Editable prompt templates with a TTL cache.

Prompts are stored in the database so they can be tuned without a
release. Lookups go through PromptCache, which reloads the whole prompt
table when its TTL has elapsed and is invalidated on every write.
"""

import logging
import re
import threading
import time
from datetime import datetime
from typing import Callable, Optional

from racfella.db.store import JournalStore
from racfella.exceptions import StoreError
from racfella.models import AgentPrompt

logger = logging.getLogger(__name__)

JOURNAL_INTENT_PROMPT = "journal_intent"
JOURNAL_SUMMARY_PROMPT = "journal_summary"
CRISIS_SUPPORT_PROMPT = "crisis_support"
GENERAL_RESPONSE_PROMPT = "general_response"

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")

FALLBACK_PROMPTS: dict[str, str] = {
    JOURNAL_INTENT_PROMPT: """You classify trading journal requests.
Return STRICT JSON only, no prose, no markdown code fences.
If the message isn't journal-related, intent="NONE".
Check for suicidal ideation; if present set crisis_flag=true.
Always include a numeric "confidence" between 0 and 1.
Intents:
- ADD_ENTRY: "log", "note", "write in my journal"
- GET_ENTRIES: "show my journal", "entries from {dates}", "tag: mistakes"
- SET_GOAL: "set goal", "my goal is ..."
- GET_GOALS: "list goals"
- CHECKIN: "check in", "update progress"
- SUMMARY: "weekly review", "monthly summary"
Optional fields: date, range {"from", "to"} (YYYY-MM-DD), tags (array of strings),
goal_text, goal_due, goal_target, crisis_flag (boolean), rationale.
Example: {"intent": "GET_ENTRIES", "confidence": 0.9, "tags": ["fomo"]}""",
    JOURNAL_SUMMARY_PROMPT: """Analyze this trading journal data and provide a brief, encouraging summary:

Stats ({from_date} to {to_date})
- Journal entries: {entry_count}
- Total trades logged: {total_trades}
- Win rate: {win_rate}%
- Average R: {avg_r}
- Active goals: {active_goals}
- Completed goals: {completed_goals}

Top Mistakes:
{mistakes}

Top Lessons:
{lessons}

Provide a concise, motivational summary focusing on growth patterns and actionable insights.""",
    CRISIS_SUPPORT_PROMPT: (
        "I'm really sorry you're feeling this way. You don't have to go through this alone. "
        "Please reach out right now to someone you trust or a local crisis line. "
        "If you are in immediate danger, call your local emergency number. "
        "Your life matters far more than any trade or any loss."
    ),
    GENERAL_RESPONSE_PROMPT: (
        "I hear you. Remember that successful trading is as much about psychology "
        "as it is about strategy. Stay disciplined and trust your process."
    ),
}

DEFAULT_FALLBACK = (
    "I'm here to help you with trading psychology. "
    "How are you feeling about your current situation?"
)


def render_prompt(template: str, variables: Optional[dict[str, object]] = None) -> str:
    """Replace ``{name}`` placeholders with variable values.

    Braces that do not name a supplied variable are left untouched, so
    templates may contain literal JSON.
    """
    variables = variables or {}

    def substitute(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in variables:
            return match.group(0)
        value = variables[key]
        return "" if value is None else str(value)

    # One pass, so substituted values are never themselves expanded
    return _PLACEHOLDER_RE.sub(substitute, template)


class PromptCache:
    """Name -> prompt cache refreshed from the store after a TTL."""

    def __init__(
        self,
        store: JournalStore,
        ttl_seconds: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            store: Store holding the prompt table.
            ttl_seconds: Seconds before cached prompts are reloaded.
            clock: Monotonic clock, injectable for tests.
        """
        self.store = store
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._prompts: dict[str, AgentPrompt] = {}
        self._loaded_at: Optional[float] = None
        self._lock = threading.Lock()

    def is_stale(self) -> bool:
        """Whether the next read will reload from the store."""
        if self._loaded_at is None:
            return True
        return self._clock() - self._loaded_at > self.ttl_seconds

    def get_or_refresh(self, name: str) -> Optional[AgentPrompt]:
        """Get a prompt by name, reloading the cache first if it is stale.

        Args:
            name: Prompt name.

        Returns:
            The cached prompt, or None if no prompt has that name.
        """
        with self._lock:
            if self.is_stale():
                self._refresh()
            return self._prompts.get(name)

    def invalidate(self) -> None:
        """Force the next read to reload from the store."""
        with self._lock:
            self._prompts.clear()
            self._loaded_at = None

    def _refresh(self) -> None:
        try:
            prompts = self.store.get_prompts()
        except StoreError as e:
            # Keep serving whatever we had; retry on the next read
            logger.error("Failed to refresh prompt cache: %s", e)
            return
        self._prompts = {p.name: p for p in prompts}
        self._loaded_at = self._clock()
        logger.debug("Cached %d prompts", len(prompts))


class PromptService:
    """Prompt lookup with built-in fallbacks and write-through invalidation."""

    def __init__(self, store: JournalStore, ttl_seconds: float = 30.0, cache: Optional[PromptCache] = None):
        """Initialize the service.

        Args:
            store: Store holding the prompt table.
            ttl_seconds: Cache TTL in seconds.
            cache: Optional pre-built cache (for tests).
        """
        self.store = store
        self.cache = cache or PromptCache(store, ttl_seconds)

    def get_prompt(self, name: str, variables: Optional[dict[str, object]] = None) -> str:
        """Get a rendered prompt by name.

        Missing or inactive prompts fall back to the built-in text.

        Args:
            name: Prompt name.
            variables: Placeholder values.

        Returns:
            Rendered prompt text.
        """
        prompt = self.cache.get_or_refresh(name)
        if prompt is None:
            logger.debug("Prompt not found: %s, using fallback", name)
            return self.get_fallback_prompt(name, variables)
        if not prompt.is_active:
            logger.debug("Prompt inactive: %s, using fallback", name)
            return self.get_fallback_prompt(name, variables)
        return render_prompt(prompt.content, variables)

    @staticmethod
    def get_fallback_prompt(name: str, variables: Optional[dict[str, object]] = None) -> str:
        """Render the built-in prompt for a name."""
        return render_prompt(FALLBACK_PROMPTS.get(name, DEFAULT_FALLBACK), variables)

    def list_prompts(self) -> list[AgentPrompt]:
        """Get all stored prompts."""
        return self.store.get_prompts()

    def create_prompt(
        self,
        name: str,
        content: str,
        title: str = "",
        category: str = "general",
        is_active: bool = True,
    ) -> AgentPrompt:
        """Create a prompt and invalidate the cache."""
        created = self.store.save_prompt(
            AgentPrompt(
                name=name,
                title=title or name,
                category=category,
                content=content,
                is_active=is_active,
            )
        )
        self.cache.invalidate()
        return created

    def update_prompt(
        self,
        name: str,
        content: Optional[str] = None,
        title: Optional[str] = None,
        category: Optional[str] = None,
    ) -> AgentPrompt:
        """Update fields of an existing prompt and invalidate the cache.

        Raises:
            KeyError: If no prompt has that name.
        """
        existing = self.store.get_prompt(name)
        if existing is None:
            raise KeyError(f"Prompt not found: {name}")

        changes: dict[str, object] = {}
        if content is not None:
            changes["content"] = content
        if title is not None:
            changes["title"] = title
        if category is not None:
            changes["category"] = category
        changes["updated_at"] = datetime.now()
        updated = self.store.save_prompt(existing.model_copy(update=changes))
        self.cache.invalidate()
        return updated

    def toggle_prompt(self, name: str) -> AgentPrompt:
        """Flip a prompt's active flag and invalidate the cache.

        Raises:
            KeyError: If no prompt has that name.
        """
        existing = self.store.get_prompt(name)
        if existing is None:
            raise KeyError(f"Prompt not found: {name}")

        self.store.set_prompt_active(name, not existing.is_active)
        self.cache.invalidate()
        return existing.model_copy(update={"is_active": not existing.is_active})
