"""Tests for the prompt cache and prompt service."""

import pytest

from racfella.exceptions import StoreError
from racfella.prompts import (
    DEFAULT_FALLBACK,
    FALLBACK_PROMPTS,
    JOURNAL_SUMMARY_PROMPT,
    PromptCache,
    PromptService,
    render_prompt,
)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class CountingStore:
    """Wraps a store and counts prompt table reads."""

    def __init__(self, store, fail: bool = False):
        self.store = store
        self.fail = fail
        self.reads = 0

    def get_prompts(self):
        self.reads += 1
        if self.fail:
            raise StoreError("database is locked")
        return self.store.get_prompts()

    def __getattr__(self, name):
        return getattr(self.store, name)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def counting(temp_store):
    return CountingStore(temp_store)


@pytest.fixture
def service(counting, clock):
    return PromptService(counting, cache=PromptCache(counting, ttl_seconds=30, clock=clock))


class TestRenderPrompt:
    def test_replaces_known_placeholders(self):
        assert render_prompt("Win rate {win_rate}%", {"win_rate": "55.0"}) == "Win rate 55.0%"

    def test_leaves_unknown_braces(self):
        assert render_prompt('{"intent": "{x}"} {y}', {"x": "SUMMARY"}) == '{"intent": "SUMMARY"} {y}'

    def test_none_renders_empty(self):
        assert render_prompt("[{a}]", {"a": None}) == "[]"

    def test_values_are_not_expanded_again(self):
        text = render_prompt(
            "Mistakes: {mistakes} Lessons: {lessons}",
            {"mistakes": "typed {lessons} by accident", "lessons": "slow down"},
        )
        assert text == "Mistakes: typed {lessons} by accident Lessons: slow down"


class TestPromptCache:
    def test_reads_once_within_ttl(self, service, counting, clock):
        service.create_prompt("greeting", "hello")
        service.get_prompt("greeting")
        clock.now = 29
        service.get_prompt("greeting")
        assert counting.reads == 1

    def test_reloads_after_ttl(self, service, counting, clock):
        service.create_prompt("greeting", "hello")
        service.get_prompt("greeting")
        clock.now = 31
        service.get_prompt("greeting")
        assert counting.reads == 2

    def test_direct_store_writes_are_seen_after_ttl(self, service, counting, clock):
        service.create_prompt("greeting", "hello")
        assert service.get_prompt("greeting") == "hello"
        counting.store.set_prompt_active("greeting", False)
        assert service.get_prompt("greeting") == "hello"
        clock.now = 31
        assert service.get_prompt("greeting") == DEFAULT_FALLBACK

    def test_store_failure_keeps_serving(self, temp_store, clock):
        failing = CountingStore(temp_store, fail=True)
        cache = PromptCache(failing, ttl_seconds=30, clock=clock)
        assert cache.get_or_refresh("anything") is None
        assert cache.is_stale()


class TestPromptService:
    def test_missing_prompt_uses_fallback(self, service):
        text = service.get_prompt(JOURNAL_SUMMARY_PROMPT, {"entry_count": 4})
        assert "Journal entries: 4" in text
        assert text.startswith(FALLBACK_PROMPTS[JOURNAL_SUMMARY_PROMPT].split("\n")[0])

    def test_unknown_name_uses_default_fallback(self, service):
        assert service.get_prompt("unknown") == DEFAULT_FALLBACK

    def test_stored_prompt_is_rendered(self, service):
        service.create_prompt(JOURNAL_SUMMARY_PROMPT, "{entry_count} entries", category="journal")
        assert service.get_prompt(JOURNAL_SUMMARY_PROMPT, {"entry_count": 3}) == "3 entries"

    def test_update_invalidates_cache(self, service):
        service.create_prompt("greeting", "hello")
        assert service.get_prompt("greeting") == "hello"
        updated = service.update_prompt("greeting", content="hi there")
        assert updated.content == "hi there"
        assert service.get_prompt("greeting") == "hi there"

    def test_toggle_invalidates_cache(self, service):
        service.create_prompt("greeting", "hello")
        assert service.get_prompt("greeting") == "hello"
        toggled = service.toggle_prompt("greeting")
        assert toggled.is_active is False
        assert service.get_prompt("greeting") == DEFAULT_FALLBACK
        service.toggle_prompt("greeting")
        assert service.get_prompt("greeting") == "hello"

    def test_update_missing_prompt(self, service):
        with pytest.raises(KeyError):
            service.update_prompt("missing", content="x")

    def test_toggle_missing_prompt(self, service):
        with pytest.raises(KeyError):
            service.toggle_prompt("missing")

    def test_list_prompts(self, service):
        service.create_prompt("b", "2", category="journal")
        service.create_prompt("a", "1", category="journal")
        assert [p.name for p in service.list_prompts()] == ["a", "b"]
