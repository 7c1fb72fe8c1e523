"""Tests for the journal keyword gate."""

import pytest

from racfella.journal.keywords import JOURNAL_KEYWORDS, looks_like_journal


class TestLooksLikeJournal:
    @pytest.mark.parametrize(
        "text",
        [
            "I want to log my trading day",
            "Add to my journal",
            "Weekly review of my trades",
            "Set a goal for next month",
            "Check-in on my progress",
            "Show me my mistakes",
            "What is my win rate?",
            "TAGS: fomo, revenge",
        ],
    )
    def test_detects_journal_keywords(self, text):
        assert looks_like_journal(text) is True

    @pytest.mark.parametrize(
        "text",
        [
            "Show my portfolio",
            "What is Bitcoin price?",
            "I am feeling sad",
            "Hello there",
        ],
    )
    def test_rejects_non_journal_messages(self, text):
        assert looks_like_journal(text) is False

    def test_every_keyword_triggers(self):
        for keyword in JOURNAL_KEYWORDS:
            assert looks_like_journal(f"please {keyword.upper()} now"), keyword
