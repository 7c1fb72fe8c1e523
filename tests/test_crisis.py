"""Property-based tests for crisis keyword detection.

**Feature: journal-routing**
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from racfella.journal.crisis import CRISIS_KEYWORDS, detect_crisis, is_crisis_message

SINGLE_WORD_KEYWORDS = [kw for kw in CRISIS_KEYWORDS if " " not in kw]
SAFE_WORDS = ["market", "today", "my", "journal", "plan", "calm", "review", "chart"]


class TestCrisisWordBoundaries:
    """
    Single-word crisis keywords only match whole words, so ordinary words
    that contain them ("diet", "deadline", "skill") stay safe.
    """

    def test_diet_is_not_die(self):
        result = detect_crisis("I ate a diet snack")
        assert result.is_crisis is False
        assert result.trigger_words == []

    def test_partial_words_do_not_match(self):
        for text in ["Deadline for my journal is Friday", "Working on my skill set", "Studied a deathstar chart pattern"]:
            assert not is_crisis_message(text), f"False positive for {text!r}"

    def test_whole_word_matches(self):
        assert is_crisis_message("I feel like I could die")
        assert is_crisis_message("This loss will kill me")

    def test_case_insensitive(self):
        assert is_crisis_message("SUICIDE")
        assert is_crisis_message("I Want To End It All")

    @given(
        keyword=st.sampled_from(SINGLE_WORD_KEYWORDS),
        prefix=st.lists(st.sampled_from(SAFE_WORDS), max_size=4),
        suffix=st.lists(st.sampled_from(SAFE_WORDS), max_size=4),
    )
    @settings(max_examples=100)
    def test_keyword_surrounded_by_safe_words(self, keyword, prefix, suffix):
        """
        *For any* single-word keyword surrounded by safe words, the
        message is a crisis and the keyword is reported.
        """
        text = " ".join(prefix + [keyword] + suffix)
        result = detect_crisis(text)
        assert result.is_crisis
        assert keyword in result.trigger_words


class TestCrisisPhrases:
    """Multi-word keywords match as case-insensitive substrings."""

    def test_end_it_all(self):
        assert detect_crisis("I want to end it all").is_crisis is True

    def test_finance_ruin(self):
        result = detect_crisis("I lost everything on that leverage trade")
        assert result.is_crisis
        assert result.trigger_words == ["lost everything"]

    def test_trigger_words_follow_keyword_order(self):
        result = detect_crisis("I'm hopeless and suicidal")
        assert result.trigger_words == ["suicidal", "hopeless"]

    @given(
        text=st.lists(st.sampled_from(SAFE_WORDS), min_size=1, max_size=10).map(" ".join),
    )
    @settings(max_examples=50)
    def test_safe_text_is_never_crisis(self, text):
        """*For any* text built only from safe words, no crisis is detected."""
        assert detect_crisis(text).is_crisis is False
