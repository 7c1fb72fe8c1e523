"""Property-based tests for journal summary statistics."""

from datetime import datetime

from hypothesis import given, settings
from hypothesis import strategies as st

from racfella.journal.summary import compute_summary_stats, summary_prompt_variables
from racfella.models import GoalStatus, JournalEntry, JournalGoal, TradeRecord

FROM = datetime(2024, 2, 1)
TO = datetime(2024, 3, 1)


def entry_with_r(*r_values, **fields) -> JournalEntry:
    trades = [TradeRecord(symbol="BTC", direction="long", r=r) for r in r_values]
    return JournalEntry(user_id="u1", trades=trades, **fields)


class TestComputeSummaryStats:
    def test_win_rate_and_average_r(self):
        entries = [entry_with_r(2, -1), entry_with_r(0.5, -0.5)]
        stats = compute_summary_stats(entries, [], FROM, TO)
        assert stats.entry_count == 2
        assert stats.total_trades == 4
        assert stats.win_rate == 50.0
        assert stats.avg_r == 0.25

    def test_trades_without_r_are_counted_but_not_rated(self):
        entry = JournalEntry(
            user_id="u1",
            trades=[
                TradeRecord(symbol="ES", direction="short"),
                TradeRecord(symbol="NQ", direction="long", r=1.0),
            ],
        )
        stats = compute_summary_stats([entry], [], FROM, TO)
        assert stats.total_trades == 2
        assert stats.win_rate == 100.0
        assert stats.avg_r == 1.0

    def test_no_trades(self):
        stats = compute_summary_stats([JournalEntry(user_id="u1")], [], FROM, TO)
        assert stats.win_rate == 0.0
        assert stats.avg_r == 0.0

    def test_notes_and_goal_counts(self):
        entries = [
            JournalEntry(user_id="u1", mistakes=f"mistake {i}", lessons=f"lesson {i}")
            for i in range(5)
        ]
        goals = [
            JournalGoal(user_id="u1", text="a"),
            JournalGoal(user_id="u1", text="b", status=GoalStatus.COMPLETED, progress=100),
            JournalGoal(user_id="u1", text="c", status=GoalStatus.ABANDONED),
        ]
        stats = compute_summary_stats(entries, goals, FROM, TO)
        assert stats.mistakes == ["mistake 0", "mistake 1", "mistake 2"]
        assert stats.lessons == ["lesson 0", "lesson 1", "lesson 2"]
        assert stats.active_goals == 1
        assert stats.completed_goals == 1

    @given(r_values=st.lists(st.floats(min_value=-10, max_value=10, allow_nan=False), max_size=20))
    @settings(max_examples=100)
    def test_win_rate_bounds(self, r_values):
        """*For any* set of R results, win rate stays within 0..100."""
        stats = compute_summary_stats([entry_with_r(*r_values)], [], FROM, TO)
        assert 0.0 <= stats.win_rate <= 100.0
        assert stats.total_trades == len(r_values)


class TestSummaryPromptVariables:
    def test_formatting(self):
        stats = compute_summary_stats([entry_with_r(2, -1, mistakes="late entry")], [], FROM, TO)
        variables = summary_prompt_variables(stats)
        assert variables["from_date"] == "2024-02-01"
        assert variables["to_date"] == "2024-03-01"
        assert variables["win_rate"] == "50.0"
        assert variables["avg_r"] == "0.50"
        assert variables["mistakes"] == "1. late entry"
        assert variables["lessons"] == "-"
