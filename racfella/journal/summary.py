"""Journal summary statistics."""

from datetime import datetime

from pydantic import BaseModel, Field

from racfella.models import GoalStatus, JournalEntry, JournalGoal

# How many recent mistakes/lessons go into a summary
TOP_NOTES = 3


class SummaryStats(BaseModel):
    """Aggregates over a summary window."""

    from_date: datetime = Field(..., description="Window start")
    to_date: datetime = Field(..., description="Window end")
    entry_count: int = Field(..., ge=0, description="Entries in window")
    total_trades: int = Field(..., ge=0, description="Trades logged in window")
    win_rate: float = Field(..., ge=0, le=100, description="Share of R-tracked trades with r > 0")
    avg_r: float = Field(..., description="Mean r over R-tracked trades")
    mistakes: list[str] = Field(default_factory=list, description="Most recent mistakes")
    lessons: list[str] = Field(default_factory=list, description="Most recent lessons")
    active_goals: int = Field(..., ge=0, description="Active goal count")
    completed_goals: int = Field(..., ge=0, description="Completed goal count")

    model_config = {"frozen": True}


def compute_summary_stats(
    entries: list[JournalEntry],
    goals: list[JournalGoal],
    from_date: datetime,
    to_date: datetime,
) -> SummaryStats:
    """Compute summary statistics.

    Win rate and average R only count trades with a numeric ``r``.

    Args:
        entries: Entries in the window, newest first.
        goals: All of the user's goals.
        from_date: Window start.
        to_date: Window end.

    Returns:
        SummaryStats for the window.
    """
    total_trades = sum(len(entry.trades) for entry in entries)
    r_values = [trade.r for entry in entries for trade in entry.trades if trade.r is not None]
    wins = sum(1 for r in r_values if r > 0)

    win_rate = wins / len(r_values) * 100 if r_values else 0.0
    avg_r = sum(r_values) / len(r_values) if r_values else 0.0

    return SummaryStats(
        from_date=from_date,
        to_date=to_date,
        entry_count=len(entries),
        total_trades=total_trades,
        win_rate=win_rate,
        avg_r=avg_r,
        mistakes=[e.mistakes for e in entries if e.mistakes][:TOP_NOTES],
        lessons=[e.lessons for e in entries if e.lessons][:TOP_NOTES],
        active_goals=sum(1 for g in goals if g.status is GoalStatus.ACTIVE),
        completed_goals=sum(1 for g in goals if g.status is GoalStatus.COMPLETED),
    )


def _numbered(items: list[str]) -> str:
    return "\n".join(f"{i}. {item}" for i, item in enumerate(items, start=1)) or "-"


def summary_prompt_variables(stats: SummaryStats) -> dict[str, object]:
    """Placeholder values for the summary prompt template."""
    return {
        "from_date": stats.from_date.date().isoformat(),
        "to_date": stats.to_date.date().isoformat(),
        "entry_count": stats.entry_count,
        "total_trades": stats.total_trades,
        "win_rate": f"{stats.win_rate:.1f}",
        "avg_r": f"{stats.avg_r:.2f}",
        "active_goals": stats.active_goals,
        "completed_goals": stats.completed_goals,
        "mistakes": _numbered(stats.mistakes),
        "lessons": _numbered(stats.lessons),
    }
