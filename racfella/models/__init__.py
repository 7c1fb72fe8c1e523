"""Data models for Racfella."""

from racfella.models.journal import (
    GoalStatus,
    JournalCheckIn,
    JournalEntry,
    JournalGoal,
    TradeRecord,
)
from racfella.models.intent import (
    DateRange,
    Intent,
    IntentResult,
    JournalAction,
    Route,
    RouteDecision,
)
from racfella.models.slots import (
    ActionResult,
    EntryDraft,
    EntryFilters,
    GoalDraft,
    JournalSlots,
)
from racfella.models.prompt import AgentPrompt

__all__ = [
    "GoalStatus",
    "JournalCheckIn",
    "JournalEntry",
    "JournalGoal",
    "TradeRecord",
    "DateRange",
    "Intent",
    "IntentResult",
    "JournalAction",
    "Route",
    "RouteDecision",
    "ActionResult",
    "EntryDraft",
    "EntryFilters",
    "GoalDraft",
    "JournalSlots",
    "AgentPrompt",
]
