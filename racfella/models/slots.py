"""Slot, draft and action result models for the journal engine."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from racfella.models.intent import JournalAction
from racfella.models.journal import TradeRecord


class EntryDraft(BaseModel):
    """Partial journal entry accumulated from free text."""

    date: Optional[datetime] = Field(default=None, description="Entry date, stamped on write if absent")
    market: Optional[str] = Field(default=None, description="Market or instrument")
    emotions: Optional[str] = Field(default=None, description="Emotional state")
    mistakes: Optional[str] = Field(default=None, description="Mistakes made")
    lessons: Optional[str] = Field(default=None, description="Lessons learned")
    tags: list[str] = Field(default_factory=list, description="Tags in order of mention")
    trades: list[TradeRecord] = Field(default_factory=list, description="Trades mentioned")

    model_config = {"frozen": True}


class GoalDraft(BaseModel):
    """Goal fields extracted from a SET_GOAL message."""

    text: str = Field(default="", description="Goal text")
    target: Optional[str] = Field(default=None, description="Target or metric")
    due: Optional[str] = Field(default=None, description="Raw due phrase")

    model_config = {"frozen": True}


class EntryFilters(BaseModel):
    """Filters for entry listings and summaries."""

    from_date: Optional[datetime] = Field(default=None, description="Inclusive lower bound")
    to_date: Optional[datetime] = Field(default=None, description="Inclusive upper bound")
    tag: Optional[str] = Field(default=None, description="Required tag")

    model_config = {"frozen": True}


class JournalSlots(BaseModel):
    """Everything an action needs besides the user id."""

    message: str = Field(default="", description="Raw inbound message")
    filters: Optional[EntryFilters] = Field(default=None, description="Listing filters")
    entry_draft: Optional[EntryDraft] = Field(default=None, description="Entry draft for ADD_ENTRY")
    goal_draft: Optional[GoalDraft] = Field(default=None, description="Goal draft for SET_GOAL")

    model_config = {"frozen": True}


class ActionResult(BaseModel):
    """Outcome of one journal action."""

    action: JournalAction = Field(..., description="Executed action")
    response: str = Field(..., description="Human-readable response")
    data: Any = Field(default=None, description="Structured result payload")
    ok: bool = Field(default=True, description="False when the store or provider failed")

    model_config = {"frozen": True}
