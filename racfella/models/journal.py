"""Journal entry, goal and check-in data models."""

import uuid
from datetime import date as date_type, datetime
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field


def new_id() -> str:
    """Generate a fresh row id."""
    return uuid.uuid4().hex


class GoalStatus(str, Enum):
    """Lifecycle state of a journal goal."""

    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    ABANDONED = "ABANDONED"


class TradeRecord(BaseModel):
    """A single trade logged inside a journal entry."""

    symbol: str = Field(..., min_length=1, description="Traded symbol (e.g. BTC/USDT)")
    direction: Literal["long", "short"] = Field(..., description="Trade direction")
    size: Optional[float] = Field(default=None, ge=0, description="Position size")
    r: Optional[float] = Field(default=None, description="Result in R multiples")
    pnl: Optional[float] = Field(default=None, description="Realized P&L")

    model_config = {"frozen": True}


class JournalEntry(BaseModel):
    """Represents one trading journal entry owned by a user."""

    id: str = Field(default_factory=new_id, description="Entry ID")
    user_id: str = Field(..., min_length=1, description="Owning user ID")
    date: datetime = Field(default_factory=datetime.now, description="Entry timestamp")
    market: Optional[str] = Field(default=None, description="Market or instrument traded")
    emotions: Optional[str] = Field(default=None, description="Emotional state")
    mistakes: Optional[str] = Field(default=None, description="Mistakes made")
    lessons: Optional[str] = Field(default=None, description="Lessons learned")
    tags: list[str] = Field(default_factory=list, description="Tags in display order")
    trades: list[TradeRecord] = Field(default_factory=list, description="Logged trades")

    model_config = {"frozen": True}


class JournalCheckIn(BaseModel):
    """A progress report against a goal."""

    id: str = Field(default_factory=new_id, description="Check-in ID")
    user_id: str = Field(..., min_length=1, description="Owning user ID")
    goal_id: str = Field(..., min_length=1, description="Referenced goal ID")
    note: str = Field(..., description="Check-in note (the raw message)")
    score: Optional[int] = Field(default=None, description="Optional self-score")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")

    model_config = {"frozen": True}


class JournalGoal(BaseModel):
    """A user-declared trading goal."""

    id: str = Field(default_factory=new_id, description="Goal ID")
    user_id: str = Field(..., min_length=1, description="Owning user ID")
    text: str = Field(..., min_length=1, description="Goal text")
    target: Optional[str] = Field(default=None, description="Target or metric")
    due: Optional[date_type] = Field(default=None, description="Due date")
    status: GoalStatus = Field(default=GoalStatus.ACTIVE, description="Goal status")
    progress: int = Field(default=0, ge=0, le=100, description="Progress percentage")
    created_at: datetime = Field(default_factory=datetime.now, description="Creation timestamp")
    check_ins: list[JournalCheckIn] = Field(
        default_factory=list, description="Check-ins (populated by goal listings)"
    )

    model_config = {"frozen": True}
