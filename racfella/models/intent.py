"""Intent classification and routing data models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, StrictBool, StrictStr


class Intent(str, Enum):
    """Intents the classifier may return."""

    ADD_ENTRY = "ADD_ENTRY"
    GET_ENTRIES = "GET_ENTRIES"
    SET_GOAL = "SET_GOAL"
    GET_GOALS = "GET_GOALS"
    CHECKIN = "CHECKIN"
    SUMMARY = "SUMMARY"
    NONE = "NONE"


class JournalAction(str, Enum):
    """Actions the journal engine can execute."""

    ADD_ENTRY = "ADD_ENTRY"
    GET_ENTRIES = "GET_ENTRIES"
    SET_GOAL = "SET_GOAL"
    GET_GOALS = "GET_GOALS"
    CHECKIN = "CHECKIN"
    SUMMARY = "SUMMARY"

    @classmethod
    def from_intent(cls, intent: Intent) -> "JournalAction":
        """Map a resolved intent onto an action. NONE is not an action."""
        if intent is Intent.NONE:
            raise ValueError("Intent NONE has no journal action")
        return cls(intent.value)


class Route(str, Enum):
    """Handling path for an inbound message."""

    CRISIS = "CRISIS"
    JOURNAL = "JOURNAL"
    NONJOURNAL = "NONJOURNAL"


class DateRange(BaseModel):
    """Raw date range slot as returned by the classifier."""

    from_: Optional[StrictStr] = Field(default=None, alias="from", description="Range start")
    to: Optional[StrictStr] = Field(default=None, description="Range end")

    model_config = {"frozen": True, "populate_by_name": True}


class IntentResult(BaseModel):
    """Structured classification of a journal message."""

    intent: Intent = Field(..., description="Classified intent")
    confidence: float = Field(..., ge=0, le=1, description="Classifier confidence")
    date: Optional[StrictStr] = Field(default=None, description="Single date slot")
    range: Optional[DateRange] = Field(default=None, description="Date range slot")
    tags: Optional[list[StrictStr]] = Field(default=None, description="Tag slots")
    goal_text: Optional[StrictStr] = Field(default=None, description="Goal text slot")
    goal_due: Optional[StrictStr] = Field(default=None, description="Goal due phrase")
    goal_target: Optional[StrictStr] = Field(default=None, description="Goal target slot")
    crisis_flag: StrictBool = Field(default=False, description="Semantic crisis signal")
    rationale: Optional[StrictStr] = Field(default=None, description="Classifier note or error kind")

    model_config = {"frozen": True}


class RouteDecision(BaseModel):
    """Routing outcome for a single message."""

    route: Route = Field(..., description="Selected handling path")
    classification: Optional[IntentResult] = Field(
        default=None, description="Classification, when one was made"
    )

    model_config = {"frozen": True}
