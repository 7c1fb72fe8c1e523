"""Single entry point tying routing to journal actions."""

import logging
from typing import Optional

from pydantic import BaseModel, Field

from racfella.journal.engine import JournalActionEngine
from racfella.journal.router import MessageRouter
from racfella.journal.slots import build_slots
from racfella.models import (
    ActionResult,
    EntryDraft,
    IntentResult,
    JournalAction,
    Route,
)

logger = logging.getLogger(__name__)


class AssistantReply(BaseModel):
    """What the journal core did with a message.

    For CRISIS and NONJOURNAL routes ``result`` is None and the caller's
    conversation layer takes over.
    """

    route: Route = Field(..., description="Selected handling path")
    classification: Optional[IntentResult] = Field(default=None, description="Classification")
    result: Optional[ActionResult] = Field(default=None, description="Journal action result")

    model_config = {"frozen": True}


class JournalAssistant:
    """Routes a message and, for journal messages, runs the resolved action."""

    def __init__(self, router: MessageRouter, engine: JournalActionEngine):
        self.router = router
        self.engine = engine

    async def handle(
        self, user_id: str, text: str, existing_draft: Optional[EntryDraft] = None
    ) -> AssistantReply:
        """Handle one inbound message.

        Args:
            user_id: Sender.
            text: Raw message text.
            existing_draft: Entry draft carried over from earlier messages.

        Returns:
            AssistantReply describing the route and any action result.
        """
        decision = await self.router.route(text)
        if decision.route is not Route.JOURNAL or decision.classification is None:
            return AssistantReply(route=decision.route, classification=decision.classification)

        action = JournalAction.from_intent(decision.classification.intent)
        slots = build_slots(action, text, decision.classification, existing_draft)
        result = await self.engine.run_action(action, slots, user_id)
        return AssistantReply(
            route=decision.route,
            classification=decision.classification,
            result=result,
        )
