"""Three-way message routing: crisis, journal, or everything else."""

import logging

from racfella.config import DEFAULT_MIN_CONFIDENCE
from racfella.journal.classifier import IntentClassifier
from racfella.journal.crisis import detect_crisis
from racfella.journal.keywords import looks_like_journal
from racfella.models import Intent, Route, RouteDecision

logger = logging.getLogger(__name__)

# Applied when keyword evidence overrides a weak or empty classification
FALLBACK_INTENT = Intent.ADD_ENTRY
FALLBACK_CONFIDENCE = 0.7


class MessageRouter:
    """Decides which subsystem handles an inbound message.

    The cascade short-circuits at the first decisive step:

    1. crisis keywords -> CRISIS (no model call)
    2. no journal keywords -> NONJOURNAL (no model call)
    3. classifier crisis_flag -> CRISIS
    4. intent NONE or confidence below the gate -> JOURNAL as ADD_ENTRY
    5. otherwise -> JOURNAL with the classifier's intent
    """

    def __init__(self, classifier: IntentClassifier, min_confidence: float = DEFAULT_MIN_CONFIDENCE):
        """Initialize the router.

        Args:
            classifier: Intent classifier for journal-shaped messages.
            min_confidence: Confidence gate; lower verdicts are overridden.
        """
        self.classifier = classifier
        self.min_confidence = min_confidence

    async def route(self, text: str) -> RouteDecision:
        """Route a message.

        Args:
            text: Raw message text.

        Returns:
            RouteDecision, with the classification when one was made.
        """
        crisis = detect_crisis(text)
        if crisis.is_crisis:
            logger.info("Crisis keywords matched: %s", ", ".join(crisis.trigger_words))
            return RouteDecision(route=Route.CRISIS)

        if not looks_like_journal(text):
            return RouteDecision(route=Route.NONJOURNAL)

        classification = await self.classifier.classify(text)

        if classification.crisis_flag:
            logger.info("Classifier raised crisis flag")
            return RouteDecision(route=Route.CRISIS, classification=classification)

        if classification.intent is Intent.NONE or classification.confidence < self.min_confidence:
            logger.debug(
                "Low-confidence verdict %s (%.2f), defaulting to %s",
                classification.intent.value,
                classification.confidence,
                FALLBACK_INTENT.value,
            )
            classification = classification.model_copy(
                update={"intent": FALLBACK_INTENT, "confidence": FALLBACK_CONFIDENCE}
            )

        return RouteDecision(route=Route.JOURNAL, classification=classification)
