"""Crisis keyword detection.

Runs before anything else on every inbound message. A hit routes the
message to the crisis path without any model call.
"""

import re
from typing import NamedTuple

CRISIS_KEYWORDS = [
    "jump from a bridge",
    "jump from bridge",
    "end it all",
    "kill myself",
    "suicide",
    "suicidal",
    "want to die",
    "don't want to live",
    "life is not worth",
    "nothing to live for",
    "better off dead",
    "give up on life",
    "can't go on",
    "no point living",
    "end my life",
    "harm myself",
    "hurt myself",
    "lost everything",
    "lost all",
    "lost my money",
    "financial ruin",
    "can't take it anymore",
    "hopeless",
    "worthless",
    "no way out",
    "i am going to die",
    "die",
    "death",
    "dead",
    "kill",
]


class CrisisCheck(NamedTuple):
    """Result of a crisis scan."""

    is_crisis: bool
    trigger_words: list[str]


def _compile(keyword: str) -> re.Pattern[str]:
    # Single words must match whole words ("die" must not hit "diet")
    if not any(ch.isspace() for ch in keyword):
        return re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE)
    return re.compile(re.escape(keyword), re.IGNORECASE)


_PATTERNS = [(keyword, _compile(keyword)) for keyword in CRISIS_KEYWORDS]


def detect_crisis(text: str) -> CrisisCheck:
    """Scan a message for crisis keywords.

    Args:
        text: Raw message text.

    Returns:
        CrisisCheck with the matched keywords in keyword-list order.
    """
    triggers = [keyword for keyword, pattern in _PATTERNS if pattern.search(text)]
    return CrisisCheck(is_crisis=bool(triggers), trigger_words=triggers)


def is_crisis_message(text: str) -> bool:
    """Check if a message contains any crisis keyword."""
    return detect_crisis(text).is_crisis
