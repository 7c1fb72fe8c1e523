"""Cheap keyword gate for journal-shaped messages."""

JOURNAL_KEYWORDS = [
    "journal",
    "log",
    "note",
    "diary",
    "review",
    "post-mortem",
    "weekly review",
    "monthly review",
    "summary",
    "retro",
    "goal",
    "goals",
    "check-in",
    "checkin",
    "streak",
    "win rate",
    "lessons",
    "mistakes",
    "tags:",
]


def looks_like_journal(text: str) -> bool:
    """Check if a message mentions any journal keyword.

    Args:
        text: Raw message text.

    Returns:
        True if a journal keyword appears anywhere in the message.
    """
    text_lower = text.lower()
    return any(kw in text_lower for kw in JOURNAL_KEYWORDS)
