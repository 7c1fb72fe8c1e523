"""Pattern-based slot extraction from free text.

Each field has its own pattern and is extracted independently. A field
that does not match keeps the value carried over from the existing draft,
so a draft can be built up over several messages.
"""

import re
from typing import Callable, Optional

from racfella.journal.dates import parse_due_date
from racfella.models import EntryDraft, GoalDraft, IntentResult, TradeRecord

# Text up to the next sentence terminator
_CLAUSE = r"\s*(?P<colon>:)?\s*(?P<value>[^.!?;\n]*)"


def _clause(match: re.Match[str]) -> Optional[str]:
    value = match.group("value").strip(" ,-")
    return value or None


def _market(match: re.Match[str]) -> Optional[str]:
    keyword = match.group("kw").lower()
    value = _clause(match)
    if keyword in ("btc", "eth") and not match.group("colon"):
        return keyword.upper()
    return value


FIELD_PATTERNS: list[tuple[str, re.Pattern[str], Callable[[re.Match[str]], Optional[str]]]] = [
    (
        "emotions",
        re.compile(r"\b(?P<kw>feeling|feel|emotions?|moods?)\b" + _CLAUSE, re.IGNORECASE),
        _clause,
    ),
    (
        "mistakes",
        re.compile(r"\b(?P<kw>mistakes?|errors?|wrong)\b" + _CLAUSE, re.IGNORECASE),
        _clause,
    ),
    (
        "lessons",
        re.compile(
            r"\b(?P<kw>lessons?(?:\s+learned)?|learn(?:ed|t)?|takeaways?)\b" + _CLAUSE,
            re.IGNORECASE,
        ),
        _clause,
    ),
    (
        "market",
        re.compile(r"\b(?P<kw>market|trading|btc|eth|crypto)\b" + _CLAUSE, re.IGNORECASE),
        _market,
    ),
]

TAGS_PATTERN = re.compile(r"\btags?\b" + _CLAUSE, re.IGNORECASE)
_TAG_SPLIT = re.compile(r"[,\s]+")

TRADE_PATTERN = re.compile(
    r"\b(?P<direction>long|short)\s+(?P<symbol>[A-Za-z][A-Za-z0-9]{1,9}(?:/[A-Za-z0-9]{2,10})?)"
    r"(?:\s+size\s+(?P<size>\d+(?:\.\d+)?))?"
    r"(?:\s+(?:for\s+)?(?P<r>[+-]?\d+(?:\.\d+)?)\s*r\b)?"
    r"(?:\s*,?\s*pnl\s*:?\s*(?P<pnl>[+-]?\d+(?:\.\d+)?))?",
    re.IGNORECASE,
)


def extract_field(field: str, text: str) -> Optional[str]:
    """Extract one named text field, or None if its pattern is absent."""
    for name, pattern, convert in FIELD_PATTERNS:
        if name == field:
            match = pattern.search(text)
            return convert(match) if match else None
    raise KeyError(f"Unknown field: {field}")


def extract_tags(text: str) -> Optional[list[str]]:
    """Extract tags from a ``tags: a, b c`` clause.

    Returns:
        Tags in order of mention without duplicates, or None if no clause.
    """
    match = TAGS_PATTERN.search(text)
    if not match:
        return None
    tags: list[str] = []
    for token in _TAG_SPLIT.split(match.group("value")):
        token = token.strip().lstrip("#")
        if token and token not in tags:
            tags.append(token)
    return tags


def _is_trade(match: re.Match[str]) -> bool:
    # "short on sleep" or "a long day" are not trades: the symbol must be
    # written as a ticker or a pair, or come with a size, R or pnl
    symbol = match.group("symbol")
    if symbol.isupper() or "/" in symbol:
        return True
    return any(match.group(name) for name in ("size", "r", "pnl"))


def extract_trades(text: str) -> list[TradeRecord]:
    """Extract trades written as ``long BTC size 0.5 2R pnl 150``."""
    trades = []
    for match in TRADE_PATTERN.finditer(text):
        if not _is_trade(match):
            continue
        trades.append(
            TradeRecord(
                symbol=match.group("symbol").upper(),
                direction=match.group("direction").lower(),
                size=float(match.group("size")) if match.group("size") else None,
                r=float(match.group("r")) if match.group("r") else None,
                pnl=float(match.group("pnl")) if match.group("pnl") else None,
            )
        )
    return trades


def extract_entry(text: str, existing: Optional[EntryDraft] = None) -> EntryDraft:
    """Build an entry draft from a message.

    The date is left as carried over; ADD_ENTRY stamps the current time
    when the entry is written.

    Args:
        text: Raw message text.
        existing: Draft carried over from earlier messages.

    Returns:
        New EntryDraft.
    """
    existing = existing or EntryDraft()
    values = {}
    for name, pattern, convert in FIELD_PATTERNS:
        match = pattern.search(text)
        extracted = convert(match) if match else None
        values[name] = extracted if extracted is not None else getattr(existing, name)

    tags = extract_tags(text)
    trades = extract_trades(text)
    return EntryDraft(
        date=existing.date,
        tags=tags if tags is not None else list(existing.tags),
        trades=trades or list(existing.trades),
        **values,
    )


# ==================== Goals ====================

GOAL_PATTERN = re.compile(
    r"(?:\bmy\s+(?:new\s+)?goal\s+is\s+(?:to\s+)?"
    r"|\bset\s+(?:a\s+|my\s+)?(?:new\s+)?goal\s*(?::|to\b)?\s*"
    r"|\bgoal\s*:\s*)"
    r"(?P<body>.*)",
    re.IGNORECASE | re.DOTALL,
)
TARGET_PATTERN = re.compile(r"[,;]?\s*\btarget\s*:\s*(?P<target>[^,;\n]+)", re.IGNORECASE)
DUE_SPLIT_PATTERN = re.compile(r"[,;]?\s+(?P<kw>due|by)\b\s*:?\s*", re.IGNORECASE)


def _split_due(body: str) -> tuple[str, Optional[str]]:
    """Split ``<goal>, due <when>`` into goal text and due phrase.

    Prefers the last split whose remainder parses as a date, so "by" inside
    the goal itself ("improve by 10%") is not mistaken for a deadline. An
    explicit "due" is honoured even when its phrase is not understood.
    """
    splits = list(DUE_SPLIT_PATTERN.finditer(body))
    for match in reversed(splits):
        due = body[match.end():].strip(" .")
        if due and parse_due_date(due) is not None:
            return body[: match.start()], due
    for match in reversed(splits):
        if match.group("kw").lower() == "due":
            return body[: match.start()], body[match.end():].strip(" .") or None
    return body, None


def extract_goal(text: str, classification: Optional[IntentResult] = None) -> Optional[GoalDraft]:
    """Build a goal draft from a message and any classifier slots.

    Classifier slots (goal_text, goal_target, goal_due) take precedence
    over what the patterns find.

    Args:
        text: Raw message text.
        classification: Optional classification carrying goal slots.

    Returns:
        GoalDraft, or None if no goal text could be found.
    """
    goal_text: Optional[str] = None
    target: Optional[str] = None
    due: Optional[str] = None

    match = GOAL_PATTERN.search(text)
    if match:
        body = match.group("body").strip()
        target_match = TARGET_PATTERN.search(body)
        if target_match:
            target = target_match.group("target").strip(" .")
            body = body[: target_match.start()] + body[target_match.end():]
        body, due = _split_due(body)
        goal_text = body.strip(" ,;.!") or None

    if classification is not None:
        goal_text = classification.goal_text or goal_text
        target = classification.goal_target or target
        due = classification.goal_due or due

    if not goal_text:
        return None
    return GoalDraft(text=goal_text, target=target, due=due)
