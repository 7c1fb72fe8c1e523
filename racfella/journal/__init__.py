"""Journal core for Racfella.

- detect_crisis / looks_like_journal: keyword scanners
- IntentClassifier: model-backed intent classification
- MessageRouter: crisis / journal / non-journal routing
- extract_entry / extract_goal: slot extraction
- JournalActionEngine: journal actions against the store
- JournalAssistant: routing plus action in one call
"""

from racfella.journal.crisis import CRISIS_KEYWORDS, CrisisCheck, detect_crisis, is_crisis_message
from racfella.journal.keywords import JOURNAL_KEYWORDS, looks_like_journal
from racfella.journal.classifier import IntentClassifier, parse_classification, strip_code_fences
from racfella.journal.router import MessageRouter
from racfella.journal.extractor import extract_entry, extract_goal, extract_tags, extract_trades
from racfella.journal.dates import parse_date_bound, parse_due_date
from racfella.journal.slots import build_filters, build_slots
from racfella.journal.summary import SummaryStats, compute_summary_stats
from racfella.journal.engine import JournalActionEngine
from racfella.journal.assistant import AssistantReply, JournalAssistant

__all__ = [
    "CRISIS_KEYWORDS",
    "CrisisCheck",
    "detect_crisis",
    "is_crisis_message",
    "JOURNAL_KEYWORDS",
    "looks_like_journal",
    "IntentClassifier",
    "parse_classification",
    "strip_code_fences",
    "MessageRouter",
    "extract_entry",
    "extract_goal",
    "extract_tags",
    "extract_trades",
    "parse_date_bound",
    "parse_due_date",
    "build_filters",
    "build_slots",
    "SummaryStats",
    "compute_summary_stats",
    "JournalActionEngine",
    "AssistantReply",
    "JournalAssistant",
]
