"""Assemble action slots from a message and its classification."""

from typing import Optional

from racfella.journal.dates import parse_date_bound
from racfella.journal.extractor import extract_entry, extract_goal
from racfella.models import (
    EntryDraft,
    EntryFilters,
    IntentResult,
    JournalAction,
    JournalSlots,
)


def build_filters(classification: Optional[IntentResult]) -> EntryFilters:
    """Turn classifier range/date/tag slots into listing filters.

    A single ``date`` slot covers that whole day. The first tag is used as
    the tag filter.
    """
    if classification is None:
        return EntryFilters()

    raw_from = raw_to = None
    if classification.range is not None:
        raw_from = classification.range.from_
        raw_to = classification.range.to
    if classification.date and not (raw_from or raw_to):
        raw_from = raw_to = classification.date

    return EntryFilters(
        from_date=parse_date_bound(raw_from),
        to_date=parse_date_bound(raw_to, end_of_day=True),
        tag=classification.tags[0] if classification.tags else None,
    )


def build_slots(
    action: JournalAction,
    message: str,
    classification: Optional[IntentResult] = None,
    existing_draft: Optional[EntryDraft] = None,
) -> JournalSlots:
    """Build the slots an action needs.

    Args:
        action: Action that will run.
        message: Raw message text.
        classification: Classification from the router, if any.
        existing_draft: Entry draft carried over from earlier messages.

    Returns:
        JournalSlots for JournalActionEngine.run_action.
    """
    if action is JournalAction.ADD_ENTRY:
        draft = extract_entry(message, existing_draft)
        if classification is not None:
            tags = list(draft.tags)
            for tag in classification.tags or []:
                if tag not in tags:
                    tags.append(tag)
            updates: dict = {"tags": tags}
            if draft.date is None and classification.date:
                updates["date"] = parse_date_bound(classification.date)
            draft = draft.model_copy(update=updates)
        return JournalSlots(message=message, entry_draft=draft)

    if action is JournalAction.SET_GOAL:
        return JournalSlots(message=message, goal_draft=extract_goal(message, classification))

    if action in (JournalAction.GET_ENTRIES, JournalAction.SUMMARY):
        return JournalSlots(message=message, filters=build_filters(classification))

    return JournalSlots(message=message)
