"""Journal action engine.

Each inbound journal message runs exactly one action. Actions read and
write through the store and answer with a plain-language response.
Expected user-flow gaps (no draft, no goal text, no active goal) are
answered with guidance. Store and provider failures are logged and
answered with a retry message; they never escape ``run_action``.
"""

import asyncio
import logging
import re
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from racfella.agents.base import CompletionProvider
from racfella.config import JournalSettings
from racfella.db.store import JournalStore
from racfella.exceptions import StoreError
from racfella.journal.dates import parse_due_date
from racfella.journal.summary import compute_summary_stats, summary_prompt_variables
from racfella.models import (
    ActionResult,
    EntryFilters,
    GoalStatus,
    JournalAction,
    JournalCheckIn,
    JournalEntry,
    JournalGoal,
    JournalSlots,
)
from racfella.prompts import JOURNAL_SUMMARY_PROMPT, PromptService

logger = logging.getLogger(__name__)

PROGRESS_PATTERN = re.compile(r"(\d+)\s*%")
# Scores longer than nine digits are ignored rather than truncated
SCORE_PATTERN = re.compile(r"score[:\s]+(\d{1,9})\b", re.IGNORECASE)

STATUS_MARKERS = {
    GoalStatus.ACTIVE: "🟢",
    GoalStatus.COMPLETED: "✅",
    GoalStatus.ABANDONED: "❌",
}

NO_DRAFT_MESSAGE = (
    "❌ No entry data to add. Please tell me about your trading day: "
    "how you felt, mistakes, lessons, tags."
)
NO_GOAL_TEXT_MESSAGE = (
    "❌ Please specify your goal. Example: 'My goal is to improve my win rate to 70%'"
)
NO_ENTRIES_MESSAGE = "📒 No journal entries found."
NO_GOALS_MESSAGE = "🎯 No goals found. Set your first goal with 'My goal is...'"
NO_ACTIVE_GOAL_MESSAGE = "🎯 No active goals found. Set a goal first!"
NO_SUMMARY_DATA_MESSAGE = "🧾 No journal data found for summary period."


def _day(value: Optional[datetime]) -> str:
    return value.date().isoformat() if value else ""


def format_entry(entry: JournalEntry) -> str:
    """Render one entry for a listing."""
    lines = [f"📅 {entry.date.strftime('%Y-%m-%d %H:%M')}"]
    if entry.market:
        lines.append(f"📈 Market: {entry.market}")
    if entry.emotions:
        lines.append(f"💭 Emotions: {entry.emotions}")
    if entry.mistakes:
        lines.append(f"⚠️ Mistakes: {entry.mistakes}")
    if entry.lessons:
        lines.append(f"💡 Lessons: {entry.lessons}")
    if entry.trades:
        lines.append(f"💹 Trades: {len(entry.trades)}")
    if entry.tags:
        lines.append(f"🏷️ Tags: {', '.join(entry.tags)}")
    return "\n".join(lines)


def format_goal(index: int, goal: JournalGoal) -> str:
    """Render one goal for a listing."""
    lines = [
        f"**{index}. {goal.text}** {STATUS_MARKERS[goal.status]}",
        f"📊 Progress: {goal.progress}%",
    ]
    if goal.target:
        lines.append(f"🎯 Target: {goal.target}")
    if goal.due:
        lines.append(f"📅 Due: {goal.due.isoformat()}")
    lines.append(f"💬 Check-ins: {len(goal.check_ins)}")
    return "\n".join(lines)


class JournalActionEngine:
    """Executes journal actions against a store."""

    def __init__(
        self,
        store: JournalStore,
        provider: CompletionProvider,
        settings: Optional[JournalSettings] = None,
        prompts: Optional[PromptService] = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        """Initialize the engine.

        Args:
            store: Journal store.
            provider: Completion provider for summaries.
            settings: Optional settings (listing limit, summary window).
            prompts: Optional prompt service for the summary template.
            now: Clock, injectable for tests.
        """
        self.store = store
        self.provider = provider
        self.settings = settings or JournalSettings()
        self.prompts = prompts
        self._now = now

    async def run_action(
        self, action: JournalAction, slots: JournalSlots, user_id: str
    ) -> ActionResult:
        """Run one journal action.

        Args:
            action: Action selected by the router.
            slots: Extracted slots and the raw message.
            user_id: Owning user.

        Returns:
            ActionResult with the response text and structured data.

        Raises:
            ValueError: If ``action`` is not a JournalAction.
        """
        action = JournalAction(action)
        logger.info("Running %s for user %s", action.value, user_id)
        if action is JournalAction.ADD_ENTRY:
            return await self._add_entry(slots, user_id)
        elif action is JournalAction.GET_ENTRIES:
            return await self._get_entries(slots, user_id)
        elif action is JournalAction.SET_GOAL:
            return await self._set_goal(slots, user_id)
        elif action is JournalAction.GET_GOALS:
            return await self._get_goals(user_id)
        elif action is JournalAction.CHECKIN:
            return await self._checkin(slots, user_id)
        elif action is JournalAction.SUMMARY:
            return await self._summary(slots, user_id)
        raise ValueError(f"Unknown journal action: {action!r}")

    @staticmethod
    async def _call(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        # The SQLite store is synchronous
        return await asyncio.to_thread(func, *args, **kwargs)

    @staticmethod
    def _failure(action: JournalAction, what: str) -> ActionResult:
        return ActionResult(
            action=action,
            response=f"❌ Failed to {what}. Please try again.",
            ok=False,
        )

    # ==================== ADD_ENTRY ====================

    async def _add_entry(self, slots: JournalSlots, user_id: str) -> ActionResult:
        action = JournalAction.ADD_ENTRY
        draft = slots.entry_draft
        if draft is None:
            return ActionResult(action=action, response=NO_DRAFT_MESSAGE)

        entry = JournalEntry(
            user_id=user_id,
            date=draft.date or self._now(),
            market=draft.market,
            emotions=draft.emotions,
            mistakes=draft.mistakes,
            lessons=draft.lessons,
            tags=list(draft.tags),
            trades=list(draft.trades),
        )
        try:
            saved = await self._call(self.store.create_entry, entry)
        except StoreError:
            logger.exception("Error adding journal entry")
            return self._failure(action, "add journal entry")

        lines = ["📒 Journal entry saved!", format_entry(saved), f"🆔 {saved.id}"]
        return ActionResult(action=action, response="\n".join(lines), data=saved)

    # ==================== GET_ENTRIES ====================

    async def _get_entries(self, slots: JournalSlots, user_id: str) -> ActionResult:
        action = JournalAction.GET_ENTRIES
        filters = slots.filters or EntryFilters()
        try:
            entries = await self._call(
                self.store.find_entries,
                user_id,
                from_date=filters.from_date,
                to_date=filters.to_date,
                tag=filters.tag,
                limit=self.settings.entry_limit,
            )
        except StoreError:
            logger.exception("Error retrieving journal entries")
            return self._failure(action, "retrieve journal entries")

        if not entries:
            return ActionResult(action=action, response=NO_ENTRIES_MESSAGE, data=[])

        header = f"📒 Your last {len(entries)} journal entries"
        if filters.tag:
            header += f" tagged '{filters.tag}'"
        if filters.from_date or filters.to_date:
            header += f" ({_day(filters.from_date) or '…'} to {_day(filters.to_date) or '…'})"
        body = "\n\n".join(format_entry(entry) for entry in entries)
        return ActionResult(action=action, response=f"{header}:\n\n{body}", data=entries)

    # ==================== SET_GOAL ====================

    async def _set_goal(self, slots: JournalSlots, user_id: str) -> ActionResult:
        action = JournalAction.SET_GOAL
        draft = slots.goal_draft
        if draft is None or not draft.text.strip():
            return ActionResult(action=action, response=NO_GOAL_TEXT_MESSAGE)

        due = parse_due_date(draft.due, today=self._now().date())
        if draft.due and due is None:
            logger.info("Unable to parse due date %r, storing none", draft.due)

        goal = JournalGoal(
            user_id=user_id,
            text=draft.text.strip(),
            target=draft.target,
            due=due,
            status=GoalStatus.ACTIVE,
            progress=0,
            created_at=self._now(),
        )
        try:
            saved = await self._call(self.store.create_goal, goal)
        except StoreError:
            logger.exception("Error setting goal")
            return self._failure(action, "set goal")

        lines = ["🎯 New goal set!", f"📝 **{saved.text}**"]
        if saved.target:
            lines.append(f"🎯 Target: {saved.target}")
        if saved.due:
            lines.append(f"📅 Due: {saved.due.isoformat()}")
        elif draft.due:
            lines.append(f'📅 (Could not understand the due date: "{draft.due}")')
        return ActionResult(action=action, response="\n".join(lines), data=saved)

    # ==================== GET_GOALS ====================

    async def _get_goals(self, user_id: str) -> ActionResult:
        action = JournalAction.GET_GOALS
        try:
            goals = await self._call(self.store.find_goals, user_id, include_check_ins=True)
        except StoreError:
            logger.exception("Error retrieving goals")
            return self._failure(action, "retrieve goals")

        if not goals:
            return ActionResult(action=action, response=NO_GOALS_MESSAGE, data=[])

        body = "\n\n".join(format_goal(i, goal) for i, goal in enumerate(goals, start=1))
        return ActionResult(action=action, response=f"🎯 Your Goals:\n\n{body}", data=goals)

    # ==================== CHECKIN ====================

    async def _checkin(self, slots: JournalSlots, user_id: str) -> ActionResult:
        # TODO: let the user name the goal when several are active; this
        # always picks the most recently created one.
        action = JournalAction.CHECKIN
        message = slots.message
        progress_match = PROGRESS_PATTERN.search(message)
        score_match = SCORE_PATTERN.search(message)

        try:
            goal = await self._call(self.store.find_latest_goal, user_id, GoalStatus.ACTIVE)
            if goal is None:
                return ActionResult(action=action, response=NO_ACTIVE_GOAL_MESSAGE)

            # The check-in is kept even if the progress update below fails
            check_in = await self._call(
                self.store.create_checkin,
                JournalCheckIn(
                    user_id=user_id,
                    goal_id=goal.id,
                    note=message,
                    score=int(score_match.group(1)) if score_match else None,
                    created_at=self._now(),
                ),
            )

            if progress_match:
                progress = min(100, int(progress_match.group(1)))
                status = GoalStatus.COMPLETED if progress >= 100 else GoalStatus.ACTIVE
                await self._call(self.store.update_goal_progress, goal.id, progress, status)
                goal = goal.model_copy(update={"progress": progress, "status": status})
        except StoreError:
            logger.exception("Error processing check-in")
            return self._failure(action, "process check-in")

        lines = [f"✅ Check-in recorded for: **{goal.text}**", f"📝 Note: {message}"]
        if check_in.score is not None:
            lines.append(f"⭐ Score: {check_in.score}")
        if progress_match:
            lines.append(f"📊 Progress updated: {goal.progress}%")
        if goal.status is GoalStatus.COMPLETED:
            lines.append("🏁 Goal completed. Well done!")
        return ActionResult(
            action=action,
            response="\n".join(lines),
            data={"goal": goal, "check_in": check_in},
        )

    # ==================== SUMMARY ====================

    async def _summary(self, slots: JournalSlots, user_id: str) -> ActionResult:
        action = JournalAction.SUMMARY
        filters = slots.filters or EntryFilters()
        now = self._now()
        from_date = filters.from_date or now - timedelta(days=self.settings.summary_window_days)
        to_date = filters.to_date or now

        try:
            entries = await self._call(
                self.store.find_entries, user_id, from_date=from_date, to_date=to_date
            )
            goals = await self._call(self.store.find_goals, user_id, include_check_ins=True)
        except StoreError:
            logger.exception("Error loading summary data")
            return self._failure(action, "generate summary")

        if not entries and not goals:
            return ActionResult(action=action, response=NO_SUMMARY_DATA_MESSAGE)

        stats = compute_summary_stats(entries, goals, from_date, to_date)
        variables = summary_prompt_variables(stats)
        if self.prompts is not None:
            prompt = await self._call(self.prompts.get_prompt, JOURNAL_SUMMARY_PROMPT, variables)
        else:
            prompt = PromptService.get_fallback_prompt(JOURNAL_SUMMARY_PROMPT, variables)

        try:
            text = await self.provider.complete(prompt)
        except Exception:
            logger.exception("Error generating summary text")
            return self._failure(action, "generate summary")

        return ActionResult(action=action, response=text, data=stats)
