"""SQLite data store for journal entries, goals, check-ins and prompts."""

import json
import sqlite3
from datetime import date, datetime
from functools import wraps
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

from racfella.exceptions import StoreError
from racfella.models import (
    AgentPrompt,
    GoalStatus,
    JournalCheckIn,
    JournalEntry,
    JournalGoal,
    TradeRecord,
)

T = TypeVar("T")


def _ts(value: datetime) -> str:
    """Serialize a timestamp so that string order matches time order."""
    return value.isoformat(timespec="microseconds")


def _wrap_errors(func: Callable[..., T]) -> Callable[..., T]:
    """Re-raise sqlite errors (and unbindable integers) as StoreError."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return func(*args, **kwargs)
        except (sqlite3.Error, OverflowError) as e:
            raise StoreError(f"{func.__name__} failed: {e}") from e

    return wrapper


class JournalStore:
    """SQLite-based store for the trading journal.

    Every query is scoped by user id. Connections are opened per call, so
    one store instance may be shared across threads.
    """

    REQUIRED_TABLES = [
        "journal_entries",
        "journal_goals",
        "journal_checkins",
        "agent_prompts",
    ]

    def __init__(self, db_path: Path):
        """Initialize the data store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection with foreign keys enforced."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @_wrap_errors
    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS journal_entries (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    date TEXT NOT NULL,
                    market TEXT,
                    emotions TEXT,
                    mistakes TEXT,
                    lessons TEXT,
                    tags TEXT NOT NULL DEFAULT '[]',
                    trades TEXT NOT NULL DEFAULT '[]'
                )
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_entries_user_date
                ON journal_entries (user_id, date)
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS journal_goals (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    text TEXT NOT NULL,
                    target TEXT,
                    due TEXT,
                    status TEXT NOT NULL DEFAULT 'ACTIVE',
                    progress INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL
                )
            """)

            # Check-ins are owned by their goal
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS journal_checkins (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    goal_id TEXT NOT NULL
                        REFERENCES journal_goals (id) ON DELETE CASCADE,
                    note TEXT NOT NULL,
                    score INTEGER,
                    created_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS agent_prompts (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL UNIQUE,
                    title TEXT NOT NULL DEFAULT '',
                    category TEXT NOT NULL DEFAULT 'general',
                    content TEXT NOT NULL,
                    is_active INTEGER NOT NULL DEFAULT 1,
                    updated_at TEXT NOT NULL
                )
            """)

            conn.commit()
        finally:
            conn.close()

    @_wrap_errors
    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Entries ====================

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> JournalEntry:
        return JournalEntry(
            id=row["id"],
            user_id=row["user_id"],
            date=datetime.fromisoformat(row["date"]),
            market=row["market"],
            emotions=row["emotions"],
            mistakes=row["mistakes"],
            lessons=row["lessons"],
            tags=json.loads(row["tags"]),
            trades=[TradeRecord(**t) for t in json.loads(row["trades"])],
        )

    @_wrap_errors
    def create_entry(self, entry: JournalEntry) -> JournalEntry:
        """Save a new journal entry.

        Args:
            entry: Entry to save.

        Returns:
            The saved entry.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO journal_entries
                (id, user_id, date, market, emotions, mistakes, lessons, tags, trades)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.id,
                    entry.user_id,
                    _ts(entry.date),
                    entry.market,
                    entry.emotions,
                    entry.mistakes,
                    entry.lessons,
                    json.dumps(entry.tags),
                    json.dumps([t.model_dump(exclude_none=True) for t in entry.trades]),
                ),
            )
            conn.commit()
            return entry
        finally:
            conn.close()

    @_wrap_errors
    def find_entries(
        self,
        user_id: str,
        from_date: Optional[datetime] = None,
        to_date: Optional[datetime] = None,
        tag: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[JournalEntry]:
        """Get a user's entries, newest first.

        Args:
            user_id: Owning user.
            from_date: Optional inclusive lower bound.
            to_date: Optional inclusive upper bound.
            tag: Optional tag the entry must carry.
            limit: Optional maximum number of entries.

        Returns:
            List of matching entries.
        """
        clauses = ["user_id = ?"]
        params: list[Any] = [user_id]
        if from_date:
            clauses.append("date >= ?")
            params.append(_ts(from_date))
        if to_date:
            clauses.append("date <= ?")
            params.append(_ts(to_date))
        if tag:
            clauses.append("EXISTS (SELECT 1 FROM json_each(journal_entries.tags) WHERE value = ?)")
            params.append(tag)

        query = f"""
            SELECT id, user_id, date, market, emotions, mistakes, lessons, tags, trades
            FROM journal_entries
            WHERE {' AND '.join(clauses)}
            ORDER BY date DESC
        """
        if limit:
            query += " LIMIT ?"
            params.append(limit)

        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return [self._row_to_entry(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    @_wrap_errors
    def delete_entry(self, entry_id: str) -> None:
        """Delete an entry.

        Args:
            entry_id: ID of the entry to delete.
        """
        conn = self._get_connection()
        try:
            conn.execute("DELETE FROM journal_entries WHERE id = ?", (entry_id,))
            conn.commit()
        finally:
            conn.close()

    # ==================== Goals ====================

    @staticmethod
    def _row_to_goal(row: sqlite3.Row, check_ins: Optional[list[JournalCheckIn]] = None) -> JournalGoal:
        return JournalGoal(
            id=row["id"],
            user_id=row["user_id"],
            text=row["text"],
            target=row["target"],
            due=date.fromisoformat(row["due"]) if row["due"] else None,
            status=GoalStatus(row["status"]),
            progress=row["progress"],
            created_at=datetime.fromisoformat(row["created_at"]),
            check_ins=check_ins or [],
        )

    @_wrap_errors
    def create_goal(self, goal: JournalGoal) -> JournalGoal:
        """Save a new goal.

        Args:
            goal: Goal to save.

        Returns:
            The saved goal.
        """
        conn = self._get_connection()
        try:
            conn.execute(
                """
                INSERT INTO journal_goals
                (id, user_id, text, target, due, status, progress, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    goal.id,
                    goal.user_id,
                    goal.text,
                    goal.target,
                    goal.due.isoformat() if goal.due else None,
                    goal.status.value,
                    goal.progress,
                    _ts(goal.created_at),
                ),
            )
            conn.commit()
            return goal
        finally:
            conn.close()

    @_wrap_errors
    def find_latest_goal(
        self, user_id: str, status: GoalStatus = GoalStatus.ACTIVE
    ) -> Optional[JournalGoal]:
        """Get the most recently created goal with the given status.

        Args:
            user_id: Owning user.
            status: Required goal status.

        Returns:
            Goal if found, None otherwise.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT id, user_id, text, target, due, status, progress, created_at
                FROM journal_goals
                WHERE user_id = ? AND status = ?
                ORDER BY created_at DESC, rowid DESC
                LIMIT 1
                """,
                (user_id, status.value),
            )
            row = cursor.fetchone()
            if row:
                return self._row_to_goal(row)
            return None
        finally:
            conn.close()

    @_wrap_errors
    def find_goals(self, user_id: str, include_check_ins: bool = True) -> list[JournalGoal]:
        """Get all of a user's goals, newest first.

        Args:
            user_id: Owning user.
            include_check_ins: Whether to attach each goal's check-ins.

        Returns:
            List of goals.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT id, user_id, text, target, due, status, progress, created_at
                FROM journal_goals
                WHERE user_id = ?
                ORDER BY created_at DESC, rowid DESC
                """,
                (user_id,),
            )
            rows = cursor.fetchall()

            check_ins: dict[str, list[JournalCheckIn]] = {}
            if include_check_ins and rows:
                cursor.execute(
                    """
                    SELECT id, user_id, goal_id, note, score, created_at
                    FROM journal_checkins
                    WHERE user_id = ?
                    ORDER BY created_at
                    """,
                    (user_id,),
                )
                for ci in cursor.fetchall():
                    check_ins.setdefault(ci["goal_id"], []).append(self._row_to_checkin(ci))

            return [self._row_to_goal(row, check_ins.get(row["id"])) for row in rows]
        finally:
            conn.close()

    @_wrap_errors
    def update_goal_progress(
        self, goal_id: str, progress: int, status: GoalStatus
    ) -> None:
        """Update a goal's progress and status.

        Args:
            goal_id: Goal ID.
            progress: New progress percentage.
            status: New status.
        """
        conn = self._get_connection()
        try:
            conn.execute(
                "UPDATE journal_goals SET progress = ?, status = ? WHERE id = ?",
                (progress, status.value, goal_id),
            )
            conn.commit()
        finally:
            conn.close()

    @_wrap_errors
    def get_goal(self, goal_id: str) -> Optional[JournalGoal]:
        """Get a goal by ID (without check-ins)."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT id, user_id, text, target, due, status, progress, created_at
                FROM journal_goals
                WHERE id = ?
                """,
                (goal_id,),
            )
            row = cursor.fetchone()
            return self._row_to_goal(row) if row else None
        finally:
            conn.close()

    @_wrap_errors
    def delete_goal(self, goal_id: str) -> None:
        """Delete a goal and, by cascade, its check-ins.

        Args:
            goal_id: ID of the goal to delete.
        """
        conn = self._get_connection()
        try:
            conn.execute("DELETE FROM journal_goals WHERE id = ?", (goal_id,))
            conn.commit()
        finally:
            conn.close()

    # ==================== Check-ins ====================

    @staticmethod
    def _row_to_checkin(row: sqlite3.Row) -> JournalCheckIn:
        return JournalCheckIn(
            id=row["id"],
            user_id=row["user_id"],
            goal_id=row["goal_id"],
            note=row["note"],
            score=row["score"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    @_wrap_errors
    def create_checkin(self, check_in: JournalCheckIn) -> JournalCheckIn:
        """Save a check-in against an existing goal.

        Args:
            check_in: Check-in to save.

        Returns:
            The saved check-in.
        """
        conn = self._get_connection()
        try:
            conn.execute(
                """
                INSERT INTO journal_checkins (id, user_id, goal_id, note, score, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    check_in.id,
                    check_in.user_id,
                    check_in.goal_id,
                    check_in.note,
                    check_in.score,
                    _ts(check_in.created_at),
                ),
            )
            conn.commit()
            return check_in
        finally:
            conn.close()

    @_wrap_errors
    def find_checkins(self, goal_id: str) -> list[JournalCheckIn]:
        """Get all check-ins for a goal, oldest first."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT id, user_id, goal_id, note, score, created_at
                FROM journal_checkins
                WHERE goal_id = ?
                ORDER BY created_at
                """,
                (goal_id,),
            )
            return [self._row_to_checkin(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Prompts ====================

    @staticmethod
    def _row_to_prompt(row: sqlite3.Row) -> AgentPrompt:
        return AgentPrompt(
            id=row["id"],
            name=row["name"],
            title=row["title"],
            category=row["category"],
            content=row["content"],
            is_active=bool(row["is_active"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    @_wrap_errors
    def save_prompt(self, prompt: AgentPrompt) -> AgentPrompt:
        """Insert or replace a prompt by name.

        Args:
            prompt: Prompt to save.

        Returns:
            The saved prompt.
        """
        conn = self._get_connection()
        try:
            conn.execute(
                """
                INSERT INTO agent_prompts (id, name, title, category, content, is_active, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(name) DO UPDATE SET
                    title = excluded.title,
                    category = excluded.category,
                    content = excluded.content,
                    is_active = excluded.is_active,
                    updated_at = excluded.updated_at
                """,
                (
                    prompt.id,
                    prompt.name,
                    prompt.title,
                    prompt.category,
                    prompt.content,
                    1 if prompt.is_active else 0,
                    _ts(prompt.updated_at),
                ),
            )
            conn.commit()
        finally:
            conn.close()
        return self.get_prompt(prompt.name) or prompt

    @_wrap_errors
    def get_prompt(self, name: str) -> Optional[AgentPrompt]:
        """Get a prompt by name."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT id, name, title, category, content, is_active, updated_at
                FROM agent_prompts
                WHERE name = ?
                """,
                (name,),
            )
            row = cursor.fetchone()
            return self._row_to_prompt(row) if row else None
        finally:
            conn.close()

    @_wrap_errors
    def get_prompts(self) -> list[AgentPrompt]:
        """Get all prompts ordered by category and name."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT id, name, title, category, content, is_active, updated_at
                FROM agent_prompts
                ORDER BY category, name
                """
            )
            return [self._row_to_prompt(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    @_wrap_errors
    def set_prompt_active(self, name: str, is_active: bool) -> None:
        """Set the active flag of a prompt."""
        conn = self._get_connection()
        try:
            conn.execute(
                "UPDATE agent_prompts SET is_active = ?, updated_at = ? WHERE name = ?",
                (1 if is_active else 0, _ts(datetime.now()), name),
            )
            conn.commit()
        finally:
            conn.close()

    # ==================== Stats ====================

    @_wrap_errors
    def get_stats(self) -> dict:
        """Get database statistics.

        Returns:
            Dictionary with table record counts.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            stats = {}
            for table in self.REQUIRED_TABLES:
                cursor.execute(f"SELECT COUNT(*) as count FROM {table}")
                stats[table] = cursor.fetchone()["count"]
            return stats
        finally:
            conn.close()
