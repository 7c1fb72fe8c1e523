"""Shared fixtures for Racfella tests."""

import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional

import pytest

from racfella.config import JournalSettings
from racfella.db.store import JournalStore
from racfella.journal.engine import JournalActionEngine

FIXED_NOW = datetime(2024, 3, 10, 12, 0, 0)


class FakeProvider:
    """Completion provider that records prompts and returns a canned reply."""

    def __init__(self, response: str = '{"intent": "NONE"}', error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.prompts: list[str] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def temp_store():
    """Create a temporary journal store for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield JournalStore(Path(tmpdir) / "test.db")


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider(response="Solid month. Keep journaling.")


@pytest.fixture
def engine(temp_store: JournalStore, provider: FakeProvider) -> JournalActionEngine:
    """Engine over a temporary store with a fixed clock."""
    return JournalActionEngine(
        store=temp_store,
        provider=provider,
        settings=JournalSettings(db_path=temp_store.db_path),
        now=lambda: FIXED_NOW,
    )
