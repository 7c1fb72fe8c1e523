"""Configuration loading for Racfella.

Settings live in ``~/.config/racfella/config.toml``::

    [journal]
    min_confidence = 0.6
    entry_limit = 10
    summary_window_days = 30
    prompt_cache_ttl = 30

    [openai]
    api_key = "sk-..."
    utility_model = "gpt-4o-mini"
    advanced_model = "gpt-4o"
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "racfella"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.toml"
DEFAULT_DB_PATH = CONFIG_DIR / "racfella.db"

# Router confidence gate
DEFAULT_MIN_CONFIDENCE = 0.6


class JournalSettings(BaseModel):
    """Tunable settings for routing and journal actions."""

    db_path: Path = Field(default=DEFAULT_DB_PATH, description="SQLite database path")
    min_confidence: float = Field(
        default=DEFAULT_MIN_CONFIDENCE, ge=0, le=1, description="Router confidence gate"
    )
    entry_limit: int = Field(default=10, gt=0, description="Max entries per listing")
    summary_window_days: int = Field(default=30, gt=0, description="Default summary window")
    prompt_cache_ttl: float = Field(default=30.0, ge=0, description="Prompt cache TTL in seconds")
    utility_model: Optional[str] = Field(default=None, description="Model for classification")
    advanced_model: Optional[str] = Field(default=None, description="Model for summaries")
    api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    provider_timeout: Optional[float] = Field(
        default=None, gt=0, description="Seconds before a completion call is abandoned"
    )

    model_config = {"frozen": True}


def _read_config_file(path: Path) -> Optional[dict[str, Any]]:
    """Read the toml config file, returning None if missing or unreadable."""
    import toml

    if not path.exists():
        return None

    try:
        return toml.load(path)
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning("Could not read config %s: %s", path, e)
        return None


def load_settings(path: Optional[Path] = None) -> JournalSettings:
    """Load settings from the config file and environment.

    Args:
        path: Optional config file path. Uses the default location if not given.

    Returns:
        JournalSettings with defaults for anything not configured.
    """
    config = _read_config_file(path or DEFAULT_CONFIG_PATH) or {}
    journal = config.get("journal", {})
    openai = config.get("openai", {})

    values: dict[str, Any] = {
        key: journal[key]
        for key in (
            "db_path",
            "min_confidence",
            "entry_limit",
            "summary_window_days",
            "prompt_cache_ttl",
            "provider_timeout",
        )
        if key in journal
    }
    for key in ("utility_model", "advanced_model", "api_key"):
        if openai.get(key):
            values[key] = openai[key]

    env_key = os.environ.get("OPENAI_API_KEY")
    if env_key:
        values["api_key"] = env_key

    try:
        return JournalSettings(**values)
    except ValidationError as e:
        logger.warning("Invalid journal settings, using defaults: %s", e)
        return JournalSettings()
