"""Shared helpers for Racfella CLI commands."""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.panel import Panel

from racfella.config import JournalSettings, load_settings

console = Console()


def setup_logging(verbose: bool) -> None:
    """Route library logging through rich."""
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


def get_settings() -> JournalSettings:
    """Load settings and export the API key for the agents SDK."""
    settings = load_settings()
    if settings.api_key:
        os.environ.setdefault("OPENAI_API_KEY", settings.api_key)
    return settings


def require_api_key() -> None:
    """Exit with a helpful panel if no OpenAI key is configured."""
    from racfella.agents.base import get_api_key

    if get_api_key():
        return
    console.print(Panel(
        "[red]OpenAI API key not configured.[/red]\n\n"
        "Set [cyan]OPENAI_API_KEY[/cyan] or add it under [cyan][openai][/cyan] in:\n"
        "[cyan]~/.config/racfella/config.toml[/cyan]",
        title="[bold red]Configuration Error[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)


def get_store(settings: JournalSettings):
    """Get the journal store."""
    from racfella.db.store import JournalStore

    return JournalStore(settings.db_path)


def get_prompt_service(settings: JournalSettings, store=None):
    """Get the prompt service backed by the journal store."""
    from racfella.prompts import PromptService

    return PromptService(store or get_store(settings), ttl_seconds=settings.prompt_cache_ttl)


def get_engine(settings: JournalSettings, store=None, prompts=None):
    """Build a JournalActionEngine with the advisor provider."""
    from racfella.agents.base import create_advisor_provider
    from racfella.journal.engine import JournalActionEngine

    store = store or get_store(settings)
    return JournalActionEngine(
        store=store,
        provider=create_advisor_provider(settings.advanced_model, settings.provider_timeout),
        settings=settings,
        prompts=prompts or get_prompt_service(settings, store),
    )


def get_assistant(settings: JournalSettings):
    """Build the full routing + action pipeline."""
    from racfella.agents.base import create_utility_provider
    from racfella.journal.assistant import JournalAssistant
    from racfella.journal.classifier import IntentClassifier
    from racfella.journal.router import MessageRouter

    store = get_store(settings)
    prompts = get_prompt_service(settings, store)
    classifier = IntentClassifier(
        create_utility_provider(settings.utility_model, settings.provider_timeout),
        prompts=prompts,
    )
    router = MessageRouter(classifier, min_confidence=settings.min_confidence)
    return JournalAssistant(router, get_engine(settings, store, prompts))


def print_result_panel(text: str, title: str, ok: bool = True) -> None:
    """Print an action response in a panel."""
    style = "cyan" if ok else "red"
    console.print(Panel(
        text,
        title=f"[bold {style}]{title}[/bold {style}]",
        border_style=style,
    ))


def parse_bound(value: Optional[str], end_of_day: bool = False):
    """Parse a --from/--to option, exiting on bad input."""
    import click

    from racfella.journal.dates import parse_date_bound

    if value is None:
        return None
    parsed = parse_date_bound(value, end_of_day=end_of_day)
    if parsed is None:
        raise click.BadParameter(f"Invalid date: {value} (expected YYYY-MM-DD)")
    return parsed
