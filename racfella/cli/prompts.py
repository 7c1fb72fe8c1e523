"""Prompt management commands for Racfella CLI."""

from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from racfella.cli.common import console, get_prompt_service, get_settings


@click.group()
def prompts() -> None:
    """Manage editable prompt templates.

    Stored prompts override the built-in text for the same name
    (journal_intent, journal_summary, crisis_support, general_response).
    """


@prompts.command("list")
def list_prompts() -> None:
    """List stored prompts."""
    service = get_prompt_service(get_settings())
    stored = service.list_prompts()

    if not stored:
        console.print("[dim]No stored prompts. Built-in prompts are in use.[/dim]")
        return

    table = Table(title="Prompts", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="bold")
    table.add_column("Category")
    table.add_column("Active", justify="center")
    table.add_column("Updated", style="dim")

    for prompt in stored:
        active = "[green]yes[/green]" if prompt.is_active else "[red]no[/red]"
        table.add_row(
            prompt.name,
            prompt.category,
            active,
            prompt.updated_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)


@prompts.command("show")
@click.argument("name")
def show_prompt(name: str) -> None:
    """Show the effective text of a prompt."""
    service = get_prompt_service(get_settings())
    console.print(Panel(service.get_prompt(name), title=f"[bold]{name}[/bold]", border_style="cyan"))


@prompts.command("set")
@click.argument("name")
@click.argument("content")
@click.option("--title", default=None, help="Human-readable title")
@click.option("--category", default=None, help="Prompt category")
def set_prompt(name: str, content: str, title: Optional[str], category: Optional[str]) -> None:
    """Create or update prompt NAME with CONTENT."""
    service = get_prompt_service(get_settings())
    if service.store.get_prompt(name) is None:
        service.create_prompt(name, content, title=title or "", category=category or "general")
        console.print(f"[green]✓[/green] Created prompt [bold]{name}[/bold]")
    else:
        service.update_prompt(name, content=content, title=title, category=category)
        console.print(f"[green]✓[/green] Updated prompt [bold]{name}[/bold]")


@prompts.command("toggle")
@click.argument("name")
def toggle_prompt(name: str) -> None:
    """Enable or disable prompt NAME."""
    service = get_prompt_service(get_settings())
    try:
        prompt = service.toggle_prompt(name)
    except KeyError:
        console.print(f"[red]Prompt not found: {name}[/red]")
        raise SystemExit(1)

    state = "[green]active[/green]" if prompt.is_active else "[red]inactive[/red]"
    console.print(f"Prompt [bold]{name}[/bold] is now {state}")
