"""Journal commands for Racfella CLI.

Direct access to entries, goals and summaries without going through
intent classification.
"""

import asyncio
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from racfella.cli.common import (
    console,
    get_engine,
    get_settings,
    parse_bound,
    print_result_panel,
    require_api_key,
)
from racfella.models import EntryFilters, GoalStatus, JournalAction, JournalSlots

STATUS_STYLES = {
    GoalStatus.ACTIVE: "green",
    GoalStatus.COMPLETED: "cyan",
    GoalStatus.ABANDONED: "dim",
}


@click.command()
@click.option("--user", "-u", "user_id", default="local", show_default=True, help="User ID")
@click.option("--from", "from_", default=None, help="Start date (YYYY-MM-DD)")
@click.option("--to", default=None, help="End date (YYYY-MM-DD, inclusive)")
@click.option("--tag", default=None, help="Only entries with this tag")
def entries(user_id: str, from_: Optional[str], to: Optional[str], tag: Optional[str]) -> None:
    """Show recent journal entries.

    \b
    Examples:
      racfella entries
      racfella entries --tag fomo
      racfella entries --from 2024-01-15 --to 2024-02-15
    """
    settings = get_settings()
    engine = get_engine(settings)
    slots = JournalSlots(filters=EntryFilters(
        from_date=parse_bound(from_),
        to_date=parse_bound(to, end_of_day=True),
        tag=tag,
    ))
    result = asyncio.run(engine.run_action(JournalAction.GET_ENTRIES, slots, user_id))

    if not result.ok:
        print_result_panel(result.response, "Error", ok=False)
        raise SystemExit(1)
    if not result.data:
        console.print(Panel(
            "[dim]No journal entries found[/dim]",
            title="[bold]Trading Journal[/bold]",
            border_style="dim",
        ))
        return

    table = Table(title="Trading Journal", show_header=True, header_style="bold cyan")
    table.add_column("Date/Time", style="dim")
    table.add_column("Market", style="bold")
    table.add_column("Emotions")
    table.add_column("Mistakes", style="red")
    table.add_column("Lessons", style="green")
    table.add_column("Trades", justify="right")
    table.add_column("Tags", style="magenta")

    for entry in result.data:
        table.add_row(
            entry.date.strftime("%Y-%m-%d %H:%M"),
            entry.market or "-",
            entry.emotions or "-",
            entry.mistakes or "-",
            entry.lessons or "-",
            str(len(entry.trades)),
            ", ".join(entry.tags) or "-",
        )

    console.print(table)


@click.command()
@click.option("--user", "-u", "user_id", default="local", show_default=True, help="User ID")
def goals(user_id: str) -> None:
    """Show goals with progress and check-ins."""
    settings = get_settings()
    engine = get_engine(settings)
    result = asyncio.run(engine.run_action(JournalAction.GET_GOALS, JournalSlots(), user_id))

    if not result.ok:
        print_result_panel(result.response, "Error", ok=False)
        raise SystemExit(1)
    if not result.data:
        console.print(Panel(
            f"[dim]{result.response}[/dim]",
            title="[bold]Goals[/bold]",
            border_style="dim",
        ))
        return

    table = Table(title="Goals", show_header=True, header_style="bold cyan")
    table.add_column("Goal", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Progress", justify="right")
    table.add_column("Target")
    table.add_column("Due", style="dim")
    table.add_column("Check-ins", justify="right")

    for goal in result.data:
        style = STATUS_STYLES[goal.status]
        table.add_row(
            goal.text,
            f"[{style}]{goal.status.value}[/{style}]",
            f"{goal.progress}%",
            goal.target or "-",
            goal.due.isoformat() if goal.due else "-",
            str(len(goal.check_ins)),
        )

    console.print(table)


@click.command()
@click.option("--user", "-u", "user_id", default="local", show_default=True, help="User ID")
@click.option("--from", "from_", default=None, help="Start date (YYYY-MM-DD)")
@click.option("--to", default=None, help="End date (YYYY-MM-DD, inclusive)")
def summary(user_id: str, from_: Optional[str], to: Optional[str]) -> None:
    """Generate an AI summary of your journal (last 30 days by default)."""
    settings = get_settings()
    require_api_key()
    engine = get_engine(settings)
    slots = JournalSlots(filters=EntryFilters(
        from_date=parse_bound(from_),
        to_date=parse_bound(to, end_of_day=True),
    ))

    console.print("[dim]Generating summary...[/dim]\n")
    result = asyncio.run(engine.run_action(JournalAction.SUMMARY, slots, user_id))
    print_result_panel(result.response, "Journal Summary", ok=result.ok)
    if not result.ok:
        raise SystemExit(1)
