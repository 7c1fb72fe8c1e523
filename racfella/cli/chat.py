"""Chat command for Racfella CLI.

Routes a free-text message through crisis detection, the journal keyword
gate and intent classification, then runs the resolved journal action.
"""

import asyncio

import click
from rich.markdown import Markdown
from rich.panel import Panel

from racfella.cli.common import console, get_assistant, get_prompt_service, get_settings, require_api_key


@click.command()
@click.argument("message")
@click.option("--user", "-u", "user_id", default="local", show_default=True, help="User ID")
def chat(message: str, user_id: str) -> None:
    """Send a message to the assistant.

    MESSAGE is free text. Journal-shaped messages are classified and run
    as journal actions; everything else is handed back untouched.

    \b
    Examples:
      racfella chat "Log my day: feeling calm. Mistake: sized too big. tags: sizing"
      racfella chat "My goal is to improve win rate to 70%, due 2025-12-31"
      racfella chat "Check-in: 40% there, score: 7"
      racfella chat "Weekly review please"
    """
    from racfella.models import Route
    from racfella.prompts import CRISIS_SUPPORT_PROMPT, GENERAL_RESPONSE_PROMPT

    settings = get_settings()
    require_api_key()
    assistant = get_assistant(settings)

    reply = asyncio.run(assistant.handle(user_id, message))

    if reply.route is Route.CRISIS:
        text = get_prompt_service(settings).get_prompt(CRISIS_SUPPORT_PROMPT)
        console.print(Panel(
            text,
            title="[bold red]💙 You are not alone[/bold red]",
            border_style="red",
        ))
        return

    if reply.route is Route.NONJOURNAL or reply.result is None:
        text = get_prompt_service(settings).get_prompt(GENERAL_RESPONSE_PROMPT)
        console.print(Panel(
            text,
            title="[bold]Racfella[/bold]",
            border_style="dim",
        ))
        return

    result = reply.result
    classification = reply.classification
    if classification is not None:
        console.print(
            f"[dim]Action: {result.action.value} "
            f"(confidence {classification.confidence:.2f})[/dim]\n"
        )
    console.print(Panel(
        Markdown(result.response),
        title="[bold cyan]Journal[/bold cyan]" if result.ok else "[bold red]Journal[/bold red]",
        border_style="cyan" if result.ok else "red",
    ))
