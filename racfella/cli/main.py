"""Main CLI entry point for Racfella.

This module provides the main click group and lazy loading
for heavy imports to improve startup time.
"""

import importlib

import click

from racfella.cli.common import setup_logging


class LazyGroup(click.Group):
    """A click Group that lazily loads commands.

    Command modules are only imported when the command is invoked, so
    `racfella --help` does not pay for the agents SDK import.
    """

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        """Initialize the lazy group.

        Args:
            lazy_subcommands: Mapping of command names to module paths.
        """
        super().__init__(*args, **kwargs)
        self._lazy_subcommands = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """List all available commands."""
        base = super().list_commands(ctx)
        lazy = list(self._lazy_subcommands.keys())
        return sorted(set(base + lazy))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, lazily loading if needed."""
        if cmd_name in self.commands:
            return self.commands[cmd_name]

        if cmd_name in self._lazy_subcommands:
            return self._lazy_load(cmd_name)

        return None

    def _lazy_load(self, cmd_name: str) -> click.Command:
        """Lazily load a command from its module path."""
        module_path = self._lazy_subcommands[cmd_name]
        module = importlib.import_module(module_path)

        attr = getattr(module, cmd_name, None)
        if not isinstance(attr, click.Command):
            raise click.ClickException(f"Could not find command '{cmd_name}' in {module_path}")

        self.add_command(attr)
        return attr


LAZY_SUBCOMMANDS = {
    "chat": "racfella.cli.chat",
    "entries": "racfella.cli.journal",
    "goals": "racfella.cli.journal",
    "summary": "racfella.cli.journal",
    "prompts": "racfella.cli.prompts",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="racfella")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Racfella - trading psychology assistant and trading journal.

    \b
    Quick Start:
      racfella chat "Log my day: feeling calm, tags: patience"
      racfella chat "My goal is to cut revenge trades, due end of month"
      racfella goals            # View goals and progress
      racfella entries          # View recent journal entries
    """
    ctx.ensure_object(dict)
    setup_logging(verbose)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
