"""CLI commands for Racfella.

This package provides the command-line interface for Racfella,
including chat routing, journal listings, summaries, and prompt management.
"""

from racfella.cli.main import cli, main

__all__ = ["cli", "main"]
