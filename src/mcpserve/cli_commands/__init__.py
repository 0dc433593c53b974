"""CLI subcommand registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all subcommands on the CLI group."""
    from mcpserve.cli_commands.call import call
    from mcpserve.cli_commands.catalog import catalog
    from mcpserve.cli_commands.serve import serve

    cli.add_command(serve)
    cli.add_command(catalog)
    cli.add_command(call)
