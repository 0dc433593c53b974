"""mcpserve CLI entrypoint."""

from __future__ import annotations

import click

from mcpserve import __version__


@click.group()
@click.version_option(version=__version__, prog_name="mcpserve")
def main() -> None:
    """mcpserve — a Model Context Protocol server."""


# Register subcommands
from mcpserve.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
