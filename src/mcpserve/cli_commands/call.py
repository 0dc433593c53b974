"""``mcpserve call`` — invoke a tool locally through the dispatcher."""

from __future__ import annotations

import asyncio
import sys
from typing import Any

import click
from rich.markup import escape

from mcpserve.cli_commands._output import console, load_settings, print_json


@click.command()
@click.argument("tool")
@click.option("--arg", "-a", "args", multiple=True, metavar="KEY=VALUE", help="Tool argument.")
@click.option("--config", "-c", type=click.Path(exists=True), default=None, help="Settings YAML file.")
def call(tool: str, args: tuple[str, ...], config: str | None) -> None:
    """Call TOOL once and print its result.

    No client is attached, so tools that call back into the client fail.
    """
    from mcpserve.app import build_server
    from mcpserve.protocol.errors import error_from_exception
    from mcpserve.protocol.methods import Method
    from mcpserve.protocol.models import to_wire
    from mcpserve.server.context import SessionState
    from mcpserve.server.dispatcher import RequestDispatcher

    try:
        arguments = _parse_args(args)
    except click.BadParameter as exc:
        console.print(f"[red]Invalid argument:[/red] {escape(exc.message)}")
        sys.exit(2)

    dispatcher = RequestDispatcher(build_server(load_settings(config)), SessionState())
    params = {"name": tool, "arguments": arguments}

    try:
        result = asyncio.run(dispatcher.dispatch(Method.CALL_TOOL.value, params, request_id="cli-1"))
    except Exception as exc:
        print_json(to_wire(error_from_exception(exc)))
        sys.exit(1)

    print_json(result)


def _parse_args(pairs: tuple[str, ...]) -> dict[str, Any]:
    arguments: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            msg = f"Expected KEY=VALUE, got {pair!r}"
            raise click.BadParameter(msg, param_hint="--arg")
        arguments[key] = value
    return arguments
