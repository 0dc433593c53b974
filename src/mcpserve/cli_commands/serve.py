"""``mcpserve serve`` — run the stdio server."""

from __future__ import annotations

import asyncio
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from mcpserve.cli_commands._output import load_settings

_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@click.command()
@click.option("--config", "-c", type=click.Path(exists=True), default=None, help="Settings YAML file.")
@click.option(
    "--log-level",
    type=click.Choice(_LEVELS, case_sensitive=False),
    default=None,
    help="Override the configured log level.",
)
@click.option("--telemetry", is_flag=True, help="Enable telemetry.")
def serve(config: str | None, log_level: str | None, telemetry: bool) -> None:
    """Serve MCP over stdin/stdout until end of input."""
    from mcpserve.app import build_server
    from mcpserve.app import serve as serve_session

    settings = load_settings(config)
    if log_level is not None:
        settings.log_level = log_level.upper()  # type: ignore[assignment]
    if telemetry:
        settings.telemetry.enabled = True

    configure_logging(settings.log_level)

    if settings.telemetry.enabled:
        from mcpserve.utils.telemetry import configure_telemetry

        configure_telemetry(service_name=settings.name, otlp_endpoint=settings.telemetry.otlp_endpoint)

    context = build_server(settings)
    logging.getLogger(__name__).info("Serving %s %s on stdio", settings.name, settings.version)
    asyncio.run(serve_session(context))


def configure_logging(level: str) -> None:
    """Route log records to stderr; stdout carries protocol traffic."""
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)
