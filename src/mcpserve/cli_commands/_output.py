"""Shared CLI output formatters and settings loading."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from mcpserve.config import ConfigError, ServerSettings, SettingsLoader

console = Console()


def load_settings(config: str | None) -> ServerSettings:
    """Load settings for a command, exiting with status 1 on a bad file."""
    try:
        return SettingsLoader(Path(config) if config else None).load()
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {escape(str(exc))}")
        sys.exit(1)


def print_json(data: Any) -> None:
    console.print_json(json.dumps(data, ensure_ascii=False))


def print_tools_table(tools: list[dict[str, Any]]) -> None:
    """Pretty-print tool entries with their argument names."""
    table = Table(title="Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Arguments")

    for tool in tools:
        schema = tool.get("inputSchema", {})
        required = set(schema.get("required", []))
        args = [
            name if name in required else f"{name}?"
            for name in schema.get("properties", {})
        ]
        table.add_row(tool["name"], _truncate(tool.get("description", "")), ", ".join(args) or "-")

    console.print(table)


def print_prompts_table(prompts: list[dict[str, Any]]) -> None:
    table = Table(title="Prompts")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Arguments")

    for prompt in prompts:
        args = [
            arg["name"] if arg.get("required") else f"{arg['name']}?"
            for arg in prompt.get("arguments", [])
        ]
        table.add_row(prompt["name"], _truncate(prompt.get("description", "")), ", ".join(args) or "-")

    console.print(table)


def print_resources_table(resources: list[dict[str, Any]], *, title: str, uri_key: str) -> None:
    """Pretty-print static resources or templates; *uri_key* picks the URI column."""
    table = Table(title=title)
    table.add_column("URI", style="cyan")
    table.add_column("Name")
    table.add_column("MIME type")
    table.add_column("Description")

    for res in resources:
        table.add_row(
            res[uri_key],
            res["name"],
            res.get("mimeType", "-"),
            _truncate(res.get("description", "")),
        )

    console.print(table)


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
