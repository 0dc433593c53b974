"""``mcpserve catalog`` — print what the server advertises."""

from __future__ import annotations

import click

from mcpserve.cli_commands._output import (
    load_settings,
    print_json,
    print_prompts_table,
    print_resources_table,
    print_tools_table,
)


@click.command()
@click.argument("section", type=click.Choice(["tools", "prompts", "resources", "templates"]))
@click.option("--config", "-c", type=click.Path(exists=True), default=None, help="Settings YAML file.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def catalog(section: str, config: str | None, as_json: bool) -> None:
    """Print the discovery listing for SECTION."""
    from mcpserve.app import build_server

    registered = build_server(load_settings(config)).catalog

    if section == "tools":
        entries = registered.list_tools()
    elif section == "prompts":
        entries = registered.list_prompts()
    elif section == "resources":
        entries = registered.list_resources()
    else:
        entries = registered.list_resource_templates()

    if as_json:
        print_json(entries)
    elif section == "tools":
        print_tools_table(entries)
    elif section == "prompts":
        print_prompts_table(entries)
    elif section == "resources":
        print_resources_table(entries, title="Resources", uri_key="uri")
    else:
        print_resources_table(entries, title="Resource Templates", uri_key="uriTemplate")
