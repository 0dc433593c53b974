"""Built-in tools, prompts, and resources."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcpserve.builtins.prompts import register_prompts
from mcpserve.builtins.resources import register_resources
from mcpserve.builtins.tools import register_tools

if TYPE_CHECKING:
    from mcpserve.config import ServerSettings
    from mcpserve.server.registrar import Registrar


def register_builtins(registrar: Registrar, settings: ServerSettings) -> None:
    """Register every built-in definition, tools first."""
    register_tools(registrar)
    register_prompts(registrar)
    register_resources(registrar, settings)
