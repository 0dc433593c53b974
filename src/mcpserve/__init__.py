"""mcpserve — a Model Context Protocol server with an explicit request dispatcher."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from mcpserve.app import build_server as build_server
    from mcpserve.server.context import ServerContext as ServerContext

_LAZY_EXPORTS = {
    "build_server": "mcpserve.app",
    "ServerContext": "mcpserve.server.context",
}


def __getattr__(name: str) -> object:
    module_path = _LAZY_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'mcpserve' has no attribute {name!r}")
