"""Explicit state objects handed to every server component.

:class:`ServerContext` is built once at startup and holds everything that is
process-wide and read-only after sealing. :class:`SessionState` is per
connection. :class:`RequestContext` is what a handler sees for one call.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from mcpserve.protocol.models import (
    ClientCapabilities,
    ContentBlock,
    Implementation,
    PromptMessage,
    ServerCapabilities,
)
from mcpserve.server.catalog import CapabilityCatalog
from mcpserve.server.resources import ResourceResolver
from mcpserve.server.schema import SchemaRegistry

if TYPE_CHECKING:
    from mcpserve.config import ServerSettings
    from mcpserve.protocol.models import RequestId
    from mcpserve.server.reverse import ReverseChannel

ToolHandler = Callable[[Any, "RequestContext"], Awaitable[list[ContentBlock]]]
PromptHandler = Callable[[Any, "RequestContext"], Awaitable[list[PromptMessage]]]


@dataclass
class ServerContext:
    """Registries, capabilities, and settings for one server process."""

    settings: ServerSettings
    capabilities: ServerCapabilities
    schemas: SchemaRegistry
    catalog: CapabilityCatalog
    resolver: ResourceResolver
    tool_handlers: dict[str, ToolHandler] = field(default_factory=dict)
    prompt_handlers: dict[str, PromptHandler] = field(default_factory=dict)

    @classmethod
    def create(cls, settings: ServerSettings) -> ServerContext:
        """Build an empty, unsealed context from *settings*."""
        schemas = SchemaRegistry()
        catalog = CapabilityCatalog(schemas)
        return cls(
            settings=settings,
            capabilities=settings.capabilities.to_protocol(),
            schemas=schemas,
            catalog=catalog,
            resolver=ResourceResolver(catalog, schemas),
        )

    @property
    def server_info(self) -> Implementation:
        return Implementation(name=self.settings.name, version=self.settings.version)

    def seal(self) -> None:
        self.catalog.seal()


@dataclass
class SessionState:
    """What the server learned about the client during ``initialize``."""

    protocol_version: str | None = None
    client_info: Implementation | None = None
    client_capabilities: ClientCapabilities | None = None
    initialized: bool = False


@dataclass
class RequestContext:
    """Per-call view passed to tool and prompt handlers."""

    server: ServerContext
    session: SessionState
    reverse: ReverseChannel | None = None
    request_id: RequestId | None = None

    @property
    def settings(self) -> ServerSettings:
        return self.server.settings

    def require_reverse(self) -> ReverseChannel:
        if self.reverse is None:
            msg = "No client connection available for server-to-client requests"
            raise RuntimeError(msg)
        return self.reverse
