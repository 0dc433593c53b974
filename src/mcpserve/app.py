"""Server assembly — settings in, sealed :class:`ServerContext` out."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcpserve.builtins import register_builtins
from mcpserve.config import ServerSettings
from mcpserve.protocol.transport import StdioTransport
from mcpserve.server.context import ServerContext
from mcpserve.server.registrar import Registrar
from mcpserve.server.session import ServerSession

if TYPE_CHECKING:
    from mcpserve.protocol.transport import Transport


def build_server(settings: ServerSettings | None = None) -> ServerContext:
    """Create the context, register the built-ins, and seal the registries."""
    settings = settings or ServerSettings()
    context = ServerContext.create(settings)
    register_builtins(Registrar(context), settings)
    context.seal()
    return context


async def serve(context: ServerContext, transport: Transport | None = None) -> None:
    """Serve one session over *transport* (stdio by default) until input ends."""
    session = ServerSession(context, transport or StdioTransport())
    await session.run()
