"""Server core — registries, resolution, dispatch, and the session loop."""

from mcpserve.server.catalog import (
    CapabilityCatalog,
    PromptDefinition,
    ResourceTemplate,
    StaticResource,
    ToolDefinition,
)
from mcpserve.server.context import RequestContext, ServerContext, SessionState
from mcpserve.server.dispatcher import RequestCategory, RequestDispatcher
from mcpserve.server.notifications import NotificationSink
from mcpserve.server.registrar import Registrar
from mcpserve.server.resources import ResourceResolver, UriPattern
from mcpserve.server.reverse import ReverseChannel
from mcpserve.server.schema import ArgumentShape, SchemaKind, SchemaRegistry
from mcpserve.server.session import ServerSession

__all__ = [
    "ArgumentShape",
    "CapabilityCatalog",
    "NotificationSink",
    "PromptDefinition",
    "Registrar",
    "RequestCategory",
    "RequestContext",
    "RequestDispatcher",
    "ResourceResolver",
    "ResourceTemplate",
    "ReverseChannel",
    "SchemaKind",
    "SchemaRegistry",
    "ServerContext",
    "ServerSession",
    "SessionState",
    "StaticResource",
    "ToolDefinition",
    "UriPattern",
]
