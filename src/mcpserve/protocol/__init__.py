"""Protocol layer — JSON-RPC envelopes, MCP payloads, errors, and transports."""

from mcpserve.protocol.errors import (
    ClientCapabilityError,
    InvalidUpstreamResponseError,
    McpServeError,
    RegistrationError,
    ReverseChannelError,
    UnknownPromptError,
    UnknownRequestError,
    UnknownResourceError,
    UnknownToolError,
    ValidationError,
)
from mcpserve.protocol.methods import Method, Notification, ReverseMethod
from mcpserve.protocol.transport import StdioTransport, Transport

__all__ = [
    "ClientCapabilityError",
    "InvalidUpstreamResponseError",
    "McpServeError",
    "Method",
    "Notification",
    "RegistrationError",
    "ReverseChannelError",
    "ReverseMethod",
    "StdioTransport",
    "Transport",
    "UnknownPromptError",
    "UnknownRequestError",
    "UnknownResourceError",
    "UnknownToolError",
    "ValidationError",
]
