"""Error types for the protocol layer.

Every error a request can end in derives from :class:`McpServeError` and
renders itself onto the single :class:`~mcpserve.protocol.models.JsonRpcError`
shape via :meth:`McpServeError.to_error`.
"""

from __future__ import annotations

from typing import Any

from mcpserve.protocol.models import JsonRpcError

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
UPSTREAM_ERROR = -32001
RESOURCE_NOT_FOUND = -32002
CLIENT_CAPABILITY_MISSING = -32003
REVERSE_CHANNEL_FAILED = -32004


class McpServeError(Exception):
    """Base error for all request-level failures."""

    code: int = INTERNAL_ERROR

    def data(self) -> dict[str, Any] | None:
        """Structured detail attached to the error response."""
        return None

    def to_error(self) -> JsonRpcError:
        return JsonRpcError(code=self.code, message=str(self), data=self.data())


class ParseError(McpServeError):
    """An inbound line was not valid JSON."""

    code = PARSE_ERROR


class InvalidRequestError(McpServeError):
    """An inbound message was JSON but not a valid JSON-RPC envelope."""

    code = INVALID_REQUEST


class UnknownRequestError(McpServeError):
    """The request method is not one the server handles."""

    code = METHOD_NOT_FOUND

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Unknown request: {method}")

    def data(self) -> dict[str, Any]:
        return {"method": self.method}


class ValidationError(McpServeError):
    """Arguments did not match the declared shape."""

    code = INVALID_PARAMS

    def __init__(self, kind: str, name: str, errors: list[dict[str, str]]) -> None:
        self.kind = kind
        self.name = name
        self.errors = errors
        fields = ", ".join(e["field"] or "<root>" for e in errors)
        super().__init__(f"Invalid arguments for {kind} {name}: {fields}")

    def data(self) -> dict[str, Any]:
        return {"kind": self.kind, "name": self.name, "errors": self.errors}


class UnknownToolError(McpServeError):
    """No tool is registered under the requested name."""

    code = INVALID_PARAMS

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")

    def data(self) -> dict[str, Any]:
        return {"name": self.name}


class UnknownPromptError(McpServeError):
    """No prompt is registered under the requested name."""

    code = INVALID_PARAMS

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown prompt: {name}")

    def data(self) -> dict[str, Any]:
        return {"name": self.name}


class UnknownResourceError(McpServeError):
    """The URI matches neither a static resource nor a resource template."""

    code = RESOURCE_NOT_FOUND

    def __init__(self, uri: str) -> None:
        self.uri = uri
        super().__init__(f"Unknown resource: {uri}")

    def data(self) -> dict[str, Any]:
        return {"uri": self.uri}


class InvalidUpstreamResponseError(McpServeError):
    """An external API answered with a payload the tool cannot use."""

    code = UPSTREAM_ERROR

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid upstream response: {detail}")

    def data(self) -> dict[str, Any]:
        return {"detail": self.detail}


class ClientCapabilityError(McpServeError):
    """The client did not declare the capability a reverse request needs."""

    code = CLIENT_CAPABILITY_MISSING

    def __init__(self, capability: str) -> None:
        self.capability = capability
        super().__init__(f"Client does not support {capability}")

    def data(self) -> dict[str, Any]:
        return {"capability": self.capability}


class ReverseChannelError(McpServeError):
    """A server-to-client request failed or was abandoned."""

    code = REVERSE_CHANNEL_FAILED

    def __init__(self, method: str, message: str, remote_code: int | None = None) -> None:
        self.method = method
        self.remote_code = remote_code
        super().__init__(f"{method} failed: {message}")

    def data(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"method": self.method}
        if self.remote_code is not None:
            payload["code"] = self.remote_code
        return payload


class RegistrationError(Exception):
    """A definition could not be registered (duplicate, overlap, or sealed registry)."""


def error_from_exception(exc: BaseException) -> JsonRpcError:
    """Map any exception onto the fixed error-response schema."""
    if isinstance(exc, McpServeError):
        return exc.to_error()
    return JsonRpcError(
        code=INTERNAL_ERROR,
        message=str(exc) or exc.__class__.__name__,
        data={"type": exc.__class__.__name__},
    )
