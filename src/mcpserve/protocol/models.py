"""MCP models — JSON-RPC 2.0 envelopes and MCP payloads.

Field names are snake_case in Python and camelCase on the wire; dump with
:func:`to_wire` to get the protocol shape.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ProtocolModel(BaseModel):
    """Base for every wire model: accepts both field names and aliases."""

    model_config = ConfigDict(populate_by_name=True)


def to_wire(model: BaseModel) -> dict[str, Any]:
    """Dump a model using wire aliases and without unset optionals."""
    return model.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------

RequestId = int | str


class JsonRpcRequest(ProtocolModel):
    """A JSON-RPC 2.0 request message."""

    jsonrpc: Literal["2.0"] = "2.0"
    method: str
    id: RequestId
    params: dict[str, Any] = {}


class JsonRpcNotification(ProtocolModel):
    """A JSON-RPC 2.0 notification (no id, no response)."""

    jsonrpc: Literal["2.0"] = "2.0"
    method: str
    params: dict[str, Any] = {}


class JsonRpcError(ProtocolModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(ProtocolModel):
    """A JSON-RPC 2.0 response message."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: RequestId | None = None
    result: dict[str, Any] | None = None
    error: JsonRpcError | None = None

    def to_message(self) -> dict[str, Any]:
        """Wire form; ``id`` is kept even when null, exactly one of result/error."""
        message: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            message["error"] = to_wire(self.error)
        else:
            message["result"] = self.result if self.result is not None else {}
        return message


# ---------------------------------------------------------------------------
# Content blocks
# ---------------------------------------------------------------------------


class TextContent(ProtocolModel):
    """Plain text content block."""

    type: Literal["text"] = "text"
    text: str


class ImageContent(ProtocolModel):
    """Inline base64 image content block."""

    type: Literal["image"] = "image"
    data: str
    mime_type: str = Field(alias="mimeType")


ContentBlock = Annotated[TextContent | ImageContent, Field(discriminator="type")]


class TextResourceContents(ProtocolModel):
    """Text body of a resource read."""

    uri: str
    mime_type: str | None = Field(default=None, alias="mimeType")
    text: str


# ---------------------------------------------------------------------------
# Request params
# ---------------------------------------------------------------------------


class CallToolParams(ProtocolModel):
    name: str
    arguments: dict[str, Any] | None = None


class GetPromptParams(ProtocolModel):
    name: str
    arguments: dict[str, Any] | None = None


class ReadResourceParams(ProtocolModel):
    uri: str


class Implementation(ProtocolModel):
    """Name and version of a protocol peer."""

    name: str
    version: str


class ClientCapabilities(ProtocolModel):
    """Capabilities the client declares at ``initialize``."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    roots: dict[str, Any] | None = None
    sampling: dict[str, Any] | None = None
    experimental: dict[str, Any] | None = None


class InitializeParams(ProtocolModel):
    protocol_version: str = Field(alias="protocolVersion")
    capabilities: ClientCapabilities = Field(default_factory=ClientCapabilities)
    client_info: Implementation | None = Field(default=None, alias="clientInfo")


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class ServerCapabilities(ProtocolModel):
    """Capability categories the server declares; ``None`` means unsupported."""

    tools: dict[str, Any] | None = None
    prompts: dict[str, Any] | None = None
    resources: dict[str, Any] | None = None
    completions: dict[str, Any] | None = None


class InitializeResult(ProtocolModel):
    protocol_version: str = Field(alias="protocolVersion")
    capabilities: ServerCapabilities
    server_info: Implementation = Field(alias="serverInfo")
    instructions: str | None = None


class CallToolResult(ProtocolModel):
    content: list[ContentBlock] = []
    is_error: bool = Field(default=False, alias="isError")


class PromptMessage(ProtocolModel):
    role: Literal["user", "assistant"]
    content: ContentBlock


class GetPromptResult(ProtocolModel):
    description: str | None = None
    messages: list[PromptMessage] = []


class ReadResourceResult(ProtocolModel):
    contents: list[TextResourceContents] = []


# ---------------------------------------------------------------------------
# Discovery entries
# ---------------------------------------------------------------------------


class ToolEntry(ProtocolModel):
    """A tool as advertised by ``tools/list``."""

    name: str
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")


class PromptArgument(ProtocolModel):
    name: str
    description: str = ""
    required: bool = False


class PromptEntry(ProtocolModel):
    """A prompt as advertised by ``prompts/list``."""

    name: str
    description: str = ""
    arguments: list[PromptArgument] = []


class ResourceEntry(ProtocolModel):
    """A static resource as advertised by ``resources/list``."""

    uri: str
    name: str
    description: str = ""
    mime_type: str | None = Field(default=None, alias="mimeType")


class ResourceTemplateEntry(ProtocolModel):
    """A resource template as advertised by ``resources/templates/list``."""

    uri_template: str = Field(alias="uriTemplate")
    name: str
    description: str = ""
    mime_type: str | None = Field(default=None, alias="mimeType")


# ---------------------------------------------------------------------------
# Reverse-channel payloads (server → client)
# ---------------------------------------------------------------------------


class SamplingMessage(ProtocolModel):
    role: Literal["user", "assistant"]
    content: ContentBlock


class CreateMessageParams(ProtocolModel):
    messages: list[SamplingMessage]
    system_prompt: str | None = Field(default=None, alias="systemPrompt")
    max_tokens: int = Field(alias="maxTokens")
    temperature: float | None = None
    include_context: Literal["none", "thisServer", "allServers"] | None = Field(
        default=None, alias="includeContext"
    )


class CreateMessageResult(ProtocolModel):
    """The client's answer to ``sampling/createMessage``."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    role: Literal["user", "assistant"]
    content: ContentBlock
    model: str
    stop_reason: str | None = Field(default=None, alias="stopReason")


class Root(ProtocolModel):
    uri: str
    name: str | None = None


class ListRootsResult(ProtocolModel):
    """The client's answer to ``roots/list``."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    roots: list[Root] = []
