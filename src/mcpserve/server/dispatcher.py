"""RequestDispatcher — routes one inbound request to its handler.

Every method maps onto a closed :class:`RequestCategory`; routing over the
categories ends in ``assert_never`` so a new category cannot be added
without a branch for it. Execution categories validate their arguments
through the :class:`~mcpserve.server.schema.SchemaRegistry` before any
handler runs.

Usage::

    dispatcher = RequestDispatcher(context, session, reverse)
    result = await dispatcher.dispatch("tools/call", {"name": "echo", "arguments": {...}})
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar, assert_never

import pydantic

from mcpserve.protocol.errors import (
    UnknownPromptError,
    UnknownRequestError,
    UnknownToolError,
    ValidationError,
)
from mcpserve.protocol.methods import (
    LATEST_PROTOCOL_VERSION,
    SUPPORTED_PROTOCOL_VERSIONS,
    Method,
)
from mcpserve.protocol.models import (
    CallToolParams,
    CallToolResult,
    GetPromptParams,
    GetPromptResult,
    InitializeParams,
    InitializeResult,
    ReadResourceParams,
    to_wire,
)
from mcpserve.server.context import RequestContext
from mcpserve.server.schema import SchemaKind, field_errors
from mcpserve.utils.telemetry import (
    ATTR_CATEGORY,
    ATTR_METHOD,
    ATTR_PROMPT_NAME,
    ATTR_RESOURCE_URI,
    ATTR_TOOL_NAME,
    get_tracer,
)

if TYPE_CHECKING:
    from opentelemetry.trace import Span

    from mcpserve.protocol.models import RequestId
    from mcpserve.server.context import ServerContext, SessionState
    from mcpserve.server.reverse import ReverseChannel

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

ParamsT = TypeVar("ParamsT", bound=pydantic.BaseModel)


class RequestCategory(str, Enum):
    """Every kind of request the dispatcher knows how to answer."""

    INITIALIZE = "initialize"
    PING = "ping"
    LIST_TOOLS = "list-tools"
    CALL_TOOL = "call-tool"
    LIST_PROMPTS = "list-prompts"
    GET_PROMPT = "get-prompt"
    LIST_RESOURCES = "list-resources"
    LIST_RESOURCE_TEMPLATES = "list-resource-templates"
    READ_RESOURCE = "read-resource"


_CATEGORY_BY_METHOD: dict[str, RequestCategory] = {
    Method.INITIALIZE.value: RequestCategory.INITIALIZE,
    Method.PING.value: RequestCategory.PING,
    Method.LIST_TOOLS.value: RequestCategory.LIST_TOOLS,
    Method.CALL_TOOL.value: RequestCategory.CALL_TOOL,
    Method.LIST_PROMPTS.value: RequestCategory.LIST_PROMPTS,
    Method.GET_PROMPT.value: RequestCategory.GET_PROMPT,
    Method.LIST_RESOURCES.value: RequestCategory.LIST_RESOURCES,
    Method.LIST_RESOURCE_TEMPLATES.value: RequestCategory.LIST_RESOURCE_TEMPLATES,
    Method.READ_RESOURCE.value: RequestCategory.READ_RESOURCE,
}

# Capability a category belongs to; categories absent here are always on.
_CAPABILITY: dict[RequestCategory, str] = {
    RequestCategory.LIST_TOOLS: "tools",
    RequestCategory.CALL_TOOL: "tools",
    RequestCategory.LIST_PROMPTS: "prompts",
    RequestCategory.GET_PROMPT: "prompts",
    RequestCategory.LIST_RESOURCES: "resources",
    RequestCategory.LIST_RESOURCE_TEMPLATES: "resources",
    RequestCategory.READ_RESOURCE: "resources",
}


class RequestDispatcher:
    """Answers requests for one session from the shared :class:`ServerContext`."""

    def __init__(
        self,
        context: ServerContext,
        session: SessionState,
        reverse: ReverseChannel | None = None,
    ) -> None:
        self._context = context
        self._session = session
        self._reverse = reverse

    def categorize(self, method: str) -> RequestCategory:
        """Map a method name to its category, honouring declared capabilities."""
        category = _CATEGORY_BY_METHOD.get(method)
        if category is None:
            raise UnknownRequestError(method)
        capability = _CAPABILITY.get(category)
        if capability is not None and getattr(self._context.capabilities, capability) is None:
            raise UnknownRequestError(method)
        return category

    async def dispatch(
        self,
        method: str,
        params: dict[str, Any] | None = None,
        request_id: RequestId | None = None,
    ) -> dict[str, Any]:
        """Handle one request and return its ``result`` payload.

        Raises:
            McpServeError: for every request-level failure; other exceptions
                from handlers propagate unchanged.
        """
        category = self.categorize(method)
        request = RequestContext(
            server=self._context,
            session=self._session,
            reverse=self._reverse,
            request_id=request_id,
        )
        with _tracer.start_as_current_span("mcp.dispatch") as span:
            span.set_attribute(ATTR_METHOD, method)
            span.set_attribute(ATTR_CATEGORY, category.value)
            logger.debug("Dispatching %s (%s)", method, request_id)
            return await self._route(category, method, params or {}, request, span)

    async def _route(
        self,
        category: RequestCategory,
        method: str,
        params: dict[str, Any],
        request: RequestContext,
        span: Span,
    ) -> dict[str, Any]:
        catalog = self._context.catalog
        if category is RequestCategory.INITIALIZE:
            return self._initialize(_parse(InitializeParams, params, method))
        if category is RequestCategory.PING:
            return {}
        if category is RequestCategory.LIST_TOOLS:
            return {"tools": catalog.list_tools()}
        if category is RequestCategory.CALL_TOOL:
            call = _parse(CallToolParams, params, method)
            span.set_attribute(ATTR_TOOL_NAME, call.name)
            return await self._call_tool(call, request)
        if category is RequestCategory.LIST_PROMPTS:
            return {"prompts": catalog.list_prompts()}
        if category is RequestCategory.GET_PROMPT:
            get = _parse(GetPromptParams, params, method)
            span.set_attribute(ATTR_PROMPT_NAME, get.name)
            return await self._get_prompt(get, request)
        if category is RequestCategory.LIST_RESOURCES:
            return {"resources": catalog.list_resources()}
        if category is RequestCategory.LIST_RESOURCE_TEMPLATES:
            return {"resourceTemplates": catalog.list_resource_templates()}
        if category is RequestCategory.READ_RESOURCE:
            read = _parse(ReadResourceParams, params, method)
            span.set_attribute(ATTR_RESOURCE_URI, read.uri)
            return to_wire(await self._context.resolver.resolve(read.uri))
        assert_never(category)

    def _initialize(self, params: InitializeParams) -> dict[str, Any]:
        requested = params.protocol_version
        version = requested if requested in SUPPORTED_PROTOCOL_VERSIONS else LATEST_PROTOCOL_VERSION
        self._session.protocol_version = version
        self._session.client_info = params.client_info
        self._session.client_capabilities = params.capabilities
        if params.client_info is not None:
            logger.info(
                "Client %s %s connected (protocol %s)",
                params.client_info.name,
                params.client_info.version,
                version,
            )
        result = InitializeResult(
            protocol_version=version,
            capabilities=self._context.capabilities,
            server_info=self._context.server_info,
            instructions=self._context.settings.instructions,
        )
        return to_wire(result)

    async def _call_tool(self, call: CallToolParams, request: RequestContext) -> dict[str, Any]:
        definition = self._context.catalog.get_tool(call.name)
        if definition is None:
            raise UnknownToolError(call.name)
        arguments = self._context.schemas.validate(SchemaKind.TOOL, call.name, call.arguments)
        handler = self._context.tool_handlers[definition.name]
        content = await handler(arguments, request)
        return to_wire(CallToolResult(content=content))

    async def _get_prompt(self, get: GetPromptParams, request: RequestContext) -> dict[str, Any]:
        definition = self._context.catalog.get_prompt(get.name)
        if definition is None:
            raise UnknownPromptError(get.name)
        arguments = self._context.schemas.validate(SchemaKind.PROMPT, get.name, get.arguments)
        handler = self._context.prompt_handlers[definition.name]
        messages = await handler(arguments, request)
        return to_wire(GetPromptResult(description=definition.description, messages=messages))


def _parse(model: type[ParamsT], params: dict[str, Any], method: str) -> ParamsT:
    """Validate the request envelope's ``params`` for *method*."""
    try:
        return model.model_validate(params)
    except pydantic.ValidationError as exc:
        raise ValidationError("request", method, field_errors(exc)) from exc
