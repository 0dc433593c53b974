"""Registrar — declarative registration of tools, prompts, and resources.

Each decorator records a definition in the catalog and binds the decorated
coroutine as its handler::

    registrar = Registrar(context)

    @registrar.tool("echo", "Echo a message", EchoArgs)
    async def echo(args: EchoArgs, request: RequestContext) -> list[ContentBlock]:
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from mcpserve.server.catalog import (
    PromptDefinition,
    ResourceTemplate,
    StaticResource,
    ToolDefinition,
)

if TYPE_CHECKING:
    from pydantic import BaseModel

    from mcpserve.server.context import PromptHandler, ServerContext, ToolHandler
    from mcpserve.server.resources import StaticProducer, TemplateProducer

logger = logging.getLogger(__name__)


class Registrar:
    """Fluent front end over a :class:`ServerContext`'s registries."""

    def __init__(self, context: ServerContext) -> None:
        self._context = context

    def tool(
        self, name: str, description: str, shape: type[BaseModel]
    ) -> Callable[[ToolHandler], ToolHandler]:
        def decorator(handler: ToolHandler) -> ToolHandler:
            self._context.catalog.add_tool(
                ToolDefinition(name=name, description=description, input_shape=shape)
            )
            self._context.tool_handlers[name] = handler
            logger.debug("Registered tool %s", name)
            return handler

        return decorator

    def prompt(
        self, name: str, description: str, shape: type[BaseModel]
    ) -> Callable[[PromptHandler], PromptHandler]:
        def decorator(handler: PromptHandler) -> PromptHandler:
            self._context.catalog.add_prompt(PromptDefinition.from_shape(name, description, shape))
            self._context.prompt_handlers[name] = handler
            logger.debug("Registered prompt %s", name)
            return handler

        return decorator

    def resource(
        self,
        uri: str,
        name: str,
        description: str = "",
        mime_type: str | None = None,
    ) -> Callable[[StaticProducer], StaticProducer]:
        def decorator(producer: StaticProducer) -> StaticProducer:
            self._context.catalog.add_resource(
                StaticResource(uri=uri, name=name, description=description, mime_type=mime_type)
            )
            self._context.resolver.bind_static(uri, producer)
            logger.debug("Registered resource %s", uri)
            return producer

        return decorator

    def resource_template(
        self,
        uri_template: str,
        name: str,
        description: str = "",
        mime_type: str | None = None,
        shape: type[BaseModel] | None = None,
    ) -> Callable[[TemplateProducer], TemplateProducer]:
        def decorator(producer: TemplateProducer) -> TemplateProducer:
            template = ResourceTemplate(
                uri_template=uri_template,
                name=name,
                description=description,
                mime_type=mime_type,
            )
            self._context.catalog.add_template(template, shape)
            self._context.resolver.bind_template(uri_template, producer)
            logger.debug("Registered resource template %s", uri_template)
            return producer

        return decorator
