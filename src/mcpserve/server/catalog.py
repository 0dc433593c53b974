"""CapabilityCatalog — the registered definitions behind every discovery request.

Definitions are added once at startup, then the catalog is sealed. The
``list_*`` methods are pure reads returning snapshots in registration order.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, create_model

from mcpserve.protocol.errors import RegistrationError
from mcpserve.protocol.models import (
    PromptArgument,
    PromptEntry,
    ResourceEntry,
    ResourceTemplateEntry,
    ToolEntry,
    to_wire,
)
from mcpserve.server.resources import UriPattern
from mcpserve.server.schema import ArgumentShape, SchemaKind, SchemaRegistry

# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------


class ToolDefinition(BaseModel):
    """A callable tool: name, description, and declared argument shape."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    input_shape: type[BaseModel]


class PromptDefinition(BaseModel):
    """A prompt template and its ordered argument specs."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    arguments: tuple[PromptArgument, ...] = ()
    input_shape: type[BaseModel]

    @classmethod
    def from_shape(cls, name: str, description: str, shape: type[BaseModel]) -> PromptDefinition:
        """Derive argument specs from the shape's fields, in declaration order."""
        arguments = tuple(
            PromptArgument(
                name=field_name,
                description=field.description or "",
                required=field.is_required(),
            )
            for field_name, field in shape.model_fields.items()
        )
        return cls(name=name, description=description, arguments=arguments, input_shape=shape)


class StaticResource(BaseModel):
    """A resource with a fixed URI."""

    model_config = ConfigDict(frozen=True)

    uri: str
    name: str
    description: str = ""
    mime_type: str | None = None


class ResourceTemplate(BaseModel):
    """A family of resources whose URIs match ``uri_template``."""

    model_config = ConfigDict(frozen=True)

    uri_template: str
    name: str
    description: str = ""
    mime_type: str | None = None


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class CapabilityCatalog:
    """Holds tool, prompt, resource, and resource-template definitions."""

    def __init__(self, schemas: SchemaRegistry) -> None:
        self._schemas = schemas
        self._tools: dict[str, ToolDefinition] = {}
        self._prompts: dict[str, PromptDefinition] = {}
        self._resources: dict[str, StaticResource] = {}
        self._templates: dict[str, tuple[ResourceTemplate, UriPattern]] = {}
        self._sealed = False

    # -- registration -------------------------------------------------------

    def add_tool(self, definition: ToolDefinition) -> None:
        self._check_open(f"tool {definition.name}")
        if definition.name in self._tools:
            msg = f"Duplicate tool name: {definition.name}"
            raise RegistrationError(msg)
        self._schemas.register(SchemaKind.TOOL, definition.name, definition.input_shape)
        self._tools[definition.name] = definition

    def add_prompt(self, definition: PromptDefinition) -> None:
        self._check_open(f"prompt {definition.name}")
        if definition.name in self._prompts:
            msg = f"Duplicate prompt name: {definition.name}"
            raise RegistrationError(msg)
        self._schemas.register(SchemaKind.PROMPT, definition.name, definition.input_shape)
        self._prompts[definition.name] = definition

    def add_resource(self, resource: StaticResource) -> None:
        self._check_open(f"resource {resource.uri}")
        if resource.uri in self._resources:
            msg = f"Duplicate resource URI: {resource.uri}"
            raise RegistrationError(msg)
        for template, pattern in self._templates.values():
            if pattern.match(resource.uri) is not None:
                msg = f"Resource {resource.uri} overlaps template {template.uri_template}"
                raise RegistrationError(msg)
        self._resources[resource.uri] = resource

    def add_template(
        self,
        template: ResourceTemplate,
        shape: type[BaseModel] | None = None,
    ) -> UriPattern:
        """Register a template; *shape* defaults to one string field per variable."""
        self._check_open(f"resource template {template.uri_template}")
        if template.uri_template in self._templates:
            msg = f"Duplicate resource template: {template.uri_template}"
            raise RegistrationError(msg)
        pattern = UriPattern(template.uri_template)
        for uri in self._resources:
            if pattern.match(uri) is not None:
                msg = f"Template {template.uri_template} overlaps resource {uri}"
                raise RegistrationError(msg)
        if shape is None:
            fields: dict[str, Any] = {name: (str, ...) for name in pattern.variables}
            shape = create_model("TemplateVariables", __base__=ArgumentShape, **fields)
        self._schemas.register(SchemaKind.RESOURCE_TEMPLATE, template.uri_template, shape)
        self._templates[template.uri_template] = (template, pattern)
        return pattern

    def seal(self) -> None:
        """Freeze the catalog and its schema registry."""
        self._sealed = True
        self._schemas.seal()

    def _check_open(self, what: str) -> None:
        if self._sealed:
            msg = f"Catalog is sealed; cannot register {what}"
            raise RegistrationError(msg)

    # -- lookups ------------------------------------------------------------

    def get_tool(self, name: str) -> ToolDefinition | None:
        return self._tools.get(name)

    def get_prompt(self, name: str) -> PromptDefinition | None:
        return self._prompts.get(name)

    def get_resource(self, uri: str) -> StaticResource | None:
        return self._resources.get(uri)

    def templates(self) -> Iterator[tuple[ResourceTemplate, UriPattern]]:
        """Yield templates with their compiled patterns, in registration order."""
        yield from self._templates.values()

    # -- discovery ----------------------------------------------------------

    def list_tools(self) -> list[dict[str, Any]]:
        return [
            to_wire(
                ToolEntry(
                    name=tool.name,
                    description=tool.description,
                    input_schema=self._schemas.describe(SchemaKind.TOOL, tool.name),
                )
            )
            for tool in self._tools.values()
        ]

    def list_prompts(self) -> list[dict[str, Any]]:
        return [
            to_wire(
                PromptEntry(
                    name=prompt.name,
                    description=prompt.description,
                    arguments=list(prompt.arguments),
                )
            )
            for prompt in self._prompts.values()
        ]

    def list_resources(self) -> list[dict[str, Any]]:
        return [
            to_wire(
                ResourceEntry(
                    uri=res.uri,
                    name=res.name,
                    description=res.description,
                    mime_type=res.mime_type,
                )
            )
            for res in self._resources.values()
        ]

    def list_resource_templates(self) -> list[dict[str, Any]]:
        return [
            to_wire(
                ResourceTemplateEntry(
                    uri_template=template.uri_template,
                    name=template.name,
                    description=template.description,
                    mime_type=template.mime_type,
                )
            )
            for template, _ in self._templates.values()
        ]
