"""Resource resolution — static URIs and ``{variable}`` URI templates."""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from mcpserve.protocol.errors import RegistrationError, UnknownResourceError
from mcpserve.protocol.models import ReadResourceResult, TextResourceContents
from mcpserve.server.schema import SchemaKind

if TYPE_CHECKING:
    from mcpserve.server.catalog import CapabilityCatalog
    from mcpserve.server.schema import SchemaRegistry

logger = logging.getLogger(__name__)

StaticProducer = Callable[[], Awaitable[str]]
TemplateProducer = Callable[[dict[str, Any]], Awaitable[str]]

_PLACEHOLDER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


class UriPattern:
    """A compiled URI template such as ``images://{number}``.

    Each ``{name}`` becomes a named capture. A placeholder at the very end of
    the template captures the whole remaining suffix (slashes included);
    any other placeholder stops at the next ``/``. This is positional
    matching, not RFC 6570 expansion.
    """

    def __init__(self, template: str) -> None:
        self.template = template
        parts: list[str] = []
        variables: list[str] = []
        pos = 0
        for found in _PLACEHOLDER.finditer(template):
            name = found.group(1)
            if name in variables:
                msg = f"Variable {name!r} appears twice in {template!r}"
                raise RegistrationError(msg)
            variables.append(name)
            parts.append(re.escape(template[pos : found.start()]))
            trailing = found.end() == len(template)
            parts.append(f"(?P<{name}>.+)" if trailing else f"(?P<{name}>[^/]+)")
            pos = found.end()
        parts.append(re.escape(template[pos:]))
        if not variables:
            msg = f"URI template {template!r} has no variables; register it as a static resource"
            raise RegistrationError(msg)
        self.variables = tuple(variables)
        self._regex = re.compile("".join(parts), re.DOTALL)

    def match(self, uri: str) -> dict[str, str] | None:
        """Return the bound variables, or ``None`` if *uri* does not fit."""
        found = self._regex.fullmatch(uri)
        if found is None:
            return None
        return found.groupdict()

    def __repr__(self) -> str:
        return f"UriPattern({self.template!r})"


class ResourceResolver:
    """Maps a resource URI to its content.

    Static resources win on exact match; otherwise templates are tried in
    registration order and the first match produces the content.
    """

    def __init__(self, catalog: CapabilityCatalog, schemas: SchemaRegistry) -> None:
        self._catalog = catalog
        self._schemas = schemas
        self._static: dict[str, StaticProducer] = {}
        self._templates: dict[str, TemplateProducer] = {}

    def bind_static(self, uri: str, producer: StaticProducer) -> None:
        self._static[uri] = producer

    def bind_template(self, uri_template: str, producer: TemplateProducer) -> None:
        self._templates[uri_template] = producer

    async def resolve(self, uri: str) -> ReadResourceResult:
        resource = self._catalog.get_resource(uri)
        if resource is not None:
            text = await self._static[uri]()
            return ReadResourceResult(
                contents=[TextResourceContents(uri=uri, mime_type=resource.mime_type, text=text)]
            )

        for template, pattern in self._catalog.templates():
            variables = pattern.match(uri)
            if variables is None:
                continue
            logger.debug("Resource %s matched template %s", uri, template.uri_template)
            bound = self._schemas.validate(
                SchemaKind.RESOURCE_TEMPLATE, template.uri_template, variables
            )
            text = await self._templates[template.uri_template](bound.model_dump())
            return ReadResourceResult(
                contents=[TextResourceContents(uri=uri, mime_type=template.mime_type, text=text)]
            )

        raise UnknownResourceError(uri)
