"""SchemaRegistry — declared argument shapes, their JSON Schema, and validation.

Shapes are pydantic models deriving from :class:`ArgumentShape`, which
rejects unknown keys. Validation always runs before a handler, so a request
with a bad shape never reaches a side effect.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

import pydantic
from pydantic import BaseModel, ConfigDict

from mcpserve.protocol.errors import RegistrationError, ValidationError


class SchemaKind(str, Enum):
    """What a registered shape describes."""

    TOOL = "tool"
    PROMPT = "prompt"
    RESOURCE_TEMPLATE = "resource_template"


class ArgumentShape(BaseModel):
    """Base class for declared argument shapes."""

    model_config = ConfigDict(extra="forbid")


class SchemaRegistry:
    """Maps ``(kind, name)`` to an argument shape."""

    def __init__(self) -> None:
        self._shapes: dict[tuple[SchemaKind, str], type[BaseModel]] = {}
        self._sealed = False

    def register(self, kind: SchemaKind, name: str, shape: type[BaseModel]) -> None:
        if self._sealed:
            msg = f"Schema registry is sealed; cannot register {kind.value} {name}"
            raise RegistrationError(msg)
        key = (kind, name)
        if key in self._shapes:
            msg = f"Duplicate {kind.value} shape: {name}"
            raise RegistrationError(msg)
        self._shapes[key] = shape

    def seal(self) -> None:
        self._sealed = True

    def __contains__(self, key: object) -> bool:
        return key in self._shapes

    def shape(self, kind: SchemaKind, name: str) -> type[BaseModel]:
        try:
            return self._shapes[(kind, name)]
        except KeyError:
            msg = f"No {kind.value} shape registered for {name!r}"
            raise KeyError(msg) from None

    def describe(self, kind: SchemaKind, name: str) -> dict[str, Any]:
        """Return the JSON Schema advertised for the shape."""
        schema = self.shape(kind, name).model_json_schema()
        return _strip_titles(schema)

    def validate(self, kind: SchemaKind, name: str, arguments: Any) -> BaseModel:
        """Parse raw arguments into the registered shape.

        ``None`` is treated as an empty mapping.

        Raises:
            ValidationError: listing every violated field.
        """
        shape = self.shape(kind, name)
        try:
            return shape.model_validate({} if arguments is None else arguments)
        except pydantic.ValidationError as exc:
            raise ValidationError(kind.value, name, field_errors(exc)) from exc


def field_errors(exc: pydantic.ValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors into ``{field, message, type}`` entries."""
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]


def _strip_titles(node: Any, *, in_properties: bool = False) -> Any:
    """Drop the auto-generated ``title`` keys pydantic adds to every schema."""
    if isinstance(node, dict):
        return {
            key: _strip_titles(value, in_properties=(key == "properties" and not in_properties))
            for key, value in node.items()
            if in_properties or not (key == "title" and isinstance(value, str))
        }
    if isinstance(node, list):
        return [_strip_titles(item) for item in node]
    return node
