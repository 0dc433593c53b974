"""Tests for the schema registry."""

from __future__ import annotations

import pytest
from pydantic import Field

from mcpserve.protocol.errors import RegistrationError, ValidationError
from mcpserve.server.schema import ArgumentShape, SchemaKind, SchemaRegistry


class GreetArgs(ArgumentShape):
    name: str = Field(description="Who to greet")
    times: int = 1


@pytest.fixture
def registry() -> SchemaRegistry:
    reg = SchemaRegistry()
    reg.register(SchemaKind.TOOL, "greet", GreetArgs)
    return reg


class TestRegister:
    def test_contains(self, registry: SchemaRegistry) -> None:
        assert (SchemaKind.TOOL, "greet") in registry
        assert (SchemaKind.PROMPT, "greet") not in registry

    def test_duplicate_rejected(self, registry: SchemaRegistry) -> None:
        with pytest.raises(RegistrationError, match="Duplicate"):
            registry.register(SchemaKind.TOOL, "greet", GreetArgs)

    def test_same_name_different_kind_allowed(self, registry: SchemaRegistry) -> None:
        registry.register(SchemaKind.PROMPT, "greet", GreetArgs)
        assert (SchemaKind.PROMPT, "greet") in registry

    def test_sealed_rejects_registration(self, registry: SchemaRegistry) -> None:
        registry.seal()
        with pytest.raises(RegistrationError, match="sealed"):
            registry.register(SchemaKind.TOOL, "other", GreetArgs)

    def test_unknown_shape_raises_key_error(self, registry: SchemaRegistry) -> None:
        with pytest.raises(KeyError):
            registry.shape(SchemaKind.TOOL, "missing")


class TestDescribe:
    def test_json_schema_without_titles(self, registry: SchemaRegistry) -> None:
        schema = registry.describe(SchemaKind.TOOL, "greet")
        assert schema["type"] == "object"
        assert schema["required"] == ["name"]
        assert schema["properties"]["name"] == {"description": "Who to greet", "type": "string"}
        assert "title" not in schema
        assert "title" not in schema["properties"]["times"]

    def test_field_named_title_survives(self) -> None:
        class Doc(ArgumentShape):
            title: str

        reg = SchemaRegistry()
        reg.register(SchemaKind.TOOL, "doc", Doc)
        assert "title" in reg.describe(SchemaKind.TOOL, "doc")["properties"]

    def test_forbids_additional_properties(self, registry: SchemaRegistry) -> None:
        assert registry.describe(SchemaKind.TOOL, "greet")["additionalProperties"] is False


class TestValidate:
    def test_valid_arguments(self, registry: SchemaRegistry) -> None:
        args = registry.validate(SchemaKind.TOOL, "greet", {"name": "duck", "times": 2})
        assert isinstance(args, GreetArgs)
        assert args.times == 2

    def test_none_treated_as_empty(self) -> None:
        class NoArgs(ArgumentShape):
            pass

        reg = SchemaRegistry()
        reg.register(SchemaKind.TOOL, "noop", NoArgs)
        assert isinstance(reg.validate(SchemaKind.TOOL, "noop", None), NoArgs)

    def test_missing_field(self, registry: SchemaRegistry) -> None:
        with pytest.raises(ValidationError) as exc_info:
            registry.validate(SchemaKind.TOOL, "greet", {})
        err = exc_info.value
        assert err.kind == "tool"
        assert err.name == "greet"
        assert [e["field"] for e in err.errors] == ["name"]
        assert err.errors[0]["type"] == "missing"

    def test_unknown_key_rejected(self, registry: SchemaRegistry) -> None:
        with pytest.raises(ValidationError) as exc_info:
            registry.validate(SchemaKind.TOOL, "greet", {"name": "duck", "colour": "yellow"})
        assert exc_info.value.errors[0]["field"] == "colour"

    def test_wrong_type_lists_every_field(self, registry: SchemaRegistry) -> None:
        with pytest.raises(ValidationError) as exc_info:
            registry.validate(SchemaKind.TOOL, "greet", {"name": 5, "times": "many"})
        assert {e["field"] for e in exc_info.value.errors} == {"name", "times"}
