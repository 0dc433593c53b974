"""Tests for the protocol error hierarchy and its wire mapping."""

from __future__ import annotations

import pytest

from mcpserve.protocol.errors import (
    ClientCapabilityError,
    InvalidRequestError,
    InvalidUpstreamResponseError,
    McpServeError,
    ParseError,
    RegistrationError,
    ReverseChannelError,
    UnknownPromptError,
    UnknownRequestError,
    UnknownResourceError,
    UnknownToolError,
    ValidationError,
    error_from_exception,
)


class TestErrorHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [
            ParseError,
            InvalidRequestError,
            UnknownRequestError,
            ValidationError,
            UnknownToolError,
            UnknownPromptError,
            UnknownResourceError,
            InvalidUpstreamResponseError,
            ClientCapabilityError,
            ReverseChannelError,
        ],
    )
    def test_request_errors_derive_from_base(self, cls: type[Exception]) -> None:
        assert issubclass(cls, McpServeError)

    def test_registration_error_is_not_a_request_error(self) -> None:
        assert not issubclass(RegistrationError, McpServeError)


class TestErrorCodes:
    def test_parse_error(self) -> None:
        err = ParseError("bad json").to_error()
        assert err.code == -32700
        assert err.data is None

    def test_invalid_request(self) -> None:
        assert InvalidRequestError("nope").to_error().code == -32600

    def test_unknown_request(self) -> None:
        err = UnknownRequestError("tools/explode")
        wire = err.to_error()
        assert wire.code == -32601
        assert wire.data == {"method": "tools/explode"}
        assert "tools/explode" in wire.message

    def test_validation_error_carries_fields(self) -> None:
        errors = [{"field": "message", "message": "Field required", "type": "missing"}]
        wire = ValidationError("tool", "echo", errors).to_error()
        assert wire.code == -32602
        assert wire.data == {"kind": "tool", "name": "echo", "errors": errors}
        assert "message" in wire.message

    def test_validation_error_root_field(self) -> None:
        errors = [{"field": "", "message": "Input should be an object", "type": "model_type"}]
        err = ValidationError("tool", "echo", errors)
        assert "<root>" in str(err)

    def test_unknown_tool_and_prompt(self) -> None:
        assert UnknownToolError("x").to_error().code == -32602
        assert UnknownToolError("x").to_error().data == {"name": "x"}
        assert UnknownPromptError("y").to_error().code == -32602
        assert UnknownPromptError("y").to_error().data == {"name": "y"}

    def test_unknown_resource(self) -> None:
        wire = UnknownResourceError("file:///missing").to_error()
        assert wire.code == -32002
        assert wire.data == {"uri": "file:///missing"}

    def test_invalid_upstream(self) -> None:
        wire = InvalidUpstreamResponseError("no url").to_error()
        assert wire.code == -32001
        assert wire.data == {"detail": "no url"}

    def test_client_capability(self) -> None:
        wire = ClientCapabilityError("sampling").to_error()
        assert wire.code == -32003
        assert wire.data == {"capability": "sampling"}

    def test_reverse_channel_with_remote_code(self) -> None:
        err = ReverseChannelError("sampling/createMessage", "User rejected", -1)
        wire = err.to_error()
        assert wire.code == -32004
        assert wire.data == {"method": "sampling/createMessage", "code": -1}
        assert "User rejected" in wire.message

    def test_reverse_channel_without_remote_code(self) -> None:
        err = ReverseChannelError("roots/list", "connection closed")
        assert err.data() == {"method": "roots/list"}


class TestErrorFromException:
    def test_passes_through_known_errors(self) -> None:
        wire = error_from_exception(UnknownToolError("ghost"))
        assert wire.code == -32602

    def test_maps_unexpected_exceptions_to_internal_error(self) -> None:
        wire = error_from_exception(KeyError("boom"))
        assert wire.code == -32603
        assert wire.data == {"type": "KeyError"}

    def test_empty_message_falls_back_to_class_name(self) -> None:
        wire = error_from_exception(RuntimeError())
        assert wire.message == "RuntimeError"
