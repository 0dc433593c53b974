"""Tests for the stdio transport and line decoding."""

from __future__ import annotations

import io
import json

import pytest

from mcpserve.protocol.errors import InvalidRequestError, ParseError
from mcpserve.protocol.transport import StdioTransport, Transport, decode_line


class TestTransportProtocol:
    def test_stdio_satisfies_protocol(self) -> None:
        transport = StdioTransport(stdin=io.BytesIO(), stdout=io.BytesIO())
        assert isinstance(transport, Transport)


class TestDecodeLine:
    def test_decodes_object(self) -> None:
        assert decode_line(b'{"jsonrpc": "2.0", "method": "ping", "id": 1}\n')["id"] == 1

    def test_invalid_json_raises_parse_error(self) -> None:
        with pytest.raises(ParseError):
            decode_line(b"{not json\n")

    def test_invalid_utf8_raises_parse_error(self) -> None:
        with pytest.raises(ParseError):
            decode_line(b"\xff\xfe\n")

    def test_non_object_raises_invalid_request(self) -> None:
        with pytest.raises(InvalidRequestError):
            decode_line(b"[1, 2, 3]\n")


class TestStdioTransport:
    async def test_receive_reads_json_lines(self) -> None:
        stdin = io.BytesIO(b'{"a": 1}\n\n   \n{"b": 2}\n')
        transport = StdioTransport(stdin=stdin, stdout=io.BytesIO())

        assert await transport.receive() == {"a": 1}
        assert await transport.receive() == {"b": 2}
        assert await transport.receive() is None

    async def test_receive_after_close_returns_none(self) -> None:
        transport = StdioTransport(stdin=io.BytesIO(b'{"a": 1}\n'), stdout=io.BytesIO())
        await transport.close()
        assert await transport.receive() is None

    async def test_send_writes_one_utf8_line(self) -> None:
        stdout = io.BytesIO()
        transport = StdioTransport(stdin=io.BytesIO(), stdout=stdout)

        await transport.send({"text": "화이팅"})

        raw = stdout.getvalue()
        assert raw.endswith(b"\n")
        assert raw.count(b"\n") == 1
        assert json.loads(raw.decode("utf-8")) == {"text": "화이팅"}
        assert "화이팅".encode() in raw

    async def test_send_after_close_raises(self) -> None:
        transport = StdioTransport(stdin=io.BytesIO(), stdout=io.BytesIO())
        await transport.close()
        with pytest.raises(RuntimeError, match="closed"):
            await transport.send({"x": 1})
