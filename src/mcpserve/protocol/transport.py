"""MCP transports — the message boundary the server session reads and writes.

Each transport satisfies the :class:`Transport` protocol, providing
``receive``, ``send``, and ``close`` methods.
"""

from __future__ import annotations

import asyncio
import json
import sys
from typing import IO, Any, Protocol, runtime_checkable

from mcpserve.protocol.errors import InvalidRequestError, ParseError


@runtime_checkable
class Transport(Protocol):
    """Abstract transport for MCP JSON-RPC communication."""

    async def receive(self) -> dict[str, Any] | None:
        """Return the next decoded message, or ``None`` at end of input."""
        ...

    async def send(self, data: dict[str, Any]) -> None: ...
    async def close(self) -> None: ...


def decode_line(line: bytes) -> dict[str, Any]:
    """Decode one newline-delimited JSON message."""
    try:
        message = json.loads(line)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ParseError(f"Parse error: {exc}") from exc
    if not isinstance(message, dict):
        msg = "Message must be a JSON object"
        raise InvalidRequestError(msg)
    return message


class StdioTransport:
    """Serves MCP over this process's stdin/stdout.

    Reads and writes newline-delimited JSON. Blank lines are skipped.
    """

    def __init__(
        self,
        stdin: IO[bytes] | None = None,
        stdout: IO[bytes] | None = None,
    ) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin.buffer
        self._stdout = stdout if stdout is not None else sys.stdout.buffer
        self._closed = False

    async def receive(self) -> dict[str, Any] | None:
        """Read the next JSON line from stdin."""
        while not self._closed:
            line = await asyncio.to_thread(self._stdin.readline)
            if not line:
                return None
            if line.strip():
                return decode_line(line)
        return None

    async def send(self, data: dict[str, Any]) -> None:
        """Write a JSON line to stdout."""
        if self._closed:
            msg = "Transport closed"
            raise RuntimeError(msg)
        line = json.dumps(data, ensure_ascii=False) + "\n"
        self._stdout.write(line.encode())
        self._stdout.flush()

    async def close(self) -> None:
        """Stop reading; stdin/stdout belong to the process and stay open."""
        self._closed = True
