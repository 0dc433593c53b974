"""Shared fixtures: settings, a built server, and an in-memory transport."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from mcpserve.app import build_server
from mcpserve.config import ServerSettings
from mcpserve.server.context import ServerContext


class MemoryTransport:
    """Transport fed from a queue; everything sent is collected in ``sent``.

    Queue an exception to make ``receive`` raise it, ``None`` to end input.
    """

    def __init__(self) -> None:
        self.inbox: asyncio.Queue[dict[str, Any] | Exception | None] = asyncio.Queue()
        self.sent: list[dict[str, Any]] = []
        self.closed = False

    def feed(self, *messages: dict[str, Any] | Exception | None) -> None:
        for message in messages:
            self.inbox.put_nowait(message)

    def end(self) -> None:
        self.inbox.put_nowait(None)

    async def receive(self) -> dict[str, Any] | None:
        item = await self.inbox.get()
        if isinstance(item, Exception):
            raise item
        return item

    async def send(self, data: dict[str, Any]) -> None:
        self.sent.append(data)

    async def close(self) -> None:
        self.closed = True

    def response_for(self, request_id: Any) -> dict[str, Any] | None:
        for message in self.sent:
            if "method" not in message and message.get("id") == request_id:
                return message
        return None


async def wait_until(predicate: Callable[[], bool], attempts: int = 200) -> None:
    """Yield to the event loop until *predicate* holds."""
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


@pytest.fixture
def mock_config_file(tmp_path: Path) -> Path:
    path = tmp_path / "mock-config.json"
    path.write_bytes(b'{\r\n  "feature": true,\r\n  "level": 3\r\n}\r\n')
    return path


@pytest.fixture
def settings(mock_config_file: Path) -> ServerSettings:
    return ServerSettings(mock_config_path=mock_config_file)


@pytest.fixture
def server(settings: ServerSettings) -> ServerContext:
    return build_server(settings)


@pytest.fixture
def transport() -> MemoryTransport:
    return MemoryTransport()


@pytest.fixture
def waiter() -> Callable[..., Any]:
    return wait_until
