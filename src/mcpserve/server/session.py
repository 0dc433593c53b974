"""ServerSession — the message loop between a transport and the dispatcher.

Inbound messages are classified as requests, responses, or notifications.
Requests each run on their own task so a handler that awaits the network or
the client never holds up the next message; responses resolve reverse-channel
calls; notifications go to the sink.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import pydantic

from mcpserve.protocol.errors import InvalidRequestError, McpServeError, error_from_exception
from mcpserve.protocol.models import JsonRpcRequest, JsonRpcResponse
from mcpserve.server.context import SessionState
from mcpserve.server.dispatcher import RequestDispatcher
from mcpserve.server.notifications import NotificationSink
from mcpserve.server.reverse import ReverseChannel

if TYPE_CHECKING:
    from mcpserve.protocol.models import RequestId
    from mcpserve.protocol.transport import Transport
    from mcpserve.server.context import ServerContext

logger = logging.getLogger(__name__)


class ServerSession:
    """Serves one client connection until its transport reaches end of input.

    Usage::

        session = ServerSession(context, StdioTransport())
        await session.run()
    """

    def __init__(self, context: ServerContext, transport: Transport) -> None:
        self._context = context
        self._transport = transport
        self._write_lock = asyncio.Lock()
        self._tasks: set[asyncio.Task[None]] = set()
        self.state = SessionState()
        self.reverse = ReverseChannel(self._send, self.state)
        self.notifications = NotificationSink(self.state)
        self.dispatcher = RequestDispatcher(context, self.state, self.reverse)

    async def run(self) -> None:
        """Read and handle messages until the transport is exhausted."""
        try:
            while True:
                try:
                    message = await self._transport.receive()
                except McpServeError as exc:
                    logger.warning("Rejecting inbound message: %s", exc)
                    await self._send_response(JsonRpcResponse(id=None, error=exc.to_error()))
                    continue
                if message is None:
                    break
                await self._handle_message(message)
        finally:
            # Nothing can answer a reverse call once input is gone.
            self.reverse.close()
            if self._tasks:
                await asyncio.gather(*self._tasks, return_exceptions=True)
            await self.notifications.drain()
            await self._transport.close()

    async def _handle_message(self, message: dict[str, Any]) -> None:
        if "method" in message:
            if "id" in message:
                self._start_request(message)
            else:
                self.notifications.dispatch(str(message["method"]), message.get("params"))
            return

        if "id" in message and ("result" in message or "error" in message):
            self.reverse.handle_response(message)
            return

        error = InvalidRequestError("Message is neither a request, a response, nor a notification")
        await self._send_response(JsonRpcResponse(id=_safe_id(message), error=error.to_error()))

    def _start_request(self, message: dict[str, Any]) -> None:
        task = asyncio.create_task(self._handle_request(message))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _handle_request(self, message: dict[str, Any]) -> None:
        request_id = _safe_id(message)
        try:
            request = JsonRpcRequest.model_validate({**message, "params": message.get("params") or {}})
        except pydantic.ValidationError as exc:
            error = InvalidRequestError(f"Invalid request: {exc.error_count()} error(s)")
            await self._send_response(JsonRpcResponse(id=request_id, error=error.to_error()))
            return

        try:
            result = await self.dispatcher.dispatch(request.method, request.params, request.id)
            response = JsonRpcResponse(id=request.id, result=result)
        except McpServeError as exc:
            logger.info("%s (%s) failed: %s", request.method, request.id, exc)
            response = JsonRpcResponse(id=request.id, error=exc.to_error())
        except Exception as exc:
            logger.exception("Unhandled error while serving %s (%s)", request.method, request.id)
            response = JsonRpcResponse(id=request.id, error=error_from_exception(exc))
        await self._send_response(response)

    async def _send_response(self, response: JsonRpcResponse) -> None:
        await self._send(response.to_message())

    async def _send(self, data: dict[str, Any]) -> None:
        async with self._write_lock:
            await self._transport.send(data)


def _safe_id(message: dict[str, Any]) -> RequestId | None:
    value = message.get("id")
    if isinstance(value, (int, str)) and not isinstance(value, bool):
        return value
    return None
