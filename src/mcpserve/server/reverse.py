"""ReverseChannel — requests the server sends to the client.

Outbound requests share the transport with inbound dispatch. Each gets a
correlation id and a future in the pending table; the session hands every
inbound response to :meth:`ReverseChannel.handle_response`, which resolves
the matching future. Overlapping calls never block one another.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeVar

import pydantic

from mcpserve.protocol.errors import ClientCapabilityError, ReverseChannelError
from mcpserve.protocol.methods import ReverseMethod
from mcpserve.protocol.models import (
    CreateMessageParams,
    CreateMessageResult,
    JsonRpcRequest,
    JsonRpcResponse,
    ListRootsResult,
    RequestId,
    SamplingMessage,
    TextContent,
    to_wire,
)
from mcpserve.utils.telemetry import ATTR_METHOD, get_tracer

if TYPE_CHECKING:
    from mcpserve.server.context import SessionState

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

ResultT = TypeVar("ResultT", bound=pydantic.BaseModel)
SendFn = Callable[[dict[str, Any]], Awaitable[None]]


class ReverseChannel:
    """Pending-request table for server → client calls.

    No timeout is applied here; a call waits until the client answers or the
    channel is closed.
    """

    def __init__(self, send: SendFn, session: SessionState) -> None:
        self._send = send
        self._session = session
        self._pending: dict[RequestId, tuple[str, asyncio.Future[JsonRpcResponse]]] = {}
        self._ids = itertools.count(1)
        self._closed = False

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def request(
        self,
        method: ReverseMethod,
        params: dict[str, Any] | None,
        result_type: type[ResultT],
    ) -> ResultT:
        """Send *method* to the client and wait for a typed result."""
        if self._closed:
            raise ReverseChannelError(method.value, "connection closed")

        request_id = f"srv-{next(self._ids)}"
        future: asyncio.Future[JsonRpcResponse] = asyncio.get_running_loop().create_future()
        self._pending[request_id] = (method.value, future)
        message = JsonRpcRequest(method=method.value, id=request_id, params=params or {})

        with _tracer.start_as_current_span("mcp.reverse_request") as span:
            span.set_attribute(ATTR_METHOD, method.value)
            logger.debug("Sending %s (%s) to client", method.value, request_id)
            try:
                await self._send(message.model_dump())
                response = await future
            finally:
                self._pending.pop(request_id, None)

        if response.error is not None:
            raise ReverseChannelError(method.value, response.error.message, response.error.code)
        try:
            return result_type.model_validate(response.result or {})
        except pydantic.ValidationError as exc:
            detail = f"malformed result ({exc.error_count()} error(s))"
            raise ReverseChannelError(method.value, detail) from exc

    def handle_response(self, message: dict[str, Any]) -> bool:
        """Resolve the pending call *message* answers. Returns ``False`` if none matches.

        A reply whose envelope does not validate still settles its call, as a
        :class:`ReverseChannelError`.
        """
        request_id = message.get("id")
        if not isinstance(request_id, (int, str)) or isinstance(request_id, bool):
            logger.warning("Dropping client response without usable id")
            return False
        entry = self._pending.get(request_id)
        if entry is None or entry[1].done():
            logger.warning("Dropping client response for unknown request %s", request_id)
            return False
        method, future = entry
        try:
            response = JsonRpcResponse.model_validate(message)
        except pydantic.ValidationError as exc:
            detail = f"malformed response ({exc.error_count()} error(s))"
            future.set_exception(ReverseChannelError(method, detail))
            return True
        future.set_result(response)
        return True

    def close(self) -> None:
        """Fail every pending call and refuse new ones."""
        self._closed = True
        for method, future in list(self._pending.values()):
            if not future.done():
                future.set_exception(ReverseChannelError(method, "connection closed"))

    # -- typed calls ----------------------------------------------------------

    async def request_generation(
        self,
        prompt_text: str,
        system_prompt: str | None,
        max_tokens: int,
        temperature: float | None,
        context_policy: str | None,
    ) -> CreateMessageResult:
        """Ask the client to generate a message for *prompt_text*."""
        self._require("sampling")
        params = CreateMessageParams(
            messages=[SamplingMessage(role="user", content=TextContent(text=prompt_text))],
            system_prompt=system_prompt,
            max_tokens=max_tokens,
            temperature=temperature,
            include_context=context_policy,  # type: ignore[arg-type]
        )
        return await self.request(ReverseMethod.CREATE_MESSAGE, to_wire(params), CreateMessageResult)

    async def request_root_list(self) -> ListRootsResult:
        """Ask the client for its root directories."""
        self._require("roots")
        return await self.request(ReverseMethod.LIST_ROOTS, None, ListRootsResult)

    def _require(self, capability: str) -> None:
        capabilities = self._session.client_capabilities
        if capabilities is None or getattr(capabilities, capability) is None:
            raise ClientCapabilityError(capability)
