"""NotificationSink — fire-and-forget handling of client notifications."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from mcpserve.protocol.methods import Notification

if TYPE_CHECKING:
    from mcpserve.server.context import SessionState

logger = logging.getLogger(__name__)

NotificationListener = Callable[[dict[str, Any]], Awaitable[None]]


class NotificationSink:
    """Routes notifications to listeners, each on its own task.

    :meth:`dispatch` never blocks and never raises; a failing listener is
    logged and forgotten, so in-flight requests are unaffected.
    """

    def __init__(self, session: SessionState) -> None:
        self._session = session
        self._listeners: dict[str, list[NotificationListener]] = defaultdict(list)
        self._tasks: set[asyncio.Task[None]] = set()
        self.subscribe(Notification.ROOTS_LIST_CHANGED, self.on_roots_changed)

    def subscribe(self, method: Notification | str, listener: NotificationListener) -> None:
        key = method.value if isinstance(method, Notification) else method
        self._listeners[key].append(listener)

    def dispatch(self, method: str, params: dict[str, Any] | None) -> None:
        """Schedule every listener for *method* and return immediately."""
        payload = params if isinstance(params, dict) else {}
        if method == Notification.INITIALIZED.value:
            self._session.initialized = True
            logger.debug("Client finished initialization")
        elif method == Notification.CANCELLED.value:
            logger.info("Ignoring cancellation of request %s", payload.get("requestId"))

        listeners = self._listeners.get(method, [])
        if not listeners and method not in _BUILTIN:
            logger.debug("Dropping unhandled notification %s", method)
        for listener in listeners:
            task = asyncio.create_task(self._run(method, listener, payload))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def on_roots_changed(self, payload: dict[str, Any]) -> None:
        logger.info("Client roots changed: %s", payload)

    async def drain(self) -> None:
        """Wait for scheduled listeners to finish."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    @staticmethod
    async def _run(method: str, listener: NotificationListener, payload: dict[str, Any]) -> None:
        try:
            await listener(payload)
        except Exception:
            logger.exception("Listener for %s failed", method)


_BUILTIN = frozenset(
    {Notification.INITIALIZED.value, Notification.CANCELLED.value}
)
