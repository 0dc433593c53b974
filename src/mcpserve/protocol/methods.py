"""Protocol method names."""

from __future__ import annotations

from enum import Enum

LATEST_PROTOCOL_VERSION = "2025-06-18"
SUPPORTED_PROTOCOL_VERSIONS = ("2024-11-05", "2025-03-26", LATEST_PROTOCOL_VERSION)


class Method(str, Enum):
    """Methods the server answers (client → server requests)."""

    INITIALIZE = "initialize"
    PING = "ping"
    LIST_TOOLS = "tools/list"
    CALL_TOOL = "tools/call"
    LIST_PROMPTS = "prompts/list"
    GET_PROMPT = "prompts/get"
    LIST_RESOURCES = "resources/list"
    LIST_RESOURCE_TEMPLATES = "resources/templates/list"
    READ_RESOURCE = "resources/read"


class ReverseMethod(str, Enum):
    """Methods the server sends to the client."""

    CREATE_MESSAGE = "sampling/createMessage"
    LIST_ROOTS = "roots/list"


class Notification(str, Enum):
    """Notifications the server understands from the client."""

    INITIALIZED = "notifications/initialized"
    ROOTS_LIST_CHANGED = "notifications/roots/list_changed"
    CANCELLED = "notifications/cancelled"
