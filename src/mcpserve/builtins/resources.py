"""Built-in resources: the mock configuration file and the image-info template."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mcpserve.config import ServerSettings
    from mcpserve.server.registrar import Registrar

MOCK_CONFIG_URI = "file:///mock-config.json"
IMAGES_TEMPLATE = "images://{number}"


def register_resources(registrar: Registrar, settings: ServerSettings) -> None:
    @registrar.resource(MOCK_CONFIG_URI, "config", "The mock-config.json file", "application/json")
    async def mock_config() -> str:
        # Bytes are decoded as-is so line endings survive untouched.
        raw = await asyncio.to_thread(settings.mock_config_path.read_bytes)
        return raw.decode("utf-8")

    @registrar.resource_template(IMAGES_TEMPLATE, "Random Image", "Dynamically generated image resource")
    async def image_info(variables: dict[str, Any]) -> str:
        return settings.image_info_url.replace("{number}", str(variables["number"]))
