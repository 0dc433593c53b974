"""Tests for the built-in resources."""

from __future__ import annotations

from pathlib import Path

import pytest

from mcpserve.app import build_server
from mcpserve.config import DEFAULT_MOCK_CONFIG, ServerSettings
from mcpserve.server.context import ServerContext


class TestMockConfig:
    async def test_bytes_are_preserved(self, server: ServerContext, mock_config_file: Path) -> None:
        result = await server.resolver.resolve("file:///mock-config.json")
        (contents,) = result.contents
        assert contents.text.encode("utf-8") == mock_config_file.read_bytes()
        assert "\r\n" in contents.text
        assert contents.mime_type == "application/json"

    async def test_packaged_default(self) -> None:
        context = build_server(ServerSettings())
        result = await context.resolver.resolve("file:///mock-config.json")
        assert result.contents[0].text == DEFAULT_MOCK_CONFIG.read_text(encoding="utf-8")

    async def test_missing_file_raises(self, tmp_path: Path) -> None:
        context = build_server(ServerSettings(mock_config_path=tmp_path / "gone.json"))
        with pytest.raises(FileNotFoundError):
            await context.resolver.resolve("file:///mock-config.json")


class TestImageTemplate:
    async def test_number_is_substituted(self, server: ServerContext) -> None:
        result = await server.resolver.resolve("images://1084")
        assert result.contents[0].text == "https://picsum.photos/id/1084/info"

    async def test_custom_url(self) -> None:
        context = build_server(ServerSettings(image_info_url="https://img.test/{number}.json"))
        result = await context.resolver.resolve("images://5")
        assert result.contents[0].text == "https://img.test/5.json"
