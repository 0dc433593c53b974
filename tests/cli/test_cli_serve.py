"""Tests for ``mcpserve serve``."""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import AsyncMock, patch

from click.testing import CliRunner
from rich.logging import RichHandler

from mcpserve.cli import main
from mcpserve.cli_commands.serve import configure_logging
from mcpserve.server.context import ServerContext


class TestServe:
    def test_runs_session_with_built_server(self) -> None:
        with (
            patch("mcpserve.app.serve", new_callable=AsyncMock) as mock_serve,
            patch("mcpserve.cli_commands.serve.configure_logging") as mock_logging,
        ):
            result = CliRunner().invoke(main, ["serve"])

        assert result.exit_code == 0
        mock_serve.assert_awaited_once()
        (context,) = mock_serve.await_args.args
        assert isinstance(context, ServerContext)
        assert context.catalog.get_tool("echo") is not None
        mock_logging.assert_called_once_with("INFO")

    def test_log_level_override(self, tmp_path: Path) -> None:
        config = tmp_path / "server.yaml"
        config.write_text("log_level: WARNING\n")
        with (
            patch("mcpserve.app.serve", new_callable=AsyncMock),
            patch("mcpserve.cli_commands.serve.configure_logging") as mock_logging,
        ):
            result = CliRunner().invoke(
                main, ["serve", "--config", str(config), "--log-level", "debug"]
            )

        assert result.exit_code == 0
        mock_logging.assert_called_once_with("DEBUG")

    def test_telemetry_flag(self) -> None:
        with (
            patch("mcpserve.app.serve", new_callable=AsyncMock),
            patch("mcpserve.cli_commands.serve.configure_logging"),
            patch("mcpserve.utils.telemetry.configure_telemetry") as mock_telemetry,
        ):
            result = CliRunner().invoke(main, ["serve", "--telemetry"])

        assert result.exit_code == 0
        mock_telemetry.assert_called_once_with(service_name="mcpserve", otlp_endpoint=None)

    def test_telemetry_off_by_default(self) -> None:
        with (
            patch("mcpserve.app.serve", new_callable=AsyncMock),
            patch("mcpserve.cli_commands.serve.configure_logging"),
            patch("mcpserve.utils.telemetry.configure_telemetry") as mock_telemetry,
        ):
            CliRunner().invoke(main, ["serve"])

        mock_telemetry.assert_not_called()

    def test_invalid_config_exits(self, tmp_path: Path) -> None:
        config = tmp_path / "server.yaml"
        config.write_text("- not a mapping\n")
        with patch("mcpserve.app.serve", new_callable=AsyncMock) as mock_serve:
            result = CliRunner().invoke(main, ["serve", "--config", str(config)])

        assert result.exit_code == 1
        assert "Configuration error" in result.output
        mock_serve.assert_not_awaited()


class TestConfigureLogging:
    def test_installs_stderr_rich_handler(self) -> None:
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging("DEBUG")
            (handler,) = root.handlers
            assert isinstance(handler, RichHandler)
            assert handler.console.stderr is True
            assert root.level == logging.DEBUG
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)


class TestVersion:
    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "mcpserve, version 0.1.0" in result.output
