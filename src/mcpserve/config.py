"""Server settings and the YAML loader behind ``--config``."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from mcpserve import __version__
from mcpserve.protocol.models import ServerCapabilities

DEFAULT_MOCK_CONFIG = Path(__file__).parent / "data" / "mock-config.json"


class ConfigError(Exception):
    """Raised when a settings file fails parsing or validation."""


class CapabilitySettings(BaseModel):
    """Which capability categories the server declares."""

    tools: bool = True
    prompts: bool = True
    resources: bool = True
    completions: bool = False

    def to_protocol(self) -> ServerCapabilities:
        return ServerCapabilities(
            tools={} if self.tools else None,
            prompts={} if self.prompts else None,
            resources={} if self.resources else None,
            completions={} if self.completions else None,
        )


class SamplingSettings(BaseModel):
    """Defaults for ``sampling/createMessage`` requests sent by the sampling tool."""

    system_prompt: str = "You are a helpful assistant."
    max_tokens: int = Field(default=100, gt=0)
    temperature: float = Field(default=0.7, ge=0.0)
    include_context: Literal["none", "thisServer", "allServers"] = "thisServer"


class TelemetrySettings(BaseModel):
    """Optional telemetry configuration."""

    enabled: bool = False
    otlp_endpoint: str | None = None


class ServerSettings(BaseModel):
    """Top-level server configuration."""

    name: str = "mcpserve"
    version: str = __version__
    instructions: str | None = None
    capabilities: CapabilitySettings = Field(default_factory=CapabilitySettings)
    duck_api_url: str = "https://random-d.uk/api/random"
    image_info_url: str = "https://picsum.photos/id/{number}/info"
    mock_config_path: Path = DEFAULT_MOCK_CONFIG
    http_timeout: float = Field(default=30.0, gt=0)
    sampling: SamplingSettings = Field(default_factory=SamplingSettings)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)


class SettingsLoader:
    """Load and validate a YAML settings file into :class:`ServerSettings`."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path

    def load(self) -> ServerSettings:
        """Read YAML, interpolate env vars, and validate.

        Environment variables in the form ``${VAR}`` or ``$VAR`` are expanded
        using :func:`os.path.expandvars` before YAML parsing. Without a path
        the defaults are returned. A relative ``mock_config_path`` is
        resolved against the settings file's directory.

        Raises:
            ConfigError: On read errors, YAML parse errors, or validation failures.
        """
        if self._path is None:
            return ServerSettings()

        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read {self._path}: {exc}") from exc

        expanded = os.path.expandvars(raw)

        try:
            data: Any = yaml.safe_load(expanded)
        except yaml.YAMLError as exc:
            raise ConfigError(f"YAML parse error: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Settings YAML must be a mapping")

        try:
            settings = ServerSettings.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc

        if "mock_config_path" in data and not settings.mock_config_path.is_absolute():
            settings.mock_config_path = self._path.parent / settings.mock_config_path
        return settings
