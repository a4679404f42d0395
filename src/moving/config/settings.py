"""Service settings assembled from CLI flags, env vars and ``moving.toml``.

Highest priority first:

1. CLI flags passed by Click (unset flags are dropped)
2. ``MOVING_SERVICE_*`` env vars, ``__`` between nesting levels
   (``MOVING_SERVICE_GRPC__PORT=50052``)
3. ``moving.toml``, given with ``--config`` or found by walking up
4. Defaults on the section models
"""

from __future__ import annotations

import socket
import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, TomlConfigSettingsSource

from moving.config.discovery import find_config
from moving.config.models import (
    AuthConfig,
    DatabaseConfig,
    GatewayConfig,
    GrpcConfig,
    MetricsConfig,
    PluginsConfig,
    TelegramConfig,
    TracingConfig,
)


# TOML file for the settings object under construction; set by from_cli().
_toml_file: ContextVar[Path | None] = ContextVar("moving_toml_file", default=None)


class MovingSettings(BaseSettings):
    """Everything the service needs to start, frozen after construction.

    Attributes:
        service_name: Metric label, span attribute and health-check name.
        host_name: Reported in startup logs; defaults to the machine name.
        config_path: The TOML file the values were read from, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "MOVING_SERVICE_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    service_name: str = "moving"
    host_name: str = Field(default_factory=socket.gethostname)
    debug: bool = False
    log_json: bool = False

    grpc: GrpcConfig = Field(default_factory=GrpcConfig)
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    tracing: TracingConfig = Field(default_factory=TracingConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    telegram: TelegramConfig = Field(default_factory=TelegramConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=_toml_file.get()),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        **cli_flags: Any,
    ) -> MovingSettings:
        """Construct settings from a CLI invocation.

        An explicit *config_path* must exist; otherwise ``moving.toml`` is
        discovered by walking up from *start*. Flags left at ``None`` are
        dropped so they do not shadow env or TOML values.
        """
        toml_path: Path | None
        if config_path:
            toml_path = Path(config_path)
            if not toml_path.is_file():
                raise click.ClickException(f"Config file not found: {config_path}")
        else:
            toml_path = find_config(start)

        overrides = {key: value for key, value in cli_flags.items() if value is not None}

        token = _toml_file.set(toml_path)
        try:
            return cls(config_path=toml_path, **overrides)
        except tomllib.TOMLDecodeError as exc:
            raise click.ClickException(f"Invalid TOML in {toml_path}: {exc}") from exc
        finally:
            _toml_file.reset(token)
