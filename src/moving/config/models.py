"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, ``moving.toml`` only contains
overrides. A local run needs nothing at all: SQLite in the working
directory, gRPC on 50051, the JSON gateway on 8080.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from moving.infrastructure.repositories._helpers import EmptyResult

# --- moving.toml sections ---


class GrpcConfig(BaseModel):
    """[grpc] section."""

    model_config = {"frozen": True}

    host: str = "0.0.0.0"
    port: int = 50051
    max_workers: int = 10
    grace_period: float = 10.0
    reflection: bool = True


class GatewayConfig(BaseModel):
    """[gateway] section: the HTTP/JSON transcoding listener."""

    model_config = {"frozen": True}

    enabled: bool = True
    host: str = "0.0.0.0"
    port: int = 8080
    cors_enabled: bool = False


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    url: str = "sqlite:///moving.db"
    echo: bool = False
    pool_size: int = 10
    empty_result: EmptyResult = EmptyResult.NOT_FOUND
    cache_reviews: bool = True


class MetricsConfig(BaseModel):
    """[metrics] section."""

    model_config = {"frozen": True}

    enabled: bool = False
    host: str = "0.0.0.0"
    port: int = 9090


class TracingConfig(BaseModel):
    """[tracing] section."""

    model_config = {"frozen": True}

    enabled: bool = False


class AuthConfig(BaseModel):
    """[auth] section.

    Admin tokens may call every method; client tokens everything except
    ``admin_methods``.
    """

    model_config = {"frozen": True}

    client_tokens: list[str] = Field(default_factory=list)
    admin_tokens: list[str] = Field(default_factory=list)
    admin_methods: list[str] = Field(
        default_factory=lambda: ["ListOrders", "GetOrder", "UpdateOrder"]
    )


class TelegramConfig(BaseModel):
    """[telegram] section: new-order notifications."""

    model_config = {"frozen": True}

    enabled: bool = False
    token: str = ""
    api_url: str = "https://api.telegram.org"
    timeout: float = 10.0
    allowed_chat_ids: list[int] = Field(default_factory=list)


class PluginsConfig(BaseModel):
    """[plugins] section.

    ``disabled`` names plugins (built-in or entry-point) that must never
    receive hooks, e.g. ``["telegram"]``.
    """

    model_config = {"frozen": True}

    disabled: list[str] = Field(default_factory=list)
