"""Fixtures for transport tests: settings, a wired dispatcher, fake loggers."""

from __future__ import annotations

from typing import Any

import pytest
from prometheus_client import CollectorRegistry

from moving.app import build_chain
from moving.config.settings import MovingSettings
from moving.rpc.dispatch import Dispatcher
from moving.rpc.handlers import MovingHandlers
from moving.services.orders import OrderService
from moving.services.reviews import ReviewService
from moving.services.telemetry import Tracer
from tests.conftest import ADMIN_TOKEN, CLIENT_TOKEN


class FakeLogger:
    """Stands in for a bound structlog logger; records (level, event, fields)."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str, dict[str, Any]]] = []

    def info(self, event: str, **fields: Any) -> None:
        self.records.append(("info", event, fields))

    def warning(self, event: str, **fields: Any) -> None:
        self.records.append(("warning", event, fields))


@pytest.fixture
def fake_logger() -> FakeLogger:
    return FakeLogger()


@pytest.fixture
def settings(db_url: str) -> MovingSettings:
    return MovingSettings(
        service_name="moving",
        database={"url": db_url},
        grpc={"host": "127.0.0.1", "port": 0, "grace_period": 1.0},
        gateway={"enabled": False},
        metrics={"enabled": True, "host": "127.0.0.1", "port": 0},
        tracing={"enabled": True},
        auth={"admin_tokens": [ADMIN_TOKEN], "client_tokens": [CLIENT_TOKEN]},
    )


@pytest.fixture
def dispatcher(
    settings: MovingSettings,
    order_service: OrderService,
    review_service: ReviewService,
    registry: CollectorRegistry,
) -> Dispatcher:
    """Handlers behind the full production chain, on a fresh registry."""
    tracer = Tracer(enabled=True, service_name=settings.service_name)
    return Dispatcher(
        MovingHandlers(order_service, review_service).routes(),
        build_chain(settings, tracer, registry=registry),
    )
