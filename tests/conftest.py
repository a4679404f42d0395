"""Shared pytest fixtures and test helpers for moving tests."""

from __future__ import annotations

from collections.abc import Generator
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from prometheus_client import CollectorRegistry
from sqlalchemy import insert
from sqlalchemy.engine import Engine

from moving.infrastructure.database.engine import init_database
from moving.infrastructure.database.schema import reviews
from moving.infrastructure.repositories.orders import NewOrder, OrderRepository
from moving.infrastructure.repositories.reviews import ReviewRepository
from moving.rpc.interceptors.base import CallContext
from moving.rpc.protos import METHODS
from moving.services.orders import OrderService
from moving.services.reviews import ReviewService

ADMIN_TOKEN = "admin-secret"
CLIENT_TOKEN = "client-secret"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'moving.db'}"


@pytest.fixture
def db_engine(db_url: str) -> Generator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(db_url)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def order_repo(db_engine: Engine) -> OrderRepository:
    return OrderRepository(db_engine)


@pytest.fixture
def review_repo(db_engine: Engine) -> ReviewRepository:
    return ReviewRepository(db_engine)


@pytest.fixture
def order_service(order_repo: OrderRepository) -> OrderService:
    return OrderService(order_repo)


@pytest.fixture
def review_service(review_repo: ReviewRepository) -> ReviewService:
    return ReviewService(review_repo)


@pytest.fixture
def registry() -> CollectorRegistry:
    """A fresh Prometheus registry so metric values start at zero."""
    return CollectorRegistry()


@pytest.fixture
def call_ctx() -> Any:
    """Factory for :class:`CallContext` keyed by short method name."""

    def make(
        method: str = "CreateOrder",
        *,
        token: str | None = None,
        gateway: bool = False,
        metadata: tuple[tuple[str, str], ...] = (),
        timeout: float | None = None,
    ) -> CallContext:
        pairs = list(metadata)
        if token is not None:
            pairs.append(("authorization", f"Bearer {token}"))
        if gateway:
            pairs.append(("grpcgateway-user-agent", "pytest"))
        return CallContext(
            full_method=METHODS[method].full_method,
            metadata=tuple(pairs),
            timeout=timeout,
        )

    return make


# ---------------------------------------------------------------------------
# Shared test helpers (used across repository and service test modules)
# ---------------------------------------------------------------------------


def new_order(**overrides: Any) -> NewOrder:
    """A valid NewOrder; keyword arguments replace individual fields."""
    values: dict[str, Any] = {
        "name": "Ann Lee",
        "phone": "+1 415 555 0100",
        "move_date": date(2026, 5, 1),
        "move_from": "12 Oak St, Springfield",
        "move_to": "7 Elm Ave, Shelbyville",
    }
    values.update(overrides)
    return NewOrder(**values)


def seed_reviews(engine: Engine, count: int = 2) -> None:
    """Insert *count* reviews directly into the table."""
    now = datetime(2026, 1, 1, tzinfo=UTC)
    rows = [
        {
            "name": f"Customer {i}",
            "rate": 5,
            "text": f"Great move #{i}",
            "photo_url": f"https://example.com/{i}.jpg",
            "review_url": f"https://example.com/reviews/{i}",
            "created_at": now,
            "updated_at": now,
        }
        for i in range(1, count + 1)
    ]
    with engine.begin() as conn:
        conn.execute(insert(reviews), rows)
