"""Relational store: engine, schema and deadline propagation via SQLAlchemy Core."""

from moving.infrastructure.database.deadlines import (
    DeadlineExceededError,
    apply_deadline,
    call_deadline,
)
from moving.infrastructure.database.engine import create_db_engine, init_database
from moving.infrastructure.database.schema import metadata, orders, reviews

__all__ = [
    "DeadlineExceededError",
    "apply_deadline",
    "call_deadline",
    "create_db_engine",
    "init_database",
    "metadata",
    "orders",
    "reviews",
]
