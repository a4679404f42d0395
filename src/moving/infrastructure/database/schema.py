"""SQLAlchemy Core table definitions for the moving database.

Enum columns hold the string code of the domain enum (see
:mod:`moving.domain.types`); the ``unknown`` code is the server default so
neither column is ever NULL.
"""

from __future__ import annotations

from sqlalchemy import (
    BigInteger,
    Column,
    Date,
    DateTime,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)

metadata = MetaData()

# SQLite only autoincrements INTEGER PRIMARY KEY columns.
_ID = BigInteger().with_variant(Integer(), "sqlite")

orders = Table(
    "orders",
    metadata,
    Column("id", _ID, primary_key=True, autoincrement=True),
    Column("name", String(100), nullable=False),
    Column("email", String(255)),
    Column("phone", String(32), nullable=False),
    Column("move_date", Date, nullable=False),
    Column("move_from", String(255), nullable=False),
    Column("move_to", String(255), nullable=False),
    Column("property_size", String(32), nullable=False, server_default="unknown"),
    Column("status", String(32), nullable=False, server_default="unknown"),
    Column("additional_info", Text),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

reviews = Table(
    "reviews",
    metadata,
    Column("id", _ID, primary_key=True, autoincrement=True),
    Column("name", String(100), nullable=False),
    Column("rate", Integer, nullable=False),
    Column("photo_url", Text, nullable=False, server_default=""),
    Column("text", Text, nullable=False),
    Column("review_url", Text, nullable=False, server_default=""),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

# ---------------------------------------------------------------------------
# Indexes for filtered / sorted columns
# ---------------------------------------------------------------------------

Index("ix_orders_created_at", orders.c.created_at)
Index("ix_orders_status", orders.c.status)
Index("ix_orders_move_date", orders.c.move_date)
