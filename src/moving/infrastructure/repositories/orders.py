"""Orders repository: create, list, get and sparse update over ``orders``."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from moving.domain.types import OrderStatus, PropertySize
from moving.infrastructure.database.deadlines import DeadlineExceededError, apply_deadline
from moving.infrastructure.database.schema import orders
from moving.infrastructure.repositories._helpers import (
    EmptyResult,
    as_utc,
    next_timestamp,
    utc_now,
)
from moving.infrastructure.repositories.errors import (
    InvalidPatchError,
    NotFoundError,
    StorageError,
)

if TYPE_CHECKING:
    from sqlalchemy import RowMapping, Select
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Storage DTOs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NewOrder:
    """Fields for a new row. Status is not part of it: inserts force ``created``."""

    name: str
    phone: str
    move_date: date
    move_from: str
    move_to: str
    property_size: PropertySize = PropertySize.UNKNOWN
    email: str | None = None
    additional_info: str | None = None


@dataclass(frozen=True)
class OrderRow:
    """A fully hydrated ``orders`` row."""

    id: int
    name: str
    email: str | None
    phone: str
    move_date: date
    move_from: str
    move_to: str
    property_size: PropertySize
    order_status: OrderStatus
    additional_info: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class OrderPatch:
    """Sparse update: ``None`` means "leave the column untouched"."""

    id: int
    property_size: PropertySize | None = None
    order_status: OrderStatus | None = None
    move_date: date | None = None
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    move_from: str | None = None
    move_to: str | None = None
    additional_info: str | None = None

    def changes(self) -> dict[str, Any]:
        """Column values for every supplied field, enums encoded to codes."""
        values: dict[str, Any] = {}
        for f in fields(self):
            if f.name == "id":
                continue
            value = getattr(self, f.name)
            if value is None:
                continue
            if f.name == "order_status":
                values["status"] = value.encode()
            elif f.name == "property_size":
                values["property_size"] = value.encode()
            else:
                values[f.name] = value
        return values


@dataclass(frozen=True)
class OrderFilter:
    """Query bounds pushed down into the WHERE clause. Bounds are inclusive."""

    order_status: OrderStatus | None = None
    property_size: PropertySize | None = None
    created_from: datetime | None = None
    created_to: datetime | None = None
    move_date_from: date | None = None
    move_date_to: date | None = None

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class OrderRepository:
    """Encapsulates SQL for the ``orders`` table.

    Owns the mapping between domain enums and their string column codes.
    """

    def __init__(self, engine: Engine, *, empty_result: EmptyResult = EmptyResult.NOT_FOUND) -> None:
        self._engine = engine
        self._empty_result = empty_result

    def create_order(self, new: NewOrder) -> OrderRow:
        """Insert *new* with status ``created`` and return the stored row."""
        now = utc_now()
        stmt = (
            insert(orders)
            .values(
                name=new.name,
                email=new.email,
                phone=new.phone,
                move_date=new.move_date,
                move_from=new.move_from,
                move_to=new.move_to,
                property_size=new.property_size.encode(),
                status=OrderStatus.CREATED.encode(),
                additional_info=new.additional_info,
                created_at=now,
                updated_at=now,
            )
            .returning(*orders.c)
        )
        try:
            with self._engine.begin() as conn:
                apply_deadline(conn)
                row = conn.execute(stmt).mappings().one()
        except (SQLAlchemyError, DeadlineExceededError) as exc:
            raise StorageError.wrap("insert order", exc) from exc
        return _to_order(row)

    def list_orders(self, order_filter: OrderFilter | None = None) -> list[OrderRow]:
        """List orders newest first, narrowed by *order_filter*.

        Zero rows raise :class:`NotFoundError` unless the repository was
        built with ``EmptyResult.EMPTY``.
        """
        stmt = _apply_filter(select(orders), order_filter).order_by(
            orders.c.created_at.desc(), orders.c.id.desc()
        )
        try:
            with self._engine.connect() as conn:
                apply_deadline(conn)
                rows = conn.execute(stmt).mappings().all()
        except (SQLAlchemyError, DeadlineExceededError) as exc:
            raise StorageError.wrap("query orders", exc) from exc

        if not rows and self._empty_result is EmptyResult.NOT_FOUND:
            raise NotFoundError("no orders found")
        return [_to_order(row) for row in rows]

    def get_order(self, order_id: int) -> OrderRow:
        """Fetch one order; :class:`NotFoundError` when absent."""
        stmt = select(orders).where(orders.c.id == order_id)
        try:
            with self._engine.connect() as conn:
                apply_deadline(conn)
                row = conn.execute(stmt).mappings().first()
        except (SQLAlchemyError, DeadlineExceededError) as exc:
            raise StorageError.wrap("scan order", exc) from exc

        if row is None:
            raise NotFoundError(f"order {order_id} not found")
        return _to_order(row)

    def update_order(self, patch: OrderPatch) -> None:
        """Apply *patch*; unsupplied columns keep their stored values.

        ``updated_at`` always moves strictly forward.
        """
        if patch.id == 0:
            raise InvalidPatchError("invalid id")
        changes = patch.changes()
        if not changes:
            raise InvalidPatchError("no fields to update")

        try:
            with self._engine.begin() as conn:
                apply_deadline(conn)
                previous = conn.execute(
                    select(orders.c.updated_at).where(orders.c.id == patch.id)
                ).scalar_one_or_none()
                if previous is None:
                    raise NotFoundError(f"order {patch.id} not found")
                conn.execute(
                    update(orders)
                    .where(orders.c.id == patch.id)
                    .values(**changes, updated_at=next_timestamp(previous))
                )
        except (SQLAlchemyError, DeadlineExceededError) as exc:
            raise StorageError.wrap("update row", exc) from exc

        logger.debug("Updated order %s fields=%s", patch.id, sorted(changes))


def _apply_filter(stmt: Select[Any], order_filter: OrderFilter | None) -> Select[Any]:
    if order_filter is None or order_filter.is_empty:
        return stmt
    if order_filter.order_status is not None:
        stmt = stmt.where(orders.c.status == order_filter.order_status.encode())
    if order_filter.property_size is not None:
        stmt = stmt.where(orders.c.property_size == order_filter.property_size.encode())
    if order_filter.created_from is not None:
        stmt = stmt.where(orders.c.created_at >= as_utc(order_filter.created_from))
    if order_filter.created_to is not None:
        stmt = stmt.where(orders.c.created_at <= as_utc(order_filter.created_to))
    if order_filter.move_date_from is not None:
        stmt = stmt.where(orders.c.move_date >= order_filter.move_date_from)
    if order_filter.move_date_to is not None:
        stmt = stmt.where(orders.c.move_date <= order_filter.move_date_to)
    return stmt


def _to_order(row: RowMapping) -> OrderRow:
    return OrderRow(
        id=int(row["id"]),
        name=row["name"],
        email=row["email"],
        phone=row["phone"],
        move_date=row["move_date"],
        move_from=row["move_from"],
        move_to=row["move_to"],
        property_size=PropertySize.decode(row["property_size"]),
        order_status=OrderStatus.decode(row["status"]),
        additional_info=row["additional_info"],
        created_at=as_utc(row["created_at"]),
        updated_at=as_utc(row["updated_at"]),
    )
