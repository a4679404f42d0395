"""Typed payload contracts for the service boundary.

Inputs (``OrderDraft``, ``OrderChanges``, ``OrderQuery``) are built by the
transport layer after wire validation. Outputs are validated through
:func:`dump_validated` before they are placed in ``ServiceResult.data`` so
shape regressions fail fast in tests.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from moving.domain.types import OrderStatus, PropertySize


def dump_validated[T: BaseModel](model_cls: type[T], data: dict[str, Any]) -> dict[str, Any]:
    """Validate *data* against *model_cls* and return a normalized payload dict."""
    model = model_cls.model_validate(data)
    return model.model_dump(mode="python")


# ── Inputs ───────────────────────────────────────────────────────────


class OrderDraft(BaseModel):
    """A new order as accepted from a caller. Status is assigned on insert."""

    model_config = ConfigDict(frozen=True)

    name: str
    phone: str
    move_date: date
    move_from: str
    move_to: str
    property_size: PropertySize = PropertySize.UNKNOWN
    email: str | None = None
    additional_info: str | None = None


class OrderChanges(BaseModel):
    """Sparse update. ``None`` leaves the stored value untouched."""

    model_config = ConfigDict(frozen=True)

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


class OrderQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_status: OrderStatus | None = None
    property_size: PropertySize | None = None
    created_from: datetime | None = None
    created_to: datetime | None = None
    move_date_from: date | None = None
    move_date_to: date | None = None

    @property
    def is_empty(self) -> bool:
        return all(value is None for value in self.model_dump().values())


# ── Outputs ──────────────────────────────────────────────────────────


class Order(BaseModel):
    """One stored order."""

    model_config = ConfigDict(extra="forbid")

    id: int
    name: str
    email: str | None = None
    phone: str
    move_date: date
    move_from: str
    move_to: str
    property_size: PropertySize
    order_status: OrderStatus
    additional_info: str | None = None
    created_at: datetime
    updated_at: datetime


class OrderData(BaseModel):
    """Payload contract for ``OrderService.create_order`` and ``get_order``."""

    order: Order


class OrderListData(BaseModel):
    """Payload contract for ``OrderService.list_orders``."""

    count: int
    items: list[Order]


class Review(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: int
    name: str
    rate: int
    text: str
    photo_url: str
    review_url: str
    created_at: datetime
    updated_at: datetime


class ReviewListData(BaseModel):
    """Payload contract for ``ReviewService.list_reviews``."""

    count: int
    items: list[Review]
