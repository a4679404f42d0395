"""Structural validation of incoming requests.

Runs after the wire message has been flattened (zero values already
turned into ``None``) and before any service call. A failure becomes
``INVALID_ARGUMENT`` with reason ``VALIDATION_FAILED`` and the validator's
message; values are never silently corrected.
"""

from __future__ import annotations

from datetime import date
from typing import Annotated, Any

import phonenumbers
from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    ValidationError,
)

from moving.domain.types import OrderStatus, PropertySize
from moving.rpc.errors import RpcError
from moving.services.contracts import OrderChanges, OrderDraft

PHONE_REGION = "US"
MAX_NAME_LENGTH = 99
MAX_ADDRESS_LENGTH = 255


def _check_phone(value: str) -> str:
    try:
        phonenumbers.parse(value, PHONE_REGION)
    except phonenumbers.NumberParseException as exc:
        raise ValueError(f"invalid phone number: {exc}") from exc
    return value


Name = Annotated[str, StringConstraints(min_length=1, max_length=MAX_NAME_LENGTH)]
Address = Annotated[str, StringConstraints(min_length=1, max_length=MAX_ADDRESS_LENGTH)]
Phone = Annotated[str, AfterValidator(_check_phone)]


class CreateOrderInput(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: Name
    phone: Phone
    move_date: date
    move_from: Address
    move_to: Address
    property_size: PropertySize = PropertySize.UNKNOWN
    email: EmailStr | None = None
    additional_info: str | None = None

    def to_draft(self) -> OrderDraft:
        return OrderDraft(**self.model_dump())


class UpdateOrderInput(BaseModel):
    """Every field but ``id`` is optional; the id itself is checked by storage."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: int = Field(ge=0)
    property_size: PropertySize | None = None
    order_status: OrderStatus | None = None
    move_date: date | None = None
    name: Name | None = None
    email: EmailStr | None = None
    phone: Phone | None = None
    move_from: Address | None = None
    move_to: Address | None = None
    additional_info: str | None = None

    def to_changes(self) -> OrderChanges:
        return OrderChanges(**self.model_dump())


def describe(exc: ValidationError) -> str:
    """One line per failed field: ``"phone: Value error, invalid phone number ..."``."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error["loc"]) or "request"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def validate_input[T: BaseModel](model_cls: type[T], data: dict[str, Any]) -> T:
    """Validate *data*, dropping ``None`` values so missing fields read as required."""
    present = {key: value for key, value in data.items() if value is not None}
    try:
        return model_cls.model_validate(present)
    except ValidationError as exc:
        raise RpcError.validation(describe(exc)) from exc
