"""Domain enums and value helpers shared by every layer."""

from moving.domain.types import OrderStatus, PropertySize
from moving.domain.values import is_zero, none_if_zero

__all__ = ["OrderStatus", "PropertySize", "is_zero", "none_if_zero"]
