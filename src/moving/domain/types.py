"""Order status and property size enums with their string codecs.

Both enums share one contract:

- ``decode(code)`` is lenient: empty or unrecognized codes become ``UNKNOWN``.
- ``encode()`` is total: every member has a code, ``UNKNOWN`` encodes as
  ``"unknown"``.

Integer construction is lenient as well, so an unrecognized wire number
maps to ``UNKNOWN`` instead of raising.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Self

UNKNOWN_CODE = "unknown"


class _CodedEnum(IntEnum):
    """IntEnum with a string code per member and ``UNKNOWN = 0`` fallback."""

    @classmethod
    def _missing_(cls, value: object) -> Self:
        return cls(0)

    @classmethod
    def _codes(cls) -> dict[Self, str]:
        raise NotImplementedError

    @classmethod
    def decode(cls, code: str | None) -> Self:
        """Return the member for *code*, or ``UNKNOWN`` for anything else."""
        if not code:
            return cls(0)
        for member, member_code in cls._codes().items():
            if member_code == code:
                return member
        return cls(0)

    def encode(self) -> str:
        """Return the storage/string code for this member."""
        return type(self)._codes().get(self, UNKNOWN_CODE)

    @property
    def is_known(self) -> bool:
        return self.value != 0


class OrderStatus(_CodedEnum):
    """Lifecycle status of an order. Transitions are not constrained."""

    UNKNOWN = 0
    CREATED = 1
    REJECTED = 2
    IN_PROGRESS = 3
    DONE = 4

    @classmethod
    def _codes(cls) -> dict[OrderStatus, str]:
        return _ORDER_STATUS_CODES


class PropertySize(_CodedEnum):
    """Size category of the property being moved."""

    UNKNOWN = 0
    STUDIO = 1
    ONE_BEDROOM = 2
    TWO_BEDROOMS = 3
    THREE_BEDROOMS = 4
    FOUR_PLUS_BEDROOMS = 5
    COMMERCIAL = 6

    @classmethod
    def _codes(cls) -> dict[PropertySize, str]:
        return _PROPERTY_SIZE_CODES


_ORDER_STATUS_CODES: dict[OrderStatus, str] = {
    OrderStatus.UNKNOWN: UNKNOWN_CODE,
    OrderStatus.CREATED: "created",
    OrderStatus.REJECTED: "rejected",
    OrderStatus.IN_PROGRESS: "in_progress",
    OrderStatus.DONE: "done",
}

_PROPERTY_SIZE_CODES: dict[PropertySize, str] = {
    PropertySize.UNKNOWN: UNKNOWN_CODE,
    PropertySize.STUDIO: "studio",
    PropertySize.ONE_BEDROOM: "1_bedroom",
    PropertySize.TWO_BEDROOMS: "2_bedrooms",
    PropertySize.THREE_BEDROOMS: "3_bedrooms",
    PropertySize.FOUR_PLUS_BEDROOMS: "4_plus_bedrooms",
    PropertySize.COMMERCIAL: "commercial",
}
