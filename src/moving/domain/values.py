"""Zero-value to optional conversion shared by every DTO boundary."""

from __future__ import annotations

from collections.abc import Sized
from typing import TypeVar

from google.protobuf.message import Message

_T = TypeVar("_T")


def is_zero(value: object) -> bool:
    """Whether *value* is the zero value of its type.

    Zero values: ``None``, empty strings/bytes/collections, numeric zero
    (including enum members whose value is 0), ``False`` and protobuf
    messages with no field set (e.g. an unset ``Timestamp``).
    """
    if value is None:
        return True
    if isinstance(value, Message):
        return value.ByteSize() == 0
    if isinstance(value, (bool, int, float)):
        return value == 0
    if isinstance(value, (str, bytes, Sized)):
        return len(value) == 0
    return False


def none_if_zero(value: _T | None) -> _T | None:  # noqa: UP047
    """Return ``None`` for a zero value, otherwise *value* unchanged.

    >>> none_if_zero("")
    >>> none_if_zero("Ann")
    'Ann'
    >>> none_if_zero(0)
    """
    if is_zero(value):
        return None
    return value
