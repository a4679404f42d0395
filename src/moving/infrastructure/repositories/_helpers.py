"""Shared repository helpers: timestamps and empty-result policy."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from enum import StrEnum

_TICK = timedelta(microseconds=1)


class EmptyResult(StrEnum):
    """How a list query reports zero rows.

    ``NOT_FOUND`` raises :class:`NotFoundError` (the service contract);
    ``EMPTY`` returns an empty list.
    """

    NOT_FOUND = "not_found"
    EMPTY = "empty"


def utc_now() -> datetime:
    """Current UTC time, timezone-aware."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from SQLite."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def next_timestamp(previous: datetime) -> datetime:
    """A timestamp strictly after *previous*, normally just ``utc_now()``."""
    now = utc_now()
    previous = as_utc(previous)
    if now <= previous:
        return previous + _TICK
    return now
