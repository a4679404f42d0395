"""Caller deadline propagation to store queries.

The RPC layer opens a :func:`call_deadline` scope around each invocation.
Repositories call :func:`apply_deadline` on their connection before
issuing a statement: an already-expired deadline aborts without touching
the store, and on PostgreSQL the remaining budget becomes the
transaction's ``statement_timeout`` so the server abandons the query once
the caller has given up.
"""

from __future__ import annotations

import time
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING

from sqlalchemy import text

if TYPE_CHECKING:
    from sqlalchemy import Connection

# PostgreSQL rejects statement_timeout values above int32 milliseconds.
MAX_STATEMENT_TIMEOUT_MS = 2_147_483_647
# grpcio reports "no deadline" as roughly 2**63 seconds remaining.
NO_DEADLINE_THRESHOLD = 1e9

_deadline: ContextVar[float | None] = ContextVar("_deadline", default=None)


class DeadlineExceededError(TimeoutError):
    """The caller's deadline passed before the store was queried."""


@contextmanager
def call_deadline(timeout: float | None) -> Generator[None]:
    """Bind a deadline *timeout* seconds from now for the current call.

    ``None`` means the caller set no deadline.
    """
    deadline = None if timeout is None else time.monotonic() + timeout
    token = _deadline.set(deadline)
    try:
        yield
    finally:
        _deadline.reset(token)


def client_timeout(time_remaining: float | None) -> float | None:
    """Normalize a transport's remaining-time report; huge values mean unbounded."""
    if time_remaining is None or time_remaining >= NO_DEADLINE_THRESHOLD:
        return None
    return time_remaining


def remaining() -> float | None:
    """Seconds left before the current deadline, or None if unbounded."""
    deadline = _deadline.get()
    if deadline is None:
        return None
    return deadline - time.monotonic()


def apply_deadline(conn: Connection) -> None:
    """Enforce the current deadline on *conn* (see module docstring)."""
    left = remaining()
    if left is None:
        return
    if left <= 0:
        raise DeadlineExceededError("caller deadline exceeded before query")
    if conn.dialect.name == "postgresql":
        millis = min(MAX_STATEMENT_TIMEOUT_MS, max(1, int(left * 1000)))
        conn.execute(text(f"SET LOCAL statement_timeout = {millis}"))
