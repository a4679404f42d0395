"""Reviews repository with a lazily populated, never-invalidated snapshot.

Reviews are curated out of band and change rarely, so the first successful
read is kept for the life of the process. A restart is required to pick up
new rows.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from moving.infrastructure.database.deadlines import DeadlineExceededError, apply_deadline
from moving.infrastructure.database.schema import reviews
from moving.infrastructure.repositories._helpers import EmptyResult, as_utc
from moving.infrastructure.repositories.errors import NotFoundError, StorageError

if TYPE_CHECKING:
    from sqlalchemy import RowMapping
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReviewRow:
    id: int
    name: str
    rate: int
    text: str
    photo_url: str
    review_url: str
    created_at: datetime
    updated_at: datetime


class ReviewRepository:
    """Read-only access to ``reviews``.

    With ``cache=True`` (the default) the first non-empty read populates an
    immutable snapshot under a lock; concurrent first readers wait for a
    single populate and later readers skip the lock entirely. Failed or
    empty reads leave the cell unset so the next call retries.
    """

    def __init__(
        self,
        engine: Engine,
        *,
        cache: bool = True,
        empty_result: EmptyResult = EmptyResult.NOT_FOUND,
    ) -> None:
        self._engine = engine
        self._cache = cache
        self._empty_result = empty_result
        self._snapshot: tuple[ReviewRow, ...] | None = None
        self._lock = threading.Lock()

    @property
    def is_cached(self) -> bool:
        return self._snapshot is not None

    def list_reviews(self) -> list[ReviewRow]:
        """All reviews, oldest first.

        An empty table raises :class:`NotFoundError` unless the repository
        was built with ``EmptyResult.EMPTY``.
        """
        if not self._cache:
            return list(self._load())

        snapshot = self._snapshot
        if snapshot is None:
            with self._lock:
                snapshot = self._snapshot
                if snapshot is None:
                    snapshot = self._load()
                    if snapshot:
                        self._snapshot = snapshot
                        logger.debug("Cached %d reviews", len(snapshot))
        return list(snapshot)

    def _load(self) -> tuple[ReviewRow, ...]:
        stmt = select(reviews).order_by(reviews.c.id)
        try:
            with self._engine.connect() as conn:
                apply_deadline(conn)
                rows = conn.execute(stmt).mappings().all()
        except (SQLAlchemyError, DeadlineExceededError) as exc:
            raise StorageError.wrap("query reviews", exc) from exc

        if not rows and self._empty_result is EmptyResult.NOT_FOUND:
            raise NotFoundError("no reviews found")
        return tuple(_to_review(row) for row in rows)


def _to_review(row: RowMapping) -> ReviewRow:
    return ReviewRow(
        id=int(row["id"]),
        name=row["name"],
        rate=int(row["rate"]),
        text=row["text"],
        photo_url=row["photo_url"] or "",
        review_url=row["review_url"] or "",
        created_at=as_utc(row["created_at"]),
        updated_at=as_utc(row["updated_at"]),
    )
