"""ReviewService: read-only access to customer reviews."""

from __future__ import annotations

from moving.infrastructure.repositories.errors import RepositoryError
from moving.infrastructure.repositories.reviews import ReviewRepository, ReviewRow
from moving.services._helpers import storage_failure
from moving.services.base import BaseService
from moving.services.contracts import Review, ReviewListData, dump_validated
from moving.services.result import ServiceResult
from moving.services.telemetry import traced


class ReviewService(BaseService):
    def __init__(self, reviews: ReviewRepository) -> None:
        super().__init__()
        self._reviews = reviews

    @traced
    def list_reviews(self) -> ServiceResult:
        op = "list_reviews"
        try:
            rows = self._reviews.list_reviews()
        except RepositoryError as exc:
            return storage_failure(op, "get all reviews", exc)

        items = [_to_review(row) for row in rows]
        return ServiceResult(
            ok=True,
            op=op,
            data=dump_validated(ReviewListData, {"count": len(items), "items": items}),
        )


def _to_review(row: ReviewRow) -> Review:
    return Review(
        id=row.id,
        name=row.name,
        rate=row.rate,
        text=row.text,
        photo_url=row.photo_url,
        review_url=row.review_url,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
