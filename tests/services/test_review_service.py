"""Tests for ReviewService."""

from __future__ import annotations

from sqlalchemy.engine import Engine

from moving.services.result import ErrorCode
from moving.services.reviews import ReviewService
from tests.conftest import seed_reviews


class TestListReviews:
    def test_lists_reviews(self, review_service: ReviewService, db_engine: Engine) -> None:
        seed_reviews(db_engine, 2)
        result = review_service.list_reviews()
        assert result.ok
        assert result.op == "list_reviews"
        assert result.data["count"] == 2
        assert result.data["items"][1]["text"] == "Great move #2"

    def test_empty_is_not_found(self, review_service: ReviewService) -> None:
        result = review_service.list_reviews()
        assert not result.ok
        assert result.error is not None
        assert result.error.code is ErrorCode.NOT_FOUND
        assert result.error.message == "no reviews found"
