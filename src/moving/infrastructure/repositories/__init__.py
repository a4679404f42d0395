"""Repositories: the only code that issues SQL against the moving database."""

from moving.infrastructure.repositories._helpers import EmptyResult
from moving.infrastructure.repositories.errors import (
    InvalidPatchError,
    NotFoundError,
    RepositoryError,
    StorageError,
)
from moving.infrastructure.repositories.orders import (
    NewOrder,
    OrderFilter,
    OrderPatch,
    OrderRepository,
    OrderRow,
)
from moving.infrastructure.repositories.reviews import ReviewRepository, ReviewRow

__all__ = [
    "EmptyResult",
    "InvalidPatchError",
    "NewOrder",
    "NotFoundError",
    "OrderFilter",
    "OrderPatch",
    "OrderRepository",
    "OrderRow",
    "RepositoryError",
    "ReviewRepository",
    "ReviewRow",
    "StorageError",
]
