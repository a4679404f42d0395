"""Service layer: order and review operations returning ServiceResult."""

from moving.services.orders import OrderService
from moving.services.result import ErrorCode, ServiceError, ServiceResult
from moving.services.reviews import ReviewService

__all__ = ["ErrorCode", "OrderService", "ReviewService", "ServiceError", "ServiceResult"]
