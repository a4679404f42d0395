"""Shared service-layer helper functions."""

from __future__ import annotations

from moving.infrastructure.repositories.errors import (
    InvalidPatchError,
    NotFoundError,
    RepositoryError,
)
from moving.services.result import ErrorCode, ServiceResult


def storage_failure(op: str, action: str, exc: RepositoryError) -> ServiceResult:
    """Translate a repository exception into a failed ServiceResult.

    Examples:
        NotFoundError("order 9 not found")  -> NOT_FOUND, "order 9 not found"
        InvalidPatchError("invalid id")     -> INVALID_ARGUMENT,
                                               "failed to update order | invalid id"
        StorageError("failed to ... | x")   -> UNKNOWN,
                                               "failed to <action> | failed to ... | x"
    """
    if isinstance(exc, NotFoundError):
        return ServiceResult.failure(op, ErrorCode.NOT_FOUND, str(exc))
    code = ErrorCode.INVALID_ARGUMENT if isinstance(exc, InvalidPatchError) else ErrorCode.UNKNOWN
    return ServiceResult.failure(op, code, f"failed to {action} | {exc}")
