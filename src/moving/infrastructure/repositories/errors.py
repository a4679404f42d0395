"""Storage-layer exceptions.

These never cross the service boundary: services translate them into
:class:`~moving.services.result.ServiceError` codes.
"""

from __future__ import annotations


class RepositoryError(Exception):
    """Base class for storage-layer failures."""


class NotFoundError(RepositoryError):
    """No row matched, or a list query returned zero rows."""


class InvalidPatchError(RepositoryError):
    """An update was rejected locally and never sent to the store."""


class StorageError(RepositoryError):
    """The store failed (constraint violation, connectivity, scan error).

    The message follows the ``"failed to <op> | <underlying>"`` chain format.
    """

    @classmethod
    def wrap(cls, action: str, exc: BaseException) -> StorageError:
        return cls(f"failed to {action} | {exc}")
