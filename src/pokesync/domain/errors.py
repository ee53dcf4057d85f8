"""Error taxonomy of the catalog synchronization engine."""

from __future__ import annotations


class CatalogSyncError(RuntimeError):
    """Base class for engine errors."""


class NotFoundError(CatalogSyncError):
    """The requested key, id or category does not exist."""


class UpstreamNotFoundError(NotFoundError):
    """The upstream catalog answered 404 for a key or category."""

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class LocalNotFoundError(NotFoundError):
    """No local record exists for the given id."""

    def __init__(self, record_id: int) -> None:
        super().__init__(f"Record #{record_id} not found")
        self.record_id = record_id


class UpstreamUnavailableError(CatalogSyncError):
    """Transport failure or non-404 error from the upstream catalog."""


class UnrecoverableSyncError(CatalogSyncError):
    """A bulk synchronization run cannot continue."""


class InputValidationError(CatalogSyncError, ValueError):
    """Caller input was rejected before reaching the engine."""
