"""Ports for reading the upstream catalog."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pokesync.domain.model import CatalogEntity, PageWindow


@runtime_checkable
class UpstreamCatalog[TPrimary, TSecondary](Protocol):
    """Individual lookups against the external catalog."""

    async def fetch_total_count(self) -> int: ...

    async def fetch_detail(self, key: str | int) -> tuple[TPrimary, TSecondary]: ...

    async def fetch_page(self, window: PageWindow) -> list[str]: ...

    async def fetch_by_category(self, category: str, limit: int) -> list[str]: ...


type Normalizer[TPrimary, TSecondary] = Callable[[TPrimary, TSecondary], CatalogEntity]


__all__ = ["Normalizer", "UpstreamCatalog"]
