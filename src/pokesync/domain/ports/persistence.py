"""Ports for persisting local catalog records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, overload, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from pokesync.domain.model import LocalRecord


@runtime_checkable
class CatalogStore(Protocol):
    """Narrow CRUD contract over the local record set."""

    async def count(self) -> int: ...

    async def clear(self) -> None: ...

    @overload
    async def find_all(self, select_fields: None = None) -> list[LocalRecord]: ...

    @overload
    async def find_all(self, select_fields: Sequence[str]) -> list[dict[str, object]]: ...

    async def find_all(
        self, select_fields: Sequence[str] | None = None
    ) -> list[LocalRecord] | list[dict[str, object]]: ...

    async def find_by_id(self, record_id: int) -> LocalRecord | None: ...

    def create(self, fields: Mapping[str, object]) -> LocalRecord: ...

    @overload
    async def save(self, record: LocalRecord) -> LocalRecord: ...

    @overload
    async def save(self, record: Sequence[LocalRecord]) -> list[LocalRecord]: ...

    async def save(
        self, record: LocalRecord | Sequence[LocalRecord]
    ) -> LocalRecord | list[LocalRecord]: ...

    async def preload(
        self, record_id: int, partial: Mapping[str, object]
    ) -> LocalRecord | None: ...

    async def remove(self, record: LocalRecord) -> LocalRecord: ...
