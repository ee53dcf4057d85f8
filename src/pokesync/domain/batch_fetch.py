"""Batched, throttled fetching of upstream catalog entities."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from pokesync.config.sync import DEFAULT_BATCH_DELAY_SECONDS
from pokesync.domain.errors import (
    UnrecoverableSyncError,
    UpstreamNotFoundError,
    UpstreamUnavailableError,
)
from pokesync.domain.model import MAX_PAGE_LIMIT, PageWindow

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pokesync.domain.model import CatalogEntity
    from pokesync.domain.ports.fetching import Normalizer, UpstreamCatalog

log = getLogger(__name__)

type Sleep = Callable[[float], Awaitable[None]]


class SyncState(StrEnum):
    IDLE = "idle"
    COUNTING = "counting"
    PAGING = "paging"
    DETAILING = "detailing"
    DELAYING = "delaying"
    DONE = "done"
    FAILED = "failed"


@dataclass
class BatchFetchOrchestrator[TPrimary, TSecondary]:
    """Drive one synchronization run: count, page, detail, pause, repeat.

    Pages are processed strictly one after another with a fixed pause between
    them. Within a page every key is detailed concurrently and results keep the
    listing order. A failed entity is logged and left out; only a failed page
    listing aborts the run.
    """

    upstream: UpstreamCatalog[TPrimary, TSecondary]
    normalizer: Normalizer[TPrimary, TSecondary]
    batch_size: int = MAX_PAGE_LIMIT
    delay_seconds: float = DEFAULT_BATCH_DELAY_SECONDS
    sleep: Sleep = asyncio.sleep
    state: SyncState = field(default=SyncState.IDLE, init=False)
    target: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        if not 0 < self.batch_size <= MAX_PAGE_LIMIT:
            raise ValueError(f"batch_size must be within 1..{MAX_PAGE_LIMIT}")

    async def run(self, requested_target: int) -> list[CatalogEntity]:
        self.state = SyncState.COUNTING
        total = await self.upstream.fetch_total_count()
        target = self.target = effective_target(requested_target, total)
        log.info(
            "Sync target: %s of %s requested (%s available upstream)",
            target,
            requested_target,
            total,
        )

        entities: list[CatalogEntity] = []
        offset = 0
        while offset < target:
            window = PageWindow(limit=min(self.batch_size, target - offset), offset=offset)
            self.state = SyncState.PAGING
            log.info("Processing batch: offset %s, fetching %s items", window.offset, window.limit)
            try:
                keys = await self.upstream.fetch_page(window)
            except (UpstreamNotFoundError, UpstreamUnavailableError) as exc:
                self.state = SyncState.FAILED
                log.error("Listing failed at offset %s: %s", offset, exc)
                msg = f"Could not list entities at offset {offset}"
                raise UnrecoverableSyncError(msg) from exc

            self.state = SyncState.DETAILING
            entities.extend(await self.detail_keys(keys[: window.limit]))

            offset += window.limit
            if offset < target:
                self.state = SyncState.DELAYING
                await self.sleep(self.delay_seconds)

        self.state = SyncState.DONE
        log.info("Fetched %s of %s targeted entities", len(entities), target)
        return entities

    async def detail_keys(self, keys: Sequence[str]) -> list[CatalogEntity]:
        """Fetch and normalize every key concurrently, dropping the ones that fail."""

        results = await asyncio.gather(*(self._detail_or_none(key) for key in keys))
        return [entity for entity in results if entity is not None]

    async def detail_in_batches(self, keys: Sequence[str]) -> list[CatalogEntity]:
        """``detail_keys`` for any number of keys, one throttled batch at a time."""

        entities: list[CatalogEntity] = []
        for start in range(0, len(keys), self.batch_size):
            if start:
                await self.sleep(self.delay_seconds)
            entities.extend(await self.detail_keys(keys[start : start + self.batch_size]))
        return entities

    async def fetch_one(self, key: str | int) -> CatalogEntity:
        primary, secondary = await self.upstream.fetch_detail(key)
        return self.normalizer(primary, secondary)

    async def _detail_or_none(self, key: str) -> CatalogEntity | None:
        try:
            return await self.fetch_one(key)
        except UpstreamNotFoundError:
            log.warning("Skipping %r: not found upstream", key)
        except UpstreamUnavailableError as exc:
            log.warning("Skipping %r: %s", key, exc)
        return None


def effective_target(requested: int, upstream_total: int) -> int:
    """Never ask for more than upstream has, never more than the caller asked."""

    return max(0, min(requested, upstream_total))
