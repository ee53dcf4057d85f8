"""Reconcile upstream catalog entities into the local store."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from pokesync.domain.errors import LocalNotFoundError, UnrecoverableSyncError
from pokesync.domain.model import BASIC_FIELDS, PageWindow, SyncReport

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pokesync.domain.batch_fetch import BatchFetchOrchestrator
    from pokesync.domain.model import CatalogEntity, LocalRecord
    from pokesync.domain.ports.fetching import UpstreamCatalog
    from pokesync.domain.ports.persistence import CatalogStore

log = getLogger(__name__)


class ReconciliationController[TPrimary, TSecondary]:
    """Service operations over the upstream catalog and the local store.

    Two write policies coexist:

    * ``bootstrap_if_empty`` is the only destructive path. It runs only against
      an empty store and clears it right before the single bulk write, after
      every batch has been fetched.
    * ``seed`` and ``import_one`` are additive. Calling ``seed`` repeatedly
      stores the same upstream entities again as new rows; nothing is
      deduplicated by name or upstream id.

    Bulk runs on one controller are serialized by an internal lock.
    """

    def __init__(
        self,
        *,
        store: CatalogStore,
        orchestrator: BatchFetchOrchestrator[TPrimary, TSecondary],
        upstream: UpstreamCatalog[TPrimary, TSecondary] | None = None,
    ) -> None:
        self.store = store
        self.orchestrator = orchestrator
        self.upstream = upstream or orchestrator.upstream
        self._sync_lock = asyncio.Lock()

    async def bootstrap_if_empty(self, target_count: int) -> SyncReport:
        async with self._sync_lock:
            try:
                count = await self.store.count()
            except Exception as exc:
                log.exception("Bootstrap aborted: could not count local records")
                raise UnrecoverableSyncError("Could not count local records") from exc

            if count > 0:
                log.info("Local store already holds %s records; bootstrap skipped", count)
                return SyncReport(requested=target_count, skipped=True)

            log.info("Local store is empty; preparing initial load of %s entities", target_count)
            try:
                entities = await self.orchestrator.run(target_count)
            except UnrecoverableSyncError:
                log.exception("Bootstrap aborted; local store left untouched")
                raise

            records = self._records_from(entities)
            await self.store.clear()
            saved = await self.store.save(records)

        log.info("Bootstrap complete: stored %s entities", len(saved))
        return SyncReport(
            requested=target_count,
            target=self.orchestrator.target,
            fetched=len(entities),
            stored=len(saved),
        )

    async def seed(self, limit: int) -> list[LocalRecord]:
        """Import the first ``limit`` upstream entities as new rows (no clear)."""

        async with self._sync_lock:
            log.info("Seeding %s entities from offset 0", limit)
            entities = await self.orchestrator.run(limit)
            saved = await self.store.save(self._records_from(entities))
        log.info("Seed stored %s entities", len(saved))
        return saved

    async def import_one(self, key: str | int) -> LocalRecord:
        log.info("Importing %r into the local store", key)
        entity = await self.orchestrator.fetch_one(key)
        record = await self.store.save(self.store.create(entity.record_fields()))
        log.info("Imported %r as record #%s", record.name, record.id)
        return record

    async def create(self, fields: Mapping[str, object]) -> LocalRecord:
        return await self.store.save(self.store.create(fields))

    async def get_one(self, record_id: int) -> LocalRecord:
        record = await self.store.find_by_id(record_id)
        if record is None:
            raise LocalNotFoundError(record_id)
        return record

    async def get_all(self) -> list[LocalRecord]:
        return await self.store.find_all()

    async def get_basic_list(self) -> list[dict[str, object]]:
        return await self.store.find_all(select_fields=BASIC_FIELDS)

    async def update(self, record_id: int, partial: Mapping[str, object]) -> LocalRecord:
        record = await self.store.preload(record_id, partial)
        if record is None:
            raise LocalNotFoundError(record_id)
        return await self.store.save(record)

    async def remove(self, record_id: int) -> LocalRecord:
        record = await self.get_one(record_id)
        return await self.store.remove(record)

    async def query_upstream_by_name(self, key: str | int) -> CatalogEntity:
        log.info("Querying upstream for %r", key)
        return await self.orchestrator.fetch_one(key)

    async def query_upstream_list(self, limit: int, offset: int = 0) -> list[CatalogEntity]:
        window = PageWindow(limit=limit, offset=offset).clamped()
        log.info("Listing %s upstream entities from offset %s", window.limit, window.offset)
        keys = await self.upstream.fetch_page(window)
        return await self.orchestrator.detail_keys(keys)

    async def query_upstream_by_category(self, category: str, limit: int) -> list[CatalogEntity]:
        log.info("Listing up to %s upstream entities of category %r", limit, category)
        keys = await self.upstream.fetch_by_category(category, limit)
        return await self.orchestrator.detail_in_batches(keys)

    def _records_from(self, entities: list[CatalogEntity]) -> list[LocalRecord]:
        return [self.store.create(entity.record_fields()) for entity in entities]
