"""Application wiring and the one-shot startup bootstrap."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING

from pokesync.adapters.pokeapi import PokeApiClient, PokemonPayload, SpeciesPayload, normalize
from pokesync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    is_started,
    startup,
)
from pokesync.config import get_pokeapi_config, get_sync_config
from pokesync.domain.batch_fetch import BatchFetchOrchestrator
from pokesync.domain.errors import UnrecoverableSyncError
from pokesync.domain.reconciliation import ReconciliationController

if TYPE_CHECKING:
    from pokesync.adapters.http_resilience import ResilientClient
    from pokesync.config import PokeApiConfig, ResilienceConfig, SyncConfig
    from pokesync.domain.model import SyncReport

type CatalogService = ReconciliationController[PokemonPayload, SpeciesPayload]
type ClientFactory = Callable[[ResilienceConfig], ResilientClient]

log = getLogger(__name__)


async def run_startup_bootstrap(service: CatalogService, target_count: int) -> SyncReport | None:
    """Fill an empty store before the service takes requests.

    A failed bootstrap is logged and the service starts with whatever the store
    held before (nothing, since bootstrap only runs against an empty store).
    """

    log.info("Running startup bootstrap (target=%s)", target_count)
    try:
        return await service.bootstrap_if_empty(target_count)
    except UnrecoverableSyncError as exc:
        log.warning("Startup bootstrap failed, continuing without initial data: %s", exc)
        return None


@asynccontextmanager
async def open_service(
    *,
    bootstrap: bool = True,
    pokeapi_config: PokeApiConfig | None = None,
    sync_config: SyncConfig | None = None,
    client_factory: ClientFactory | None = None,
    database_uri: str | None = None,
) -> AsyncIterator[CatalogService]:
    """Yield a ready controller; the startup bootstrap has finished by then."""

    if not is_started():
        startup(database_uri=database_uri)

    pokeapi = pokeapi_config or get_pokeapi_config()
    sync = sync_config or get_sync_config()

    async with PokeApiClient(config=pokeapi, client_factory=client_factory) as upstream:
        with SqlAlchemyCatalogUnitOfWork() as uow:
            orchestrator = BatchFetchOrchestrator[PokemonPayload, SpeciesPayload](
                upstream=upstream,
                normalizer=partial(normalize, language=pokeapi.language),
                batch_size=sync.batch_size,
                delay_seconds=sync.batch_delay_seconds,
            )
            service = ReconciliationController(store=uow.store, orchestrator=orchestrator)
            if bootstrap:
                await run_startup_bootstrap(service, sync.bootstrap_target)
            yield service
