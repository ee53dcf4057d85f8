"""PokeAPI client."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, ValidationError

from pokesync.adapters.http_resilience import ResilientClient
from pokesync.domain.errors import UpstreamNotFoundError, UpstreamUnavailableError
from pokesync.domain.model import PageWindow

from .schema import PokemonListPage, PokemonPayload, SpeciesPayload, TypePayload

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from pokesync.config.pokeapi import PokeApiConfig, ResilienceConfig

log = getLogger(__name__)


class PokeApiError(UpstreamUnavailableError):
    """Raised when PokeAPI returns an unexpected response."""


def normalize_key(key: str | int) -> str:
    return str(key).strip().lower()


class PokeApiClient:
    """Async client for the PokeAPI endpoints the sync engine consumes.

    One underlying HTTP client is opened per ``async with`` block and shared by
    every concurrent lookup issued inside it.
    """

    def __init__(
        self,
        *,
        config: PokeApiConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        self._http: ResilientClient | None = None

    async def __aenter__(self) -> PokeApiClient:
        if self._http is not None:
            raise PokeApiError("PokeAPI client is already open")
        if self._resilience.base_url is None:
            raise PokeApiError("Missing PokeAPI base_url in resilience configuration")
        self._http = self._client_factory(self._resilience)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def fetch_total_count(self) -> int:
        """Return the upstream total, or 0 when it cannot be determined."""

        try:
            page = await self._get("pokemon", PokemonListPage, params={"limit": 1, "offset": 0})
        except (UpstreamNotFoundError, UpstreamUnavailableError) as exc:
            log.warning("Could not read PokeAPI total count: %s", exc)
            return 0
        return max(page.count, 0)

    async def fetch_detail(self, key: str | int) -> tuple[PokemonPayload, SpeciesPayload]:
        slug = normalize_key(key)
        results = await asyncio.gather(
            self._get(f"pokemon/{slug}", PokemonPayload),
            self._get(f"pokemon-species/{slug}", SpeciesPayload),
            return_exceptions=True,
        )
        primary, secondary = results
        failures = [result for result in results if isinstance(result, BaseException)]
        # a 404 on either resource wins over any other failure
        not_found = next((f for f in failures if isinstance(f, UpstreamNotFoundError)), None)
        if not_found is not None:
            raise UpstreamNotFoundError(
                f"'{slug}' does not exist upstream", key=slug
            ) from not_found
        if failures:
            raise failures[0]
        if not isinstance(primary, PokemonPayload) or not isinstance(secondary, SpeciesPayload):
            raise PokeApiError(f"Unexpected PokeAPI payload for '{slug}'")
        return primary, secondary

    async def fetch_page(self, window: PageWindow) -> list[str]:
        effective = window.clamped()
        page = await self._get(
            "pokemon",
            PokemonListPage,
            params={"limit": effective.limit, "offset": effective.offset},
        )
        return [item.name for item in page.results]

    async def fetch_by_category(self, category: str, limit: int) -> list[str]:
        slug = normalize_key(category)
        try:
            payload = await self._get(f"type/{slug}", TypePayload)
        except UpstreamNotFoundError as exc:
            raise UpstreamNotFoundError(
                f"Category '{slug}' does not exist upstream", key=slug
            ) from exc
        return [member.pokemon.name for member in payload.pokemon[: max(limit, 0)]]

    async def _get[TModel: BaseModel](
        self,
        path: str,
        model: type[TModel],
        *,
        params: dict[str, int] | None = None,
    ) -> TModel:
        if self._http is None:
            raise PokeApiError("PokeAPI client used outside of its async context")

        log.debug("GET %s%s params=%s", self._resilience.base_url, path, params)
        try:
            response = await self._http.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == httpx.codes.NOT_FOUND:
                log.warning("PokeAPI resource %r not found", path)
                raise UpstreamNotFoundError(f"'{path}' does not exist upstream") from exc
            log.error("PokeAPI %s answered %s", path, exc.response.status_code)
            raise UpstreamUnavailableError(
                f"PokeAPI answered {exc.response.status_code} for '{path}'"
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            log.error("Error talking to PokeAPI for %s: %s", path, exc)
            raise UpstreamUnavailableError(f"Could not reach PokeAPI for '{path}'") from exc

        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise PokeApiError(f"Unexpected PokeAPI payload for '{path}'") from exc
