from __future__ import annotations

import asyncio

import httpx
import pytest

from pokesync.adapters.pokeapi import PokeApiClient, PokeApiError
from pokesync.config import PokeApiConfig  # noqa: TC001
from pokesync.domain.errors import UpstreamNotFoundError, UpstreamUnavailableError
from pokesync.domain.model import PageWindow
from tests.helpers.http import Handler, endpoint, make_client_factory
from tests.helpers.payloads import list_json, pokemon_json, species_json, type_json


def _client(config: PokeApiConfig, handler: Handler) -> PokeApiClient:
    return PokeApiClient(config=config, client_factory=make_client_factory(handler))


def test_fetch_page_clamps_limit(pokeapi_config: PokeApiConfig) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=list_json(["bulbasaur", "ivysaur"], count=1302))

    async def run() -> list[str]:
        async with _client(pokeapi_config, handler) as client:
            return await client.fetch_page(PageWindow(limit=500, offset=100))

    assert asyncio.run(run()) == ["bulbasaur", "ivysaur"]
    assert endpoint(seen[0]) == "pokemon"
    assert seen[0].url.params["limit"] == "50"
    assert seen[0].url.params["offset"] == "100"


def test_fetch_total_count(pokeapi_config: PokeApiConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["limit"] == "1"
        return httpx.Response(200, json=list_json(["bulbasaur"], count=1302))

    async def run() -> int:
        async with _client(pokeapi_config, handler) as client:
            return await client.fetch_total_count()

    assert asyncio.run(run()) == 1302


@pytest.mark.parametrize("status", [404, 500, 503])
def test_fetch_total_count_is_zero_on_failure(pokeapi_config: PokeApiConfig, status: int) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"detail": "nope"})

    async def run() -> int:
        async with _client(pokeapi_config, handler) as client:
            return await client.fetch_total_count()

    assert asyncio.run(run()) == 0


def test_fetch_detail_requests_both_resources(pokeapi_config: PokeApiConfig) -> None:
    paths: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        path = endpoint(request)
        paths.append(path)
        if path == "pokemon/pikachu":
            return httpx.Response(200, json=pokemon_json("pikachu", pokemon_id=25))
        return httpx.Response(200, json=species_json("pikachu", pokemon_id=25))

    async def run() -> tuple[int, int]:
        async with _client(pokeapi_config, handler) as client:
            primary, secondary = await client.fetch_detail(" Pikachu ")
            return primary.id, secondary.id

    assert asyncio.run(run()) == (25, 25)
    assert sorted(paths) == ["pokemon-species/pikachu", "pokemon/pikachu"]


@pytest.mark.parametrize("missing_path", ["pokemon/missingmon", "pokemon-species/missingmon"])
def test_fetch_detail_not_found(pokeapi_config: PokeApiConfig, missing_path: str) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        path = endpoint(request)
        if path == missing_path:
            return httpx.Response(404, text="Not Found")
        if path.startswith("pokemon-species"):
            return httpx.Response(200, json=species_json("missingmon"))
        return httpx.Response(200, json=pokemon_json("missingmon"))

    async def run() -> None:
        async with _client(pokeapi_config, handler) as client:
            await client.fetch_detail("missingmon")

    with pytest.raises(UpstreamNotFoundError) as excinfo:
        asyncio.run(run())

    assert excinfo.value.key == "missingmon"


def test_fetch_detail_prefers_not_found_over_unavailable(pokeapi_config: PokeApiConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if endpoint(request).startswith("pokemon-species"):
            return httpx.Response(503)
        return httpx.Response(404)

    async def run() -> None:
        async with _client(pokeapi_config, handler) as client:
            await client.fetch_detail("missingmon")

    with pytest.raises(UpstreamNotFoundError):
        asyncio.run(run())


def test_fetch_detail_server_error_is_unavailable(pokeapi_config: PokeApiConfig) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="Service Unavailable")

    async def run() -> None:
        async with _client(pokeapi_config, handler) as client:
            await client.fetch_detail("pikachu")

    with pytest.raises(UpstreamUnavailableError) as excinfo:
        asyncio.run(run())

    assert not isinstance(excinfo.value, UpstreamNotFoundError)


def test_transport_error_is_unavailable(pokeapi_config: PokeApiConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def run() -> None:
        async with _client(pokeapi_config, handler) as client:
            await client.fetch_page(PageWindow(limit=10))

    with pytest.raises(UpstreamUnavailableError):
        asyncio.run(run())


def test_malformed_payload_raises_pokeapi_error(pokeapi_config: PokeApiConfig) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"unexpected": True})

    async def run() -> None:
        async with _client(pokeapi_config, handler) as client:
            await client.fetch_page(PageWindow(limit=10))

    with pytest.raises(PokeApiError):
        asyncio.run(run())


def test_fetch_by_category_truncates(pokeapi_config: PokeApiConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert endpoint(request) == "type/electric"
        return httpx.Response(200, json=type_json("electric", ["pikachu", "raichu", "magnemite"]))

    async def run() -> list[str]:
        async with _client(pokeapi_config, handler) as client:
            return await client.fetch_by_category("Electric", 2)

    assert asyncio.run(run()) == ["pikachu", "raichu"]


def test_fetch_by_unknown_category_raises_not_found(pokeapi_config: PokeApiConfig) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    async def run() -> None:
        async with _client(pokeapi_config, handler) as client:
            await client.fetch_by_category("shadow", 5)

    with pytest.raises(UpstreamNotFoundError, match="Category 'shadow'"):
        asyncio.run(run())


def test_client_requires_open_context(pokeapi_config: PokeApiConfig) -> None:
    client = _client(pokeapi_config, lambda _: httpx.Response(200))

    with pytest.raises(PokeApiError, match="outside of its async context"):
        asyncio.run(client.fetch_page(PageWindow(limit=1)))


def test_invalid_url_is_unavailable(pokeapi_config: PokeApiConfig) -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        raise httpx.InvalidURL("Invalid non-printable ASCII character in URL")

    async def run() -> int:
        async with _client(pokeapi_config, handler) as client:
            with pytest.raises(UpstreamUnavailableError):
                await client.fetch_page(PageWindow(limit=10))
            return await client.fetch_total_count()

    assert asyncio.run(run()) == 0
