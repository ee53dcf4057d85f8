"""PokeAPI connection settings: endpoint, language, retries, throttling and cache."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Literal

import httpx

from .env import env_str

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_POKEAPI_BASE_URL = "https://pokeapi.co/api/v2/"
DEFAULT_POKEAPI_LANGUAGE = "es"
POKEAPI_TIMEOUT_SECONDS = 15.0
POKEAPI_CALLS_PER_SECOND = 100
USER_AGENT = "pokesync (catalog mirror)"


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Backoff for PokeAPI reads. A 404 is an answer, never retried."""

    total: int = 3
    backoff_factor: float = 0.5
    max_backoff_wait: float = 10.0
    status_forcelist: frozenset[int] = frozenset({429, 500, 502, 503, 504})
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    """PokeAPI resources are static; entries live until ``ttl_seconds`` (forever if None)."""

    backend: Literal["sqlite", "memory"] = "memory"
    ttl_seconds: float | None = None


def _default_ratelimit() -> RateLimit:
    return RateLimit(max_calls=POKEAPI_CALLS_PER_SECOND, per_seconds=1.0)


def _default_headers() -> Mapping[str, str]:
    return MappingProxyType({"User-Agent": USER_AGENT})


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    """How the shared HTTP client talks to PokeAPI. ``cache=None`` disables caching."""

    name: str = "pokeapi"
    base_url: str | None = DEFAULT_POKEAPI_BASE_URL
    timeout_seconds: float = POKEAPI_TIMEOUT_SECONDS
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = field(default_factory=_default_ratelimit)
    cache: CacheConfig | None = field(default_factory=CacheConfig)
    default_headers: Mapping[str, str] | None = field(default_factory=_default_headers)


@dataclass(frozen=True, slots=True)
class PokeApiConfig:
    resilience: ResilienceConfig
    language: str = DEFAULT_POKEAPI_LANGUAGE


def get_pokeapi_config(*, resilience: ResilienceConfig | None = None) -> PokeApiConfig:
    base_url = env_str("POKEAPI_BASE_URL", DEFAULT_POKEAPI_BASE_URL)
    if not base_url.endswith("/"):
        base_url = f"{base_url}/"

    return PokeApiConfig(
        resilience=resilience or ResilienceConfig(base_url=base_url),
        language=env_str("POKEAPI_LANGUAGE", DEFAULT_POKEAPI_LANGUAGE).lower(),
    )
