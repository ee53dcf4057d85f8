"""Application configuration helpers."""

from __future__ import annotations

from .env import ConfigurationError, env_float, env_int, env_str
from .logging import configure_logging
from .pokeapi import (
    CacheConfig,
    PokeApiConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
    get_pokeapi_config,
)
from .storage import StorageConfig, get_database_uri, get_storage_config
from .sync import SyncConfig, get_sync_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "PokeApiConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "SyncConfig",
    "configure_logging",
    "env_float",
    "env_int",
    "env_str",
    "get_database_uri",
    "get_pokeapi_config",
    "get_storage_config",
    "get_sync_config",
]
