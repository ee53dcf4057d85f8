"""Shared fixtures for PokeAPI adapter tests."""

from __future__ import annotations

import pytest

from pokesync.config import PokeApiConfig
from tests.helpers.http import make_pokeapi_config


@pytest.fixture
def pokeapi_config() -> PokeApiConfig:
    return make_pokeapi_config()
