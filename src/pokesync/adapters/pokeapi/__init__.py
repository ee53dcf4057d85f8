"""PokeAPI upstream adapter."""

from __future__ import annotations

from .client import PokeApiClient, PokeApiError, normalize_key
from .schema import PokemonListPage, PokemonPayload, SpeciesPayload, TypePayload
from .translator import DESCRIPTION_PLACEHOLDER, TYPE_LABELS, normalize

__all__ = [
    "DESCRIPTION_PLACEHOLDER",
    "TYPE_LABELS",
    "PokeApiClient",
    "PokeApiError",
    "PokemonListPage",
    "PokemonPayload",
    "SpeciesPayload",
    "TypePayload",
    "normalize",
    "normalize_key",
]
