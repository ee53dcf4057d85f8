"""Translate PokeAPI payloads into catalog entities."""

from __future__ import annotations

import random
import re
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from pokesync.domain.model import PRICE_MAX, PRICE_MIN, CatalogEntity, capitalize_first, clamp_price

from .client import PokeApiError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .schema import PokemonPayload, SpeciesPayload, Sprites

DEFAULT_LANGUAGE: Final[str] = "es"
DESCRIPTION_PLACEHOLDER: Final[str] = "Descripción no disponible"

TYPE_LABELS: Final[Mapping[str, str]] = MappingProxyType(
    {
        "normal": "Normal",
        "fire": "Fuego",
        "water": "Agua",
        "grass": "Planta",
        "electric": "Eléctrico",
        "ice": "Hielo",
        "fighting": "Lucha",
        "poison": "Veneno",
        "ground": "Tierra",
        "flying": "Volador",
        "psychic": "Psíquico",
        "bug": "Bicho",
        "rock": "Roca",
        "ghost": "Fantasma",
        "dragon": "Dragón",
        "dark": "Siniestro",
        "steel": "Acero",
        "fairy": "Hada",
    }
)

_WHITESPACE = re.compile(r"\s+")


def normalize(
    primary: PokemonPayload,
    secondary: SpeciesPayload,
    *,
    language: str = DEFAULT_LANGUAGE,
    rng: random.Random | None = None,
) -> CatalogEntity:
    """Merge a pokemon payload and its species payload into one catalog entity."""

    categories = translate_types(primary)
    if not categories:
        raise PokeApiError(f"PokeAPI returned no types for '{primary.name}'")

    return CatalogEntity(
        key=primary.name.lower(),
        upstream_id=primary.id,
        name=capitalize_first(primary.name),
        categories=categories,
        image_url=select_image(primary.sprites),
        price=_price(primary, rng),
        description=select_description(secondary, language=language),
    )


def translate_type(code: str) -> str:
    return TYPE_LABELS.get(code.lower(), capitalize_first(code))


def translate_types(primary: PokemonPayload) -> tuple[str, ...]:
    slots = sorted(primary.types, key=lambda slot: slot.slot)
    return tuple(translate_type(slot.type.name) for slot in slots)


def select_image(sprites: Sprites) -> str | None:
    other = sprites.other
    artwork = other.official_artwork if other is not None else None
    if artwork is not None and artwork.front_default:
        return artwork.front_default
    return sprites.front_default or None


def select_description(secondary: SpeciesPayload, *, language: str) -> str:
    for entry in secondary.flavor_text_entries:
        if entry.language.name != language:
            continue
        text = _clean_flavor_text(entry.flavor_text)
        if text:
            return text
    return DESCRIPTION_PLACEHOLDER


def _clean_flavor_text(value: str) -> str:
    # flavor text carries hard line breaks and form feeds
    return _WHITESPACE.sub(" ", value.replace("\f", " ")).strip()


def _price(primary: PokemonPayload, rng: random.Random | None) -> int:
    if primary.price is not None:
        return clamp_price(primary.price)
    generator = rng or random
    return generator.randint(PRICE_MIN, PRICE_MAX)
