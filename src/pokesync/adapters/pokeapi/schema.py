"""Pydantic models describing the PokeAPI payloads used by the sync engine."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PokeApiBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class NamedResource(PokeApiBaseModel):
    name: str
    url: str | None = None


class TypeSlot(PokeApiBaseModel):
    slot: int
    type: NamedResource


class ArtworkSprites(PokeApiBaseModel):
    front_default: str | None = None


class OtherSprites(PokeApiBaseModel):
    official_artwork: ArtworkSprites | None = Field(default=None, alias="official-artwork")


class Sprites(PokeApiBaseModel):
    front_default: str | None = None
    other: OtherSprites | None = None


class PokemonPayload(PokeApiBaseModel):
    """``GET /pokemon/{key}``."""

    id: int
    name: str
    types: list[TypeSlot] = Field(default_factory=list[TypeSlot])
    sprites: Sprites = Field(default_factory=Sprites)
    # Not part of PokeAPI; mirrors that may supply one take precedence over generation.
    price: int | None = None


class FlavorTextEntry(PokeApiBaseModel):
    flavor_text: str
    language: NamedResource
    version: NamedResource | None = None


class SpeciesPayload(PokeApiBaseModel):
    """``GET /pokemon-species/{key}``."""

    id: int
    name: str
    flavor_text_entries: list[FlavorTextEntry] = Field(default_factory=list[FlavorTextEntry])


class PokemonListPage(PokeApiBaseModel):
    """``GET /pokemon?limit&offset``."""

    count: int
    next: str | None = None
    previous: str | None = None
    results: list[NamedResource] = Field(default_factory=list[NamedResource])


class TypeMember(PokeApiBaseModel):
    slot: int | None = None
    pokemon: NamedResource


class TypePayload(PokeApiBaseModel):
    """``GET /type/{name}``."""

    id: int
    name: str
    pokemon: list[TypeMember] = Field(default_factory=list[TypeMember])
