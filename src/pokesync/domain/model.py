"""Catalog entities, persisted records and paging windows."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Final

MAX_PAGE_LIMIT: Final[int] = 50
PRICE_MIN: Final[int] = 1000
PRICE_MAX: Final[int] = 1_000_000
DEFAULT_PRICE: Final[int] = PRICE_MIN
DEFAULT_LEVEL: Final[int] = 0


def capitalize_first(value: str) -> str:
    """Uppercase the first character only; applying it twice is a no-op."""

    return value[:1].upper() + value[1:]


def clamp_price(value: int) -> int:
    return max(PRICE_MIN, min(PRICE_MAX, value))


@dataclass(frozen=True, slots=True)
class CatalogEntity:
    """One normalized upstream entity, valid for a single synchronization run."""

    key: str
    upstream_id: int
    name: str
    categories: tuple[str, ...]
    image_url: str | None
    price: int
    description: str

    def __post_init__(self) -> None:
        if not self.categories:
            raise ValueError(f"Catalog entity {self.key!r} has no categories")
        if not PRICE_MIN <= self.price <= PRICE_MAX:
            raise ValueError(f"Price {self.price} outside [{PRICE_MIN}, {PRICE_MAX}]")

    def record_fields(self) -> dict[str, object]:
        return {
            "name": self.name,
            "categories": list(self.categories),
            "image_url": self.image_url,
            "price": self.price,
            "description": self.description,
            "upstream_id": self.upstream_id,
        }


@dataclass(eq=False, kw_only=True)
class LocalRecord:
    """Persisted projection of a catalog entity.

    ``id`` is assigned by the store on first save.
    """

    id: int | None = None
    name: str
    categories: list[str] = field(default_factory=list[str])
    image_url: str | None = None
    price: int = DEFAULT_PRICE
    description: str | None = None
    level: int = DEFAULT_LEVEL
    upstream_id: int | None = None

    def to_dict(self) -> dict[str, object]:
        return {item.name: getattr(self, item.name) for item in fields(self)}


EDITABLE_FIELDS: Final[frozenset[str]] = frozenset(
    item.name for item in fields(LocalRecord) if item.name != "id"
)
BASIC_FIELDS: Final[tuple[str, ...]] = ("id", "name")


@dataclass(frozen=True, slots=True)
class PageWindow:
    limit: int
    offset: int = 0

    def clamped(self) -> PageWindow:
        """Return the window with ``limit`` capped at the upstream-safe maximum."""

        if self.limit <= MAX_PAGE_LIMIT:
            return self
        return PageWindow(limit=MAX_PAGE_LIMIT, offset=self.offset)


@dataclass(slots=True)
class SyncReport:
    """Outcome of a bulk synchronization run."""

    requested: int
    target: int = 0
    fetched: int = 0
    stored: int = 0
    skipped: bool = False
