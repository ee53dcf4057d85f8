"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import Normalizer, UpstreamCatalog
from .persistence import CatalogStore

__all__ = [
    "CatalogStore",
    "Normalizer",
    "UpstreamCatalog",
]
