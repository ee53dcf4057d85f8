"""SQLAlchemy adapter package for pokesync."""

from __future__ import annotations

from .mappings import catalog_record_table, create_all_tables, mapper_registry, start_mappers
from .repositories import SqlAlchemyCatalogStore
from .unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyCatalogStore",
    "SqlAlchemyCatalogUnitOfWork",
    "StartupError",
    "catalog_record_table",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
