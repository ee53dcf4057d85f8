"""SQLAlchemy mapping metadata for local catalog records."""

from __future__ import annotations

import json
import logging
from functools import cache
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import Column, Dialect, Integer, String, Table, Text, TypeDecorator, orm

from pokesync.domain.model import DEFAULT_LEVEL, DEFAULT_PRICE, LocalRecord

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class CategoryListType(TypeDecorator[list[str]]):
    """Ordered category labels stored as a JSON array."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value: list[str] | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(list(value), ensure_ascii=False)

    def process_result_value(self, value: str | None, dialect: Dialect) -> list[str]:
        _ = dialect
        if value is None:
            return []
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return []
        items = cast(list[Any], loaded)
        return [str(item) for item in items]


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

catalog_record_table = Table(
    "catalog_record",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("categories", CategoryListType(), nullable=False),
    Column("image_url", String(1024), nullable=True),
    Column("price", Integer, nullable=False, default=DEFAULT_PRICE),
    Column("description", Text, nullable=True),
    Column("level", Integer, nullable=False, default=DEFAULT_LEVEL),
    Column("upstream_id", Integer, nullable=True, index=True),
)


@cache
def start_mappers() -> None:
    """Map the domain dataclasses onto their tables (idempotent)."""

    mapper_registry.map_imperatively(LocalRecord, catalog_record_table)
    orm.configure_mappers()
    log.debug("SQLAlchemy mappers configured")


def create_all_tables(engine: Engine) -> None:
    mapper_registry.metadata.create_all(engine)
