"""Catalog store backed by a SQLAlchemy session."""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import contextmanager
from logging import getLogger
from typing import TYPE_CHECKING, overload

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError

from pokesync.adapters.sqlalchemy.mappings import catalog_record_table
from pokesync.domain.model import EDITABLE_FIELDS, LocalRecord

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from sqlalchemy.orm import Session

log = getLogger(__name__)


def _check_fields(fields: Mapping[str, object], *, allowed: frozenset[str]) -> None:
    unknown = set(fields).difference(allowed)
    if unknown:
        raise ValueError(f"Unknown record fields: {', '.join(sorted(unknown))}")


class SqlAlchemyCatalogStore:
    """Narrow CRUD contract over ``catalog_record``.

    Writes commit immediately; the session is expected to use
    ``expire_on_commit=False`` so returned records stay readable. A write that
    fails is rolled back before the error propagates, so the long-lived session
    stays usable for the next call.

    The methods are coroutines over a synchronous ``Session``. They never
    suspend; each statement blocks the event loop while it runs.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        try:
            yield
            self.session.commit()
        except SQLAlchemyError as exc:
            log.warning("Rolling back failed catalog write: %s", exc)
            self.session.rollback()
            raise

    async def count(self) -> int:
        stmt = select(func.count()).select_from(catalog_record_table)
        return self.session.execute(stmt).scalar_one()

    async def clear(self) -> None:
        with self._transaction():
            result = self.session.execute(delete(catalog_record_table))
        self.session.expunge_all()
        log.info("Cleared %s local records", result.rowcount)

    @overload
    async def find_all(self, select_fields: None = None) -> list[LocalRecord]: ...

    @overload
    async def find_all(self, select_fields: Sequence[str]) -> list[dict[str, object]]: ...

    async def find_all(
        self, select_fields: Sequence[str] | None = None
    ) -> list[LocalRecord] | list[dict[str, object]]:
        if select_fields is None:
            stmt = select(LocalRecord).order_by(catalog_record_table.c.id)
            return list(self.session.execute(stmt).scalars())

        _check_fields(dict.fromkeys(select_fields), allowed=EDITABLE_FIELDS | {"id"})
        columns = [catalog_record_table.c[name] for name in select_fields]
        rows = self.session.execute(select(*columns).order_by(catalog_record_table.c.id))
        return [dict(row) for row in rows.mappings()]

    async def find_by_id(self, record_id: int) -> LocalRecord | None:
        return self.session.get(LocalRecord, record_id)

    def create(self, fields: Mapping[str, object]) -> LocalRecord:
        """Build an unsaved record; absent fields take the record defaults."""

        _check_fields(fields, allowed=EDITABLE_FIELDS)
        return LocalRecord(**fields)  # pyright: ignore[reportArgumentType]

    @overload
    async def save(self, record: LocalRecord) -> LocalRecord: ...

    @overload
    async def save(self, record: Sequence[LocalRecord]) -> list[LocalRecord]: ...

    async def save(
        self, record: LocalRecord | Sequence[LocalRecord]
    ) -> LocalRecord | list[LocalRecord]:
        if isinstance(record, LocalRecord):
            with self._transaction():
                self.session.add(record)
            return record

        records = list(record)
        with self._transaction():
            self.session.add_all(records)
        return records

    async def preload(self, record_id: int, partial: Mapping[str, object]) -> LocalRecord | None:
        """Apply ``partial`` to the session's instance; the next ``save`` commits it.

        If that save fails, the rollback expires the instance and it reloads
        the stored values on next access.
        """

        _check_fields(partial, allowed=EDITABLE_FIELDS)
        record = self.session.get(LocalRecord, record_id)
        if record is None:
            return None
        for name, value in partial.items():
            setattr(record, name, value)
        return record

    async def remove(self, record: LocalRecord) -> LocalRecord:
        with self._transaction():
            self.session.delete(record)
        return record
