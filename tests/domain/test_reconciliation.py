from __future__ import annotations

import asyncio

import pytest

from pokesync.domain.errors import (
    LocalNotFoundError,
    NotFoundError,
    UnrecoverableSyncError,
    UpstreamNotFoundError,
)
from pokesync.domain.model import LocalRecord
from tests.helpers.catalog import (
    FakeUpstream,
    InMemoryCatalogStore,
    RecordingSleep,
    make_controller,
    pokemon_names,
)


def _existing_record(name: str = "Pikachu") -> LocalRecord:
    return LocalRecord(name=name, categories=["Eléctrico"], price=5000)


def test_bootstrap_stores_everything_upstream_has() -> None:
    upstream = FakeUpstream(pokemon_names(5))
    store = InMemoryCatalogStore()
    controller = make_controller(upstream, store)

    report = asyncio.run(controller.bootstrap_if_empty(300))

    assert report.skipped is False
    assert report.target == 5
    assert report.fetched == 5
    assert report.stored == 5
    assert len(store.records) == 5
    assert store.calls == ["count", "clear", "save"]


def test_bootstrap_is_a_no_op_when_store_has_records() -> None:
    upstream = FakeUpstream(pokemon_names(5))
    store = InMemoryCatalogStore([_existing_record()])
    controller = make_controller(upstream, store)

    report = asyncio.run(controller.bootstrap_if_empty(300))

    assert report.skipped is True
    assert store.calls == ["count"]
    assert upstream.count_calls == 0
    assert upstream.page_calls == []
    assert upstream.detail_calls == []


def test_bootstrap_failure_leaves_store_untouched() -> None:
    upstream = FakeUpstream(pokemon_names(120), failing_offsets={50})
    store = InMemoryCatalogStore()
    controller = make_controller(upstream, store)

    with pytest.raises(UnrecoverableSyncError):
        asyncio.run(controller.bootstrap_if_empty(120))

    assert store.calls == ["count"]
    assert store.records == {}


def test_bootstrap_skips_entities_that_fail() -> None:
    names = pokemon_names(10)
    upstream = FakeUpstream(names, missing={names[0], names[9]})
    store = InMemoryCatalogStore()
    controller = make_controller(upstream, store)

    report = asyncio.run(controller.bootstrap_if_empty(10))

    assert report.target == 10
    assert report.stored == 8
    assert sorted(record.name for record in store.records.values()) == [
        name.capitalize() for name in names[1:9]
    ]


def test_concurrent_bootstraps_run_once() -> None:
    upstream = FakeUpstream(pokemon_names(3))
    store = InMemoryCatalogStore()
    controller = make_controller(upstream, store)

    async def run_twice() -> list[bool]:
        reports = await asyncio.gather(
            controller.bootstrap_if_empty(3), controller.bootstrap_if_empty(3)
        )
        return [report.skipped for report in reports]

    assert sorted(asyncio.run(run_twice())) == [False, True]
    assert len(store.records) == 3


def test_seed_appends_without_deduplication() -> None:
    upstream = FakeUpstream(pokemon_names(5))
    store = InMemoryCatalogStore()
    sleep = RecordingSleep()
    controller = make_controller(upstream, store, sleep=sleep)

    first = asyncio.run(controller.seed(3))
    second = asyncio.run(controller.seed(3))

    assert [record.name for record in first] == [record.name for record in second]
    assert len(store.records) == 6
    assert "clear" not in store.calls


def test_import_one_stores_the_entity() -> None:
    upstream = FakeUpstream(["bulbasaur", "pikachu"])
    store = InMemoryCatalogStore()
    controller = make_controller(upstream, store)

    record = asyncio.run(controller.import_one("Pikachu"))

    assert record.id == 1
    assert record.name == "Pikachu"
    assert record.upstream_id == 2
    assert record.categories == ["Planta"]
    assert store.records == {1: record}


def test_import_of_unknown_key_writes_nothing() -> None:
    upstream = FakeUpstream(["bulbasaur"])
    store = InMemoryCatalogStore()
    controller = make_controller(upstream, store)

    with pytest.raises(UpstreamNotFoundError):
        asyncio.run(controller.import_one("missingmon"))

    assert "save" not in store.calls
    assert store.records == {}


def test_create_and_get_round_trip() -> None:
    store = InMemoryCatalogStore()
    controller = make_controller(FakeUpstream([]), store)

    created = asyncio.run(controller.create({"name": "Missingno", "categories": ["Normal"]}))

    assert created.id is not None
    fetched = asyncio.run(controller.get_one(created.id))
    assert fetched.to_dict() == created.to_dict()
    assert fetched.level == 0


def test_update_applies_partial_fields() -> None:
    store = InMemoryCatalogStore([_existing_record()])
    controller = make_controller(FakeUpstream([]), store)

    updated = asyncio.run(controller.update(1, {"price": 999_999, "level": 12}))

    assert updated.price == 999_999
    assert updated.level == 12
    assert updated.name == "Pikachu"
    assert asyncio.run(controller.get_one(1)).price == 999_999


def test_update_with_empty_partial_keeps_the_record() -> None:
    store = InMemoryCatalogStore([_existing_record()])
    controller = make_controller(FakeUpstream([]), store)
    before = asyncio.run(controller.get_one(1)).to_dict()

    updated = asyncio.run(controller.update(1, {}))

    assert updated.to_dict() == before


def test_update_of_missing_record_raises_not_found() -> None:
    controller = make_controller(FakeUpstream([]), InMemoryCatalogStore())

    with pytest.raises(LocalNotFoundError) as excinfo:
        asyncio.run(controller.update(42, {"price": 2000}))

    assert excinfo.value.record_id == 42


def test_remove_then_get_raises_not_found() -> None:
    store = InMemoryCatalogStore([_existing_record()])
    controller = make_controller(FakeUpstream([]), store)

    removed = asyncio.run(controller.remove(1))

    assert removed.name == "Pikachu"
    with pytest.raises(NotFoundError):
        asyncio.run(controller.get_one(1))
    with pytest.raises(LocalNotFoundError):
        asyncio.run(controller.remove(1))


def test_basic_list_only_has_id_and_name() -> None:
    store = InMemoryCatalogStore([_existing_record(), _existing_record("Raichu")])
    controller = make_controller(FakeUpstream([]), store)

    assert asyncio.run(controller.get_basic_list()) == [
        {"id": 1, "name": "Pikachu"},
        {"id": 2, "name": "Raichu"},
    ]
    assert len(asyncio.run(controller.get_all())) == 2


def test_upstream_list_is_clamped_and_does_not_write() -> None:
    upstream = FakeUpstream(pokemon_names(80))
    store = InMemoryCatalogStore()
    controller = make_controller(upstream, store)

    entities = asyncio.run(controller.query_upstream_list(500, offset=10))

    assert len(entities) == 50
    assert entities[0].key == pokemon_names(80)[10]
    assert upstream.page_calls[0].limit == 50
    assert store.calls == []


def test_upstream_by_category_truncates_to_limit() -> None:
    names = pokemon_names(5)
    upstream = FakeUpstream(names, categories={"grass": names})
    controller = make_controller(upstream, InMemoryCatalogStore())

    entities = asyncio.run(controller.query_upstream_by_category("grass", 2))

    assert [entity.key for entity in entities] == names[:2]


def test_upstream_by_unknown_category_raises_not_found() -> None:
    controller = make_controller(FakeUpstream([]), InMemoryCatalogStore())

    with pytest.raises(UpstreamNotFoundError):
        asyncio.run(controller.query_upstream_by_category("shadow", 5))
