"""Tests for the SQLite document store."""

import pytest

from haulix.store.adapter import ReactiveStoreAdapter
from haulix.store.session import Identity, resolve_session
from haulix.store.sqlite import SqliteDocumentStore
from tests.conftest import make_load


@pytest.fixture
def sqlite_store(tmp_path):
    store = SqliteDocumentStore(tmp_path / "db" / "store.db")
    yield store
    store.close()


def test_crud(sqlite_store):
    doc_id = sqlite_store.add("things", {"name": "a", "count": 1})

    assert sqlite_store.get("things", doc_id) == {"name": "a", "count": 1}

    sqlite_store.update("things", doc_id, {"count": 2})
    assert sqlite_store.get("things", doc_id) == {"name": "a", "count": 2}

    sqlite_store.delete("things", doc_id)
    assert sqlite_store.get("things", doc_id) is None
    sqlite_store.delete("things", doc_id)


def test_update_missing_raises_key_error(sqlite_store):
    with pytest.raises(KeyError):
        sqlite_store.update("things", "nope", {"count": 1})


def test_snapshot_keeps_insertion_order_across_updates(sqlite_store):
    first = sqlite_store.add("things", {"name": "first"})
    second = sqlite_store.add("things", {"name": "second"})
    sqlite_store.set("things", first, {"name": "first again"})

    documents = sqlite_store.snapshot("things").documents

    assert [document.id for document in documents] == [first, second]
    assert documents[0].data == {"name": "first again"}


def test_subscribers_see_writes(sqlite_store):
    seen = []
    subscription = sqlite_store.subscribe("things", lambda snapshot: seen.append(len(snapshot.documents)))

    sqlite_store.add("things", {"name": "a"})
    subscription.unsubscribe()
    sqlite_store.add("things", {"name": "b"})

    assert seen == [0, 1]
    assert not subscription.active


def test_documents_persist_across_instances(tmp_path):
    path = tmp_path / "store.db"
    store = SqliteDocumentStore(path)
    doc_id = store.add("things", {"name": "kept"})
    store.close()

    reopened = SqliteDocumentStore(path)
    try:
        assert reopened.get("things", doc_id) == {"name": "kept"}
    finally:
        reopened.close()


def test_adapter_over_sqlite(sqlite_store, config):
    session = resolve_session(sqlite_store, Identity(uid="u-1"), config)
    adapter = ReactiveStoreAdapter(sqlite_store, session)
    adapter.start()

    load_id = adapter.create_load(make_load())
    adapter.update_load(load_id, {"status": "Billing"})

    assert adapter.find_load(load_id).status == "Billing"
    assert adapter.find_load(load_id).legs[0].driver_pay == "200"
    adapter.stop()
