"""SQLAlchemyStore contract against in-memory SQLite."""

import pytest
from sqlalchemy.exc import OperationalError

from errors import StorageError
from extensions import db
from modules.inventory.models import SparePart
from store import SQLAlchemyStore


@pytest.fixture()
def store(app):
    return SQLAlchemyStore(SparePart)


def _create(store, part_number="SP-1", quantity=1):
    return store.create(part_number=part_number, description="d", quantity=quantity, location="L")


def test_create_assigns_id_and_timestamps(store):
    part = _create(store)

    assert len(part.id) == 36
    assert part.created_at is not None
    assert part.created_at == part.updated_at


def test_list_newest_first(store):
    a = _create(store, "A")
    b = _create(store, "B")
    store.update(a.id, created_at=b.created_at.replace(year=b.created_at.year - 1))

    assert [p.part_number for p in store.list()] == ["B", "A"]


def test_get_missing_returns_none(store):
    assert store.get("missing") is None
    assert store.get("") is None


def test_update_applies_only_supplied_fields(store):
    part = _create(store, quantity=5)
    created_at = part.created_at

    updated = store.update(part.id, quantity=3)

    assert updated.quantity == 3
    assert updated.part_number == "SP-1"
    assert updated.created_at == created_at
    assert updated.updated_at >= created_at
    assert store.update("missing", quantity=1) is None


def test_delete_reports_whether_removed(store):
    part = _create(store)
    assert store.delete(part.id) is True
    assert store.delete(part.id) is False


def test_database_failure_becomes_storage_error(store, monkeypatch):
    def boom():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db.session, "commit", boom)

    with pytest.raises(StorageError):
        _create(store)


def test_negative_quantity_rejected_by_database(store):
    part = _create(store)
    with pytest.raises(StorageError):
        store.update(part.id, quantity=-1)
    assert store.get(part.id).quantity == 1


def test_value_too_large_for_column_becomes_storage_error(store):
    part = _create(store, quantity=1)

    with pytest.raises(StorageError):
        store.update(part.id, quantity=10**19)

    assert store.get(part.id).quantity == 1
