# tests/conftest.py
import os
import sys
from datetime import datetime, timedelta
from uuid import uuid4

import pytest

# so that `from app import create_app` works when pytest runs from the root
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from app import create_app  # noqa: E402
from errors import StorageError  # noqa: E402
from extensions import db  # noqa: E402
from modules.breakdowns.models import Breakdown  # noqa: E402
from modules.breakdowns.service import BreakdownLifecycleService  # noqa: E402
from modules.inventory.models import SparePart  # noqa: E402
from modules.inventory.service import InventoryService  # noqa: E402
from store import EntityStore  # noqa: E402


@pytest.fixture()
def app():
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "SECRET_KEY": "test-secret",
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


# ---------- in-memory store for service tests ----------
class InMemoryStore(EntityStore):
    """
    Fake store holding transient model instances.

    ``fail_on`` names operations that raise StorageError; ``fail_update_ids``
    makes update() fail only for those ids.
    """

    def __init__(self, model):
        self.model = model
        self.rows = {}
        self.fail_on = set()
        self.fail_update_ids = set()
        self.calls = []
        self._clock = datetime(2024, 1, 1, 8, 0, 0)

    def _check(self, op):
        self.calls.append(op)
        if op in self.fail_on:
            raise StorageError(f"{op} failed")

    def list(self):
        self._check("list")
        return sorted(self.rows.values(), key=lambda o: o.created_at, reverse=True)

    def get(self, entity_id):
        self._check("get")
        return self.rows.get(entity_id)

    def create(self, **fields):
        self._check("create")
        self._clock += timedelta(seconds=1)
        obj = self.model(id=str(uuid4()), created_at=self._clock, updated_at=self._clock, **fields)
        self.rows[obj.id] = obj
        return obj

    def update(self, entity_id, **fields):
        self._check("update")
        if entity_id in self.fail_update_ids:
            raise StorageError("update failed")
        obj = self.rows.get(entity_id)
        if obj is None:
            return None
        for name, value in fields.items():
            setattr(obj, name, value)
        self._clock += timedelta(seconds=1)
        obj.updated_at = self._clock
        return obj

    def delete(self, entity_id):
        self._check("delete")
        return self.rows.pop(entity_id, None) is not None


@pytest.fixture()
def parts_store():
    return InMemoryStore(SparePart)


@pytest.fixture()
def breakdowns_store():
    return InMemoryStore(Breakdown)


@pytest.fixture()
def lifecycle(parts_store, breakdowns_store):
    return BreakdownLifecycleService(parts_store, breakdowns_store)


@pytest.fixture()
def inventory(parts_store):
    return InventoryService(parts_store)


@pytest.fixture()
def make_part(parts_store):
    def _make(part_number="SP-001", quantity=10, description="Proximity sensor", location="Rack A1"):
        return parts_store.create(
            part_number=part_number, description=description, quantity=quantity, location=location
        )
    return _make


@pytest.fixture()
def draft():
    def _draft(*spares, machine="BM-01", loss_time=30):
        return {
            "loss_time": loss_time,
            "line": "Line A",
            "machine": machine,
            "description": "Drive stopped",
            "category": "Mechanical",
            "spares_consumed": [
                {"spare_part_id": part_id, "quantity_consumed": qty} for part_id, qty in spares
            ],
        }
    return _draft
