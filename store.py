"""
Entity store: list/get/create/update/delete for a single model, keyed by an
opaque string id.

Every call is its own unit of work (commit per call). A failure inside the
database, or a value the driver cannot bind, is logged, rolled back and
re-raised as ``StorageError`` so callers never see SQLAlchemy internals.
"""

import logging
from datetime import datetime
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError

from errors import StorageError
from extensions import db

logger = logging.getLogger(__name__)


def new_id() -> str:
    return str(uuid4())


class EntityStore:
    """Interface the lifecycle service depends on."""

    def list(self):
        raise NotImplementedError

    def get(self, entity_id: str):
        raise NotImplementedError

    def create(self, **fields):
        raise NotImplementedError

    def update(self, entity_id: str, **fields):
        raise NotImplementedError

    def delete(self, entity_id: str) -> bool:
        raise NotImplementedError


class SQLAlchemyStore(EntityStore):
    """Store backed by a Flask-SQLAlchemy model with id/created_at/updated_at columns."""

    def __init__(self, model, session=None):
        self.model = model
        self._session = session

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    def _fail(self, action: str, exc: Exception):
        self.session.rollback()
        logger.exception("%s %s failed", self.model.__name__, action)
        raise StorageError(f"{self.model.__name__} {action} failed") from exc

    def list(self):
        try:
            stmt = db.select(self.model).order_by(self.model.created_at.desc())
            return list(self.session.execute(stmt).scalars())
        except (SQLAlchemyError, OverflowError) as exc:
            self._fail("list", exc)

    def get(self, entity_id: str):
        if not entity_id:
            return None
        try:
            return self.session.get(self.model, entity_id)
        except (SQLAlchemyError, OverflowError) as exc:
            self._fail("get", exc)

    def create(self, **fields):
        now = datetime.utcnow()
        obj = self.model(id=new_id(), created_at=now, updated_at=now, **fields)
        try:
            self.session.add(obj)
            self.session.commit()
        except (SQLAlchemyError, OverflowError) as exc:
            self._fail("create", exc)
        return obj

    def update(self, entity_id: str, **fields):
        obj = self.get(entity_id)
        if obj is None:
            return None
        for name, value in fields.items():
            setattr(obj, name, value)
        obj.updated_at = datetime.utcnow()
        try:
            self.session.commit()
        except (SQLAlchemyError, OverflowError) as exc:
            self._fail("update", exc)
        return obj

    def delete(self, entity_id: str) -> bool:
        obj = self.get(entity_id)
        if obj is None:
            return False
        try:
            self.session.delete(obj)
            self.session.commit()
        except (SQLAlchemyError, OverflowError) as exc:
            self._fail("delete", exc)
        return True
