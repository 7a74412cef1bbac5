# Overview: Hosted relational backend; one table per collection via Flask-SQLAlchemy.

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from ..errors import StorageError
from ..extensions import db
from ..models import COLLECTION_MODELS
from .base import RecordStore

logger = logging.getLogger(__name__)


class SqlRecordStore(RecordStore):
    """
    Drop-in replacement for the local key-value store.

    Needs an application context (db.session). `save` keeps whole-collection
    semantics: rows whose id is absent from the new list are deleted, the
    rest are merged, all in one commit.
    """

    def _model(self, collection: str):
        self._check(collection)
        return COLLECTION_MODELS[collection]

    def load(self, collection: str) -> list[dict]:
        model = self._model(collection)
        rows = db.session.query(model).order_by(model.id).all()
        return [row.to_record() for row in rows]

    def save(self, collection: str, records: list[dict]) -> None:
        model = self._model(collection)
        with self.write_lock:
            try:
                if "id" not in model.RECORD_FIELDS:
                    # Singleton-style tables carry no record id; ids follow list position
                    db.session.query(model).delete()
                    for position, data in enumerate(records, start=1):
                        row = model.from_record(data)
                        row.id = position
                        db.session.add(row)
                else:
                    keep = [r["id"] for r in records]
                    stale = db.session.query(model)
                    if keep:
                        stale = stale.filter(model.id.notin_(keep))
                    stale.delete(synchronize_session=False)
                    for data in records:
                        db.session.merge(model.from_record(data))
                db.session.commit()
            except SQLAlchemyError as exc:
                db.session.rollback()
                logger.error("Error saving %s: %s", collection, exc)
                raise StorageError(f"cannot save {collection}: {exc}") from exc
