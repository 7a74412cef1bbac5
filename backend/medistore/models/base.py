from __future__ import annotations

from ..extensions import db


class RecordRowMixin:
    """
    Row <-> record mapping for the hosted backend.

    RECORD_FIELDS lists the record keys stored as columns of the same name.
    """
    RECORD_FIELDS: tuple[str, ...] = ()

    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    def to_record(self) -> dict:
        return {name: getattr(self, name) for name in self.RECORD_FIELDS}

    @classmethod
    def from_record(cls, data: dict):
        return cls(**{name: data.get(name) for name in cls.RECORD_FIELDS})
