"""SQLAlchemy models for breakdown incidents."""

from datetime import datetime
from typing import NamedTuple

from extensions import db
from utils import isoformat

BREAKDOWN_CATEGORIES = ["Electrical", "Mechanical", "Instrumentation", "Other"]


class SpareConsumption(NamedTuple):
    """
    Snapshot of a spare part taken when a breakdown consumed it.

    ``part_number`` and ``description`` are copied from the part at that
    moment; later edits or deletion of the part do not touch them.
    """

    spare_part_id: str
    part_number: str
    description: str
    quantity_consumed: int

    @classmethod
    def of(cls, part, quantity: int) -> "SpareConsumption":
        return cls(part.id, part.part_number, part.description, quantity)

    @classmethod
    def from_dict(cls, data: dict) -> "SpareConsumption":
        return cls(
            data["sparePartId"],
            data.get("partNumber", ""),
            data.get("description", ""),
            int(data["quantityConsumed"]),
        )

    def to_dict(self) -> dict:
        return {
            "sparePartId": self.spare_part_id,
            "partNumber": self.part_number,
            "description": self.description,
            "quantityConsumed": self.quantity_consumed,
        }


class Breakdown(db.Model):
    """An equipment failure incident with the spares it consumed."""

    __tablename__ = "breakdowns"

    id = db.Column(db.String(36), primary_key=True)
    loss_time = db.Column(db.Integer, nullable=False, default=0)  # minutes
    line = db.Column(db.String(120), nullable=False)
    machine = db.Column(db.String(120), nullable=False, index=True)
    description = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(32), nullable=False)
    # list of SpareConsumption.to_dict(), stored as written
    spares_consumed = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.CheckConstraint("loss_time >= 0", name="ck_breakdowns_loss_time_non_negative"),
    )

    @property
    def consumptions(self) -> list[SpareConsumption]:
        return [SpareConsumption.from_dict(row) for row in (self.spares_consumed or [])]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "lossTime": self.loss_time,
            "line": self.line,
            "machine": self.machine,
            "description": self.description,
            "category": self.category,
            "sparesConsumed": [c.to_dict() for c in self.consumptions],
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Breakdown {self.machine} {self.loss_time}min>"
