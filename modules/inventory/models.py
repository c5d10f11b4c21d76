"""SQLAlchemy models for the spare parts inventory."""

from datetime import datetime

from extensions import db
from utils import isoformat


class SparePart(db.Model):
    """Represents a spare part item tracked by quantity and location."""

    __tablename__ = "spare_parts"

    id = db.Column(db.String(36), primary_key=True)
    part_number = db.Column(db.String(100), nullable=False, index=True)
    description = db.Column(db.Text, nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=0)
    location = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.CheckConstraint("quantity >= 0", name="ck_spare_parts_quantity_non_negative"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "partNumber": self.part_number,
            "description": self.description,
            "quantity": self.quantity,
            "location": self.location,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<SparePart {self.part_number}: {self.quantity}>"
