"""Spare part catalog operations: validation in front of the entity store."""

import logging
from collections.abc import Mapping

from errors import ValidationError
from store import EntityStore, SQLAlchemyStore
from utils import MAX_STORED_INT, clean_str, parse_int

from .models import SparePart

logger = logging.getLogger(__name__)

REQUIRED_TEXT_FIELDS = {
    "part_number": "Part number is required",
    "description": "Description is required",
    "location": "Location is required",
}

# camelCase keys of the JSON record shape -> model attribute names
FIELD_ALIASES = {
    "partNumber": "part_number",
    "part_number": "part_number",
    "description": "description",
    "quantity": "quantity",
    "location": "location",
}


def normalize_keys(data) -> dict:
    """Accept both the record shape (camelCase) and form field names."""
    out = {}
    for key, value in (data or {}).items():
        name = FIELD_ALIASES.get(key)
        if name is not None:
            out[name] = value
    return out


def validate_spare_part(data, partial: bool = False) -> dict:
    """
    Return cleaned fields or raise ``ValidationError``.

    With ``partial`` only the supplied fields are checked (PATCH semantics).
    """
    if not isinstance(data, Mapping):
        raise ValidationError({"body": ["Expected a JSON object."]})
    data = normalize_keys(data)
    errors: dict[str, list[str]] = {}
    clean: dict = {}

    for field, message in REQUIRED_TEXT_FIELDS.items():
        if partial and field not in data:
            continue
        value = clean_str(data.get(field))
        if not value:
            errors.setdefault(field, []).append(message)
        else:
            clean[field] = value

    if not partial or "quantity" in data:
        quantity = parse_int(data.get("quantity"))
        if quantity is None or quantity < 0:
            errors.setdefault("quantity", []).append("Quantity must be non-negative")
        elif quantity > MAX_STORED_INT:
            errors.setdefault("quantity", []).append("Quantity is too large")
        else:
            clean["quantity"] = quantity

    if errors:
        raise ValidationError(errors)
    return clean


class InventoryService:
    """Catalog CRUD used by the inventory blueprint and the seed command."""

    def __init__(self, store: EntityStore):
        self.store = store

    def list_spare_parts(self):
        return self.store.list()

    def get_spare_part(self, spare_part_id: str):
        return self.store.get(spare_part_id)

    def create_spare_part(self, data):
        fields = validate_spare_part(data)
        part = self.store.create(**fields)
        logger.info("Spare part %s created (qty %s)", part.part_number, part.quantity)
        return part

    def update_spare_part(self, spare_part_id: str, data):
        fields = validate_spare_part(data, partial=True)
        part = self.store.update(spare_part_id, **fields)
        if part is not None:
            logger.info("Spare part %s updated: %s", spare_part_id, sorted(fields))
        return part

    def delete_spare_part(self, spare_part_id: str) -> bool:
        # Breakdowns keep their consumption snapshots; nothing cascades.
        removed = self.store.delete(spare_part_id)
        if removed:
            logger.info("Spare part %s deleted", spare_part_id)
        return removed

    def search(self, keyword: str):
        """Case-insensitive match on part number, description and location."""
        parts = self.list_spare_parts()
        keyword = clean_str(keyword).lower()
        if not keyword:
            return parts
        return [
            p for p in parts
            if keyword in (p.part_number or "").lower()
            or keyword in (p.description or "").lower()
            or keyword in (p.location or "").lower()
        ]

    def low_stock(self, threshold: int):
        return [p for p in self.list_spare_parts() if p.quantity < threshold]


def get_inventory_service() -> InventoryService:
    return InventoryService(SQLAlchemyStore(SparePart))
