"""
Breakdown lifecycle: the only way breakdowns are created or deleted.

Creating a breakdown consumes spare parts, deleting it puts them back.
Creation is all-or-nothing:

1. the draft is validated (no store access);
2. every consumption item is checked against current stock, with repeated
   references to the same part checked against their running total;
3. only then are the decrements written, followed by the breakdown itself.

If a write in step 3 fails, the decrements already written are restocked
before the failure is reported. Deletion restocks first and removes the
record last; a failed removal takes the restocks back.

Validation and inventory problems come back as result objects; storage
failures are logged and turned into a generic message.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from errors import InsufficientStock, InventoryError, StorageError, ValidationError
from modules.inventory.ledger import compute_restock, validate_and_compute_decrement
from modules.inventory.models import SparePart
from store import EntityStore, SQLAlchemyStore
from utils import MAX_STORED_INT, clean_str, parse_int

from .models import BREAKDOWN_CATEGORIES, Breakdown, SpareConsumption

logger = logging.getLogger(__name__)

CREATE_VALIDATION_FAILED = "Failed to create breakdown. Validation errors."
CREATE_INVENTORY_FAILED = "Inventory error: breakdown was not created."
CREATE_STORAGE_FAILED = "Database Error: Failed to create breakdown."
DELETE_NOT_FOUND = "Breakdown not found."
DELETE_STORAGE_FAILED = "Database Error: Failed to delete breakdown."
DELETE_OK = "Breakdown deleted successfully."

TEXT_FIELDS = {
    "line": "Line is required",
    "machine": "Machine is required",
    "description": "Description is required",
}

# camelCase keys of the JSON record shape -> draft keys
DRAFT_ALIASES = {
    "lossTime": "loss_time",
    "sparesConsumed": "spares_consumed",
}
ITEM_ALIASES = {
    "sparePartId": "spare_part_id",
    "quantityConsumed": "quantity_consumed",
}


@dataclass(frozen=True)
class ConsumptionRequest:
    spare_part_id: str
    quantity: int


@dataclass
class CreateResult:
    breakdown: Breakdown | None = None
    errors: dict = field(default_factory=dict)
    message: str = ""
    kind: str = ""  # validation | inventory | storage

    @property
    def ok(self) -> bool:
        return self.breakdown is not None

    def to_dict(self) -> dict:
        if self.ok:
            return {"message": self.message, "breakdown": self.breakdown.to_dict()}
        return {"message": self.message, "errors": self.errors}


@dataclass
class DeleteResult:
    success: bool
    message: str
    not_found: bool = False

    def to_dict(self) -> dict:
        return {"success": self.success, "message": self.message}


def _aliased(data, aliases: dict) -> dict:
    return {aliases.get(k, k): v for k, v in (data or {}).items()}


def validate_breakdown(draft) -> tuple[dict, list[ConsumptionRequest]]:
    """
    Check a draft and return ``(fields, consumption_requests)``.

    Raises ``ValidationError`` with every problem found, keyed by field.
    """
    if not isinstance(draft, Mapping):
        raise ValidationError({"body": ["Expected a JSON object."]}, CREATE_VALIDATION_FAILED)
    data = _aliased(draft, DRAFT_ALIASES)
    errors: dict[str, list[str]] = {}
    fields: dict = {}

    loss_time = parse_int(data.get("loss_time"))
    if loss_time is None or loss_time < 0:
        errors["loss_time"] = ["Loss time must be non-negative"]
    elif loss_time > MAX_STORED_INT:
        errors["loss_time"] = ["Loss time is too large"]
    else:
        fields["loss_time"] = loss_time

    for name, message in TEXT_FIELDS.items():
        value = clean_str(data.get(name))
        if not value:
            errors[name] = [message]
        else:
            fields[name] = value

    category = clean_str(data.get("category"))
    if category not in BREAKDOWN_CATEGORIES:
        errors["category"] = ["Invalid category selected."]
    else:
        fields["category"] = category

    requests: list[ConsumptionRequest] = []
    raw_items = data.get("spares_consumed") or []
    if not isinstance(raw_items, (list, tuple)):
        errors["spares_consumed"] = ["Invalid format for consumed spares."]
        raw_items = []
    for raw in raw_items:
        item = _aliased(raw, ITEM_ALIASES) if isinstance(raw, Mapping) else {}
        part_id = clean_str(item.get("spare_part_id"))
        quantity = parse_int(item.get("quantity_consumed"))
        if not part_id or quantity is None or not 0 < quantity <= MAX_STORED_INT:
            errors.setdefault("spares_consumed", []).append(
                "Each consumed spare needs a part and a positive quantity."
            )
            continue
        requests.append(ConsumptionRequest(part_id, quantity))

    if errors:
        raise ValidationError(errors, CREATE_VALIDATION_FAILED)
    return fields, requests


class BreakdownLifecycleService:
    """Creates and deletes breakdowns while keeping spare part stock consistent."""

    def __init__(self, spare_parts: EntityStore, breakdowns: EntityStore):
        self.parts = spare_parts
        self.breakdowns = breakdowns

    # ---------- reads ----------
    def list_breakdowns(self):
        return self.breakdowns.list()

    def get_breakdown(self, breakdown_id: str):
        return self.breakdowns.get(breakdown_id)

    # ---------- create ----------
    def create_breakdown(self, draft) -> CreateResult:
        try:
            fields, requests = validate_breakdown(draft)
        except ValidationError as exc:
            return CreateResult(errors=exc.errors, message=exc.message, kind="validation")

        try:
            decrements, snapshots = self._plan_consumption(requests)
        except InventoryError as exc:
            logger.warning("Breakdown rejected: %s", exc.message)
            return CreateResult(errors={"spares_consumed": [exc.message]},
                                message=CREATE_INVENTORY_FAILED, kind="inventory")
        except StorageError:
            return CreateResult(message=CREATE_STORAGE_FAILED, kind="storage")

        applied: list[tuple[str, int]] = []
        try:
            for part_id, new_quantity, consumed in decrements:
                if self.parts.update(part_id, quantity=new_quantity) is None:
                    raise InventoryError(f"Spare part with ID {part_id} not found.", part_id)
                applied.append((part_id, consumed))
            breakdown = self.breakdowns.create(
                spares_consumed=[s.to_dict() for s in snapshots], **fields
            )
        except InventoryError as exc:
            logger.warning("Breakdown rejected mid-write, rolling back stock: %s", exc.message)
            self._restock(applied)
            return CreateResult(errors={"spares_consumed": [exc.message]},
                                message=CREATE_INVENTORY_FAILED, kind="inventory")
        except StorageError:
            logger.error("Breakdown create failed, rolling back %d stock change(s)", len(applied))
            self._restock(applied)
            return CreateResult(message=CREATE_STORAGE_FAILED, kind="storage")

        logger.info(
            "Breakdown %s created for %s/%s (%d min, %d spare(s))",
            breakdown.id, fields["line"], fields["machine"], fields["loss_time"], len(snapshots),
        )
        return CreateResult(breakdown=breakdown, message="Breakdown created successfully.")

    def _plan_consumption(self, requests):
        """
        Read every referenced part and compute its new quantity without writing.

        Returns ``(decrements, snapshots)`` where ``decrements`` is a list of
        ``(part_id, new_quantity, total_consumed)`` in first-reference order.
        """
        parts: dict[str, object] = {}
        totals: dict[str, int] = {}
        snapshots: list[SpareConsumption] = []

        for req in requests:
            part = parts.get(req.spare_part_id) or self.parts.get(req.spare_part_id)
            if part is None:
                raise InventoryError(
                    f"Spare part with ID {req.spare_part_id} not found.", req.spare_part_id
                )
            parts[req.spare_part_id] = part

            total = totals.get(req.spare_part_id, 0) + req.quantity
            try:
                validate_and_compute_decrement(part.quantity, total)
            except InsufficientStock:
                raise InsufficientStock(part.quantity, total, part.id, part.part_number) from None
            totals[req.spare_part_id] = total
            snapshots.append(SpareConsumption.of(part, req.quantity))

        decrements = [
            (part_id, validate_and_compute_decrement(parts[part_id].quantity, total), total)
            for part_id, total in totals.items()
        ]
        return decrements, snapshots

    # ---------- delete ----------
    def delete_breakdown(self, breakdown_id: str) -> DeleteResult:
        try:
            breakdown = self.breakdowns.get(breakdown_id)
        except StorageError:
            return DeleteResult(False, DELETE_STORAGE_FAILED)
        if breakdown is None:
            return DeleteResult(False, DELETE_NOT_FOUND, not_found=True)

        consumptions = breakdown.consumptions
        returned: list[tuple[str, int]] = []
        try:
            for c in consumptions:
                part = self.parts.get(c.spare_part_id)
                if part is None:
                    logger.warning(
                        "Deleting breakdown %s: spare part %s (%s) no longer exists, %d unit(s) not returned",
                        breakdown_id, c.spare_part_id, c.part_number, c.quantity_consumed,
                    )
                    continue
                restocked = self.parts.update(
                    part.id, quantity=compute_restock(part.quantity, c.quantity_consumed)
                )
                if restocked is not None:
                    returned.append((part.id, c.quantity_consumed))
            removed = self.breakdowns.delete(breakdown_id)
        except StorageError:
            logger.error("Breakdown %s delete failed, taking back %d restock(s)", breakdown_id, len(returned))
            self._unrestock(returned)
            return DeleteResult(False, DELETE_STORAGE_FAILED)

        if not removed:
            # gone between our read and our delete; its restock belongs to whoever removed it
            self._unrestock(returned)
            return DeleteResult(False, DELETE_NOT_FOUND, not_found=True)

        logger.info("Breakdown %s deleted, %d spare(s) returned to stock", breakdown_id, len(returned))
        return DeleteResult(True, DELETE_OK)

    # ---------- compensation ----------
    def _restock(self, applied):
        for part_id, quantity in applied:
            try:
                part = self.parts.get(part_id)
                if part is None:
                    logger.error("Cannot return %d unit(s) to missing spare part %s", quantity, part_id)
                    continue
                self.parts.update(part_id, quantity=compute_restock(part.quantity, quantity))
            except StorageError:
                logger.exception("Stock compensation failed for spare part %s", part_id)

    def _unrestock(self, returned):
        for part_id, quantity in returned:
            try:
                part = self.parts.get(part_id)
                if part is None:
                    continue
                new_quantity = validate_and_compute_decrement(part.quantity, quantity)
                self.parts.update(part_id, quantity=new_quantity)
            except InsufficientStock:
                logger.error("Cannot take back %d unit(s) from spare part %s: stock already used",
                             quantity, part_id)
            except StorageError:
                logger.exception("Stock compensation failed for spare part %s", part_id)


def get_lifecycle_service() -> BreakdownLifecycleService:
    return BreakdownLifecycleService(SQLAlchemyStore(SparePart), SQLAlchemyStore(Breakdown))
