"""Error taxonomy shared by the store, the ledger and the lifecycle service."""


class MaintenanceError(Exception):
    """Base class for domain errors."""


class ValidationError(MaintenanceError):
    """Malformed or missing input. ``errors`` maps a field name to messages."""

    def __init__(self, errors: dict[str, list[str]], message: str = "Validation failed."):
        super().__init__(message)
        self.errors = errors
        self.message = message


class InventoryError(MaintenanceError):
    """A consumption cannot be served from inventory."""

    def __init__(self, message: str, spare_part_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.spare_part_id = spare_part_id


class InsufficientStock(InventoryError):
    """Requested consumption exceeds the available quantity."""

    def __init__(self, available: int, requested: int,
                 spare_part_id: str | None = None, part_number: str | None = None):
        label = part_number or spare_part_id or "spare part"
        super().__init__(
            f"Not enough stock for spare part {label}. "
            f"Available: {available}, Consumed: {requested}",
            spare_part_id=spare_part_id,
        )
        self.available = available
        self.requested = requested
        self.part_number = part_number


class StorageError(MaintenanceError):
    """The underlying store failed. Details stay in the server log."""
