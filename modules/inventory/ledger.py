"""
Stock arithmetic for spare parts.

Pure functions, no store access: the lifecycle service reads quantities,
asks the ledger what the new value is, then writes it back.
"""

from errors import InsufficientStock, ValidationError


def validate_and_compute_decrement(current_quantity: int, requested: int) -> int:
    """
    Quantity left after consuming ``requested`` units.

    Consuming exactly what is on the shelf is allowed (result 0). Raises
    ``InsufficientStock`` when the shelf has less than requested, and
    ``ValidationError`` when ``requested`` is not a positive integer.
    """
    if isinstance(requested, bool) or not isinstance(requested, int) or requested <= 0:
        raise ValidationError(
            {"quantity_consumed": ["Consumed quantity must be a positive integer."]}
        )
    if requested > current_quantity:
        raise InsufficientStock(available=current_quantity, requested=requested)
    return current_quantity - requested


def compute_restock(current_quantity: int, returned: int) -> int:
    """Quantity after ``returned`` units go back on the shelf. No upper bound."""
    return current_quantity + returned
