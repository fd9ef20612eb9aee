from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from inventorypro.services.ledger_service import BulkAdjustResult


class LedgerError(Exception):
    """Base class for errors raised by the inventory services."""


class InvalidQuantity(LedgerError):
    pass


class InvalidMovementType(LedgerError):
    pass


class InvalidNotes(LedgerError):
    pass


class EmptyBulkUpdate(LedgerError):
    pass


class ProductNotFound(LedgerError):
    def __init__(self, product_id):
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class CategoryNotFound(LedgerError):
    def __init__(self, category_id):
        super().__init__(f"Category {category_id} not found")
        self.category_id = category_id


class DuplicateCategory(LedgerError):
    pass


class StaleState(LedgerError):
    """The stored quantity no longer matches the caller's snapshot."""

    def __init__(self, product_id, expected: int, actual: int):
        super().__init__(
            "Product {} stock changed: expected {}, found {}. Reload and retry.".format(
                product_id, expected, actual
            )
        )
        self.product_id = product_id
        self.expected = expected
        self.actual = actual


class StoreWriteFailure(LedgerError):
    pass


class PartialBulkFailure(LedgerError):
    """A bulk update stopped partway; entries before ``failed_at`` stay committed."""

    def __init__(self, result: "BulkAdjustResult"):
        error: Optional[BaseException] = result.error
        super().__init__(
            "Bulk update failed at entry {} after {} committed change(s): {}".format(
                result.failed_at, len(result.committed), error
            )
        )
        self.result = result


__all__ = [
    "CategoryNotFound",
    "DuplicateCategory",
    "EmptyBulkUpdate",
    "InvalidMovementType",
    "InvalidNotes",
    "InvalidQuantity",
    "LedgerError",
    "PartialBulkFailure",
    "ProductNotFound",
    "StaleState",
    "StoreWriteFailure",
]
