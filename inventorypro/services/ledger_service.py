"""Stock ledger: every quantity change is written together with its movement.

Single adjustments reject results below zero. Bulk updates expect targets that
were already clamped to zero by the caller and apply each entry in its own
transaction, stopping at the first failure.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inventorypro.core.constants import (
    ADJUSTMENT_TYPES,
    MOVEMENT_ADJUSTMENT,
    MOVEMENT_BULK_UPDATE,
    NOTES_MAX_LENGTH,
    QUANTITY_MAX,
)
from inventorypro.core.errors import (
    EmptyBulkUpdate,
    InvalidMovementType,
    InvalidNotes,
    InvalidQuantity,
    PartialBulkFailure,
    ProductNotFound,
    StaleState,
    StoreWriteFailure,
)
from inventorypro.models.product import Product
from inventorypro.models.stock_movement import StockMovement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BulkUpdate:
    product_id: int
    current_quantity: int
    new_quantity: int

    @property
    def quantity_change(self) -> int:
        return self.new_quantity - self.current_quantity


@dataclass
class BulkAdjustResult:
    committed: list[StockMovement] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)
    failed_at: Optional[int] = None
    error: Optional[Exception] = None
    cancelled: bool = False

    @property
    def changed(self) -> int:
        return len(self.committed)


@dataclass(frozen=True)
class LedgerDiscrepancy:
    product_id: int
    product_name: str
    stock_quantity: int
    ledger_quantity: int


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _clean_notes(notes: Optional[str]) -> Optional[str]:
    if notes is None:
        return None
    text = str(notes).strip()
    if not text:
        return None
    if len(text) > NOTES_MAX_LENGTH:
        raise InvalidNotes(f"notes must be at most {NOTES_MAX_LENGTH} characters")
    return text


def _check_quantity(value, field_name: str) -> int:
    if not _is_int(value):
        raise InvalidQuantity(f"{field_name} must be an integer")
    if value < 0:
        raise InvalidQuantity(f"{field_name} must be non-negative")
    if value > QUANTITY_MAX:
        raise InvalidQuantity(f"{field_name} must be at most {QUANTITY_MAX}")
    return value


def _log_context(product_id, movement_type, quantity_change, actor) -> dict:
    return {
        "product_id": product_id,
        "movement_type": movement_type,
        "quantity_change": quantity_change,
        "actor": actor,
    }


def _apply_change(
    db: Session,
    *,
    product_id: int,
    current_quantity: int,
    new_quantity: int,
    movement_type: str,
    notes: Optional[str],
    actor: Optional[str],
) -> StockMovement:
    # Conditional write: only succeeds if nobody changed the row since the
    # caller read current_quantity.
    try:
        result = db.execute(
            update(Product)
            .where(
                Product.id == product_id,
                Product.stock_quantity == current_quantity,
            )
            .values(
                stock_quantity=new_quantity,
                updated_at=datetime.now(timezone.utc),
            )
        )
        if result.rowcount == 0:
            stored = db.execute(
                select(Product.stock_quantity).where(Product.id == product_id)
            ).scalar_one_or_none()
            db.rollback()
            if stored is None:
                raise ProductNotFound(product_id)
            raise StaleState(product_id, current_quantity, stored)

        product_name = db.execute(
            select(Product.name).where(Product.id == product_id)
        ).scalar_one()
        movement = StockMovement(
            product_id=product_id,
            product_name=product_name,
            quantity_change=new_quantity - current_quantity,
            previous_quantity=current_quantity,
            new_quantity=new_quantity,
            movement_type=movement_type,
            notes=notes,
            created_by=actor,
        )
        db.add(movement)
        db.commit()
    except (SQLAlchemyError, OverflowError) as exc:
        db.rollback()
        logger.exception(
            "Stock write failed for product %s",
            product_id,
            extra=_log_context(product_id, movement_type, new_quantity - current_quantity, actor),
        )
        raise StoreWriteFailure(f"Stock write failed for product {product_id}: {exc}") from exc

    logger.info(
        "Stock %s for product %s: %s -> %s (%+d) by %s",
        movement_type,
        product_id,
        current_quantity,
        new_quantity,
        new_quantity - current_quantity,
        actor or "anonymous",
        extra=_log_context(product_id, movement_type, new_quantity - current_quantity, actor),
    )
    return movement


def adjust_stock(
    db: Session,
    *,
    product_id: int,
    quantity_change: int,
    current_quantity: int,
    movement_type: str = MOVEMENT_ADJUSTMENT,
    notes: Optional[str] = None,
    actor: Optional[str] = None,
) -> StockMovement:
    if not _is_int(quantity_change) or quantity_change == 0:
        raise InvalidQuantity("quantity_change must be a non-zero integer")
    if abs(quantity_change) > QUANTITY_MAX:
        raise InvalidQuantity(f"quantity_change must be at most {QUANTITY_MAX} in magnitude")
    if movement_type not in ADJUSTMENT_TYPES:
        raise InvalidMovementType(
            "movement_type must be one of: {}".format(", ".join(ADJUSTMENT_TYPES))
        )
    _check_quantity(current_quantity, "current_quantity")
    notes = _clean_notes(notes)

    new_quantity = current_quantity + quantity_change
    if new_quantity < 0:
        logger.warning(
            "Rejected adjustment for product %s: %s %+d would go below zero",
            product_id,
            current_quantity,
            quantity_change,
            extra=_log_context(product_id, movement_type, quantity_change, actor),
        )
        raise InvalidQuantity(
            "Insufficient stock: {} available, cannot remove {}".format(
                current_quantity, -quantity_change
            )
        )
    if new_quantity > QUANTITY_MAX:
        raise InvalidQuantity(f"Resulting stock would exceed {QUANTITY_MAX}")

    return _apply_change(
        db,
        product_id=product_id,
        current_quantity=current_quantity,
        new_quantity=new_quantity,
        movement_type=movement_type,
        notes=notes,
        actor=actor,
    )


def bulk_adjust_stock(
    db: Session,
    updates: Sequence[BulkUpdate],
    *,
    notes: Optional[str] = None,
    actor: Optional[str] = None,
    cancel_event: Optional[threading.Event] = None,
) -> BulkAdjustResult:
    """Apply ``updates`` in order as independent units of work.

    Not transactional across entries. If an entry fails, the remaining entries
    are not attempted and :class:`PartialBulkFailure` is raised carrying the
    movements committed so far; callers must re-read product state.
    """
    updates = list(updates)
    if not updates:
        raise EmptyBulkUpdate("updates must contain at least one entry")
    for index, entry in enumerate(updates):
        _check_quantity(entry.current_quantity, f"updates[{index}].current_quantity")
        _check_quantity(entry.new_quantity, f"updates[{index}].new_quantity")
    notes = _clean_notes(notes)

    result = BulkAdjustResult()
    for index, entry in enumerate(updates):
        if cancel_event is not None and cancel_event.is_set():
            logger.info(
                "Bulk update cancelled before entry %s (%s committed)",
                index,
                result.changed,
            )
            result.cancelled = True
            break

        if entry.new_quantity == entry.current_quantity:
            result.skipped.append(entry.product_id)
            continue

        try:
            movement = _apply_change(
                db,
                product_id=entry.product_id,
                current_quantity=entry.current_quantity,
                new_quantity=entry.new_quantity,
                movement_type=MOVEMENT_BULK_UPDATE,
                notes=notes,
                actor=actor,
            )
        except (ProductNotFound, StaleState, StoreWriteFailure) as exc:
            result.failed_at = index
            result.error = exc
            logger.warning(
                "Bulk update stopped at entry %s (product %s) after %s committed: %s",
                index,
                entry.product_id,
                result.changed,
                exc,
                extra=_log_context(
                    entry.product_id, MOVEMENT_BULK_UPDATE, entry.quantity_change, actor
                ),
            )
            raise PartialBulkFailure(result) from exc
        result.committed.append(movement)

    return result


def find_ledger_discrepancies(
    db: Session, product_ids: Optional[Iterable[int]] = None
) -> list[LedgerDiscrepancy]:
    """Products whose stock no longer matches their latest movement."""
    latest = (
        select(
            StockMovement.product_id.label("product_id"),
            func.max(StockMovement.id).label("movement_id"),
        )
        .where(StockMovement.product_id.is_not(None))
        .group_by(StockMovement.product_id)
        .subquery()
    )
    stmt = (
        select(
            Product.id,
            Product.name,
            Product.stock_quantity,
            StockMovement.new_quantity,
        )
        .join(latest, latest.c.product_id == Product.id)
        .join(StockMovement, StockMovement.id == latest.c.movement_id)
        .where(Product.stock_quantity != StockMovement.new_quantity)
        .order_by(Product.id)
    )
    if product_ids is not None:
        stmt = stmt.where(Product.id.in_(list(product_ids)))

    return [
        LedgerDiscrepancy(
            product_id=row[0],
            product_name=row[1],
            stock_quantity=row[2],
            ledger_quantity=row[3],
        )
        for row in db.execute(stmt).all()
    ]


__all__ = [
    "BulkAdjustResult",
    "BulkUpdate",
    "LedgerDiscrepancy",
    "adjust_stock",
    "bulk_adjust_stock",
    "find_ledger_discrepancies",
]
