from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from inventorypro.core.constants import MOVEMENT_TYPES, NOTES_MAX_LENGTH
from inventorypro.database.base import Base

_MOVEMENT_TYPE_CHECK = "movement_type IN ({})".format(
    ", ".join("'{}'".format(value) for value in MOVEMENT_TYPES)
)


class StockMovement(Base):
    """One immutable ledger entry per change to a product's stock quantity."""

    __tablename__ = "stock_movements"

    id = Column(Integer, primary_key=True)
    # Nulled when the product is deleted; product_name keeps the row readable.
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"))
    product_name = Column(String)

    quantity_change = Column(Integer, nullable=False)
    previous_quantity = Column(Integer, nullable=False)
    new_quantity = Column(Integer, nullable=False)

    movement_type = Column(String(20), nullable=False)
    notes = Column(String(NOTES_MAX_LENGTH))

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    created_by = Column(String)

    product = relationship("Product", lazy="joined")

    __table_args__ = (
        CheckConstraint(
            "new_quantity = previous_quantity + quantity_change",
            name="ck_movements_balanced",
        ),
        CheckConstraint("previous_quantity >= 0", name="ck_movements_previous_non_negative"),
        CheckConstraint("new_quantity >= 0", name="ck_movements_new_non_negative"),
        CheckConstraint("quantity_change <> 0", name="ck_movements_non_zero"),
        CheckConstraint(_MOVEMENT_TYPE_CHECK, name="ck_movements_type"),
        Index("idx_movements_product_created", "product_id", "created_at"),
        Index("idx_movements_created", "created_at"),
    )


__all__ = ["StockMovement"]
