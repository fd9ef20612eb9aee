from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import relationship

from inventorypro.core.constants import STATUS_IN_STOCK, STATUS_LOW_STOCK, STATUS_OUT_OF_STOCK
from inventorypro.database.base import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    sku = Column(String)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"))

    cost_price = Column(Numeric(12, 2), nullable=False, default=0)
    selling_price = Column(Numeric(12, 2), nullable=False, default=0)

    stock_quantity = Column(Integer, nullable=False, default=0)
    low_stock_threshold = Column(Integer, nullable=False, default=10)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    category = relationship("Category", lazy="joined")

    __table_args__ = (
        CheckConstraint("stock_quantity >= 0", name="ck_products_stock_non_negative"),
        CheckConstraint("low_stock_threshold >= 0", name="ck_products_threshold_non_negative"),
        CheckConstraint("cost_price >= 0", name="ck_products_cost_non_negative"),
        CheckConstraint("selling_price >= 0", name="ck_products_price_non_negative"),
        Index("idx_products_sku", "sku"),
        Index("idx_products_category", "category_id"),
    )

    @property
    def is_low_stock(self) -> bool:
        return self.stock_quantity < self.low_stock_threshold

    @property
    def is_out_of_stock(self) -> bool:
        return self.stock_quantity == 0

    @property
    def stock_status(self) -> str:
        if self.is_out_of_stock:
            return STATUS_OUT_OF_STOCK
        if self.is_low_stock:
            return STATUS_LOW_STOCK
        return STATUS_IN_STOCK


__all__ = ["Product"]
