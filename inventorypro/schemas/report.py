from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class InventoryStatsRead(BaseModel):
    total_value: Decimal
    potential_revenue: Decimal
    potential_profit: Decimal
    low_stock_count: int

    model_config = ConfigDict(from_attributes=True)


class CategoryInventoryRead(BaseModel):
    category: str
    quantity: int
    value: Decimal

    model_config = ConfigDict(from_attributes=True)


class TopProductRead(BaseModel):
    name: str
    value: Decimal

    model_config = ConfigDict(from_attributes=True)


class LowStockItemRead(BaseModel):
    id: Optional[int] = None
    name: str
    sku: Optional[str] = None
    stock_quantity: int
    low_stock_threshold: int
    severity: str

    model_config = ConfigDict(from_attributes=True)


class InventoryReportRead(BaseModel):
    stats: InventoryStatsRead
    categories: List[CategoryInventoryRead]
    top_products: List[TopProductRead]
    low_stock: List[LowStockItemRead]
    out_of_stock_count: int
