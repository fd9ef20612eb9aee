from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from inventorypro.core.constants import QUANTITY_MAX
from inventorypro.schemas.product import ProductSummary


class StockAdjustRequest(BaseModel):
    product_id: int
    quantity_change: int = Field(ge=-QUANTITY_MAX, le=QUANTITY_MAX)
    current_quantity: int = Field(ge=0, le=QUANTITY_MAX)
    movement_type: Literal["adjustment", "sale", "purchase", "return"] = "adjustment"
    notes: Optional[str] = None


class BulkUpdateEntry(BaseModel):
    product_id: int
    current_quantity: int = Field(ge=0, le=QUANTITY_MAX)
    new_quantity: int = Field(le=QUANTITY_MAX)

    @field_validator("new_quantity")
    @classmethod
    def _clamp_to_zero(cls, value: int) -> int:
        # Same guard as the bulk-update form: negative targets become zero.
        return max(0, value)


class BulkUpdateRequest(BaseModel):
    updates: List[BulkUpdateEntry] = Field(min_length=1)
    notes: Optional[str] = None


class StockMovementRead(BaseModel):
    id: int
    product_id: Optional[int] = None
    product_name: Optional[str] = None
    quantity_change: int
    previous_quantity: int
    new_quantity: int
    movement_type: str
    notes: Optional[str] = None
    created_at: datetime
    created_by: Optional[str] = None
    product: Optional[ProductSummary] = None

    model_config = ConfigDict(from_attributes=True)


class BulkUpdateResponse(BaseModel):
    changed: int
    skipped: List[int]
    cancelled: bool = False
    movements: List[StockMovementRead]


class BulkUpdateFailure(BaseModel):
    message: str
    committed: List[StockMovementRead]
    failed_at: Optional[int]
    error: str


class LedgerDiscrepancyRead(BaseModel):
    product_id: int
    product_name: str
    stock_quantity: int
    ledger_quantity: int

    model_config = ConfigDict(from_attributes=True)
