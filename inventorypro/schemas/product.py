from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from inventorypro.core.constants import QUANTITY_MAX
from inventorypro.schemas.category import CategoryRef


def _clean_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Name is required")
    return value


class ProductBase(BaseModel):
    name: str = Field(min_length=1)
    sku: Optional[str] = None
    category_id: Optional[int] = None
    cost_price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    selling_price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    stock_quantity: int = Field(0, ge=0, le=QUANTITY_MAX)
    low_stock_threshold: int = Field(10, ge=0, le=QUANTITY_MAX)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return _clean_name(value)

    @field_validator("sku")
    @classmethod
    def _blank_sku_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    sku: Optional[str] = None
    category_id: Optional[int] = None
    cost_price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    selling_price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    stock_quantity: Optional[int] = Field(None, ge=0, le=QUANTITY_MAX)
    low_stock_threshold: Optional[int] = Field(None, ge=0, le=QUANTITY_MAX)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return _clean_name(value)

    @field_validator("sku")
    @classmethod
    def _blank_sku_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


class ProductRead(ProductBase):
    id: int
    stock_status: str
    category: Optional[CategoryRef] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductSummary(BaseModel):
    id: int
    name: str
    sku: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
