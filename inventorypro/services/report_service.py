from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from inventorypro.core.constants import (
    STATUS_LOW_STOCK,
    STATUS_OUT_OF_STOCK,
    TOP_PRODUCTS_DEFAULT_LIMIT,
    UNCATEGORIZED_LABEL,
)
from inventorypro.models.category import Category
from inventorypro.models.product import Product

_ZERO = Decimal("0")


@dataclass(frozen=True)
class InventoryStats:
    total_value: Decimal
    potential_revenue: Decimal
    potential_profit: Decimal
    low_stock_count: int


@dataclass(frozen=True)
class CategoryInventory:
    category: str
    quantity: int
    value: Decimal


@dataclass(frozen=True)
class TopProduct:
    name: str
    value: Decimal


@dataclass(frozen=True)
class LowStockItem:
    id: Optional[int]
    name: str
    sku: Optional[str]
    stock_quantity: int
    low_stock_threshold: int
    severity: str


def _field(item, name, default=None):
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


def _to_decimal(value) -> Decimal:
    if value is None:
        return _ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _quantity(item) -> int:
    return int(_field(item, "stock_quantity", 0) or 0)


def _threshold(item) -> int:
    return int(_field(item, "low_stock_threshold", 0) or 0)


def _is_low_stock(item) -> bool:
    return _quantity(item) < _threshold(item)


def inventory_stats(products: Optional[Iterable]) -> InventoryStats:
    if not products:
        return InventoryStats(_ZERO, _ZERO, _ZERO, 0)

    total_value = _ZERO
    potential_revenue = _ZERO
    low_stock_count = 0
    for product in products:
        quantity = _quantity(product)
        total_value += _to_decimal(_field(product, "cost_price")) * quantity
        potential_revenue += _to_decimal(_field(product, "selling_price")) * quantity
        if _is_low_stock(product):
            low_stock_count += 1

    return InventoryStats(
        total_value=total_value,
        potential_revenue=potential_revenue,
        potential_profit=potential_revenue - total_value,
        low_stock_count=low_stock_count,
    )


def _category_label(product, category_names: dict) -> str:
    category = _field(product, "category")
    if category is not None:
        name = _field(category, "name")
        if name:
            return name
    category_id = _field(product, "category_id")
    if category_id is not None:
        name = category_names.get(category_id)
        if name:
            return name
    return UNCATEGORIZED_LABEL


def category_inventory(
    products: Optional[Iterable],
    categories: Optional[Iterable] = None,
) -> list[CategoryInventory]:
    """Quantity and cost value per category, in order of first appearance."""
    if not products:
        return []
    category_names = {
        _field(category, "id"): _field(category, "name") for category in categories or ()
    }

    totals: dict[str, list] = {}
    for product in products:
        label = _category_label(product, category_names)
        bucket = totals.setdefault(label, [0, _ZERO])
        quantity = _quantity(product)
        bucket[0] += quantity
        bucket[1] += _to_decimal(_field(product, "cost_price")) * quantity

    return [
        CategoryInventory(category=label, quantity=quantity, value=value)
        for label, (quantity, value) in totals.items()
    ]


def top_products(
    products: Optional[Iterable], limit: int = TOP_PRODUCTS_DEFAULT_LIMIT
) -> list[TopProduct]:
    if not products or limit <= 0:
        return []
    ranked = [
        TopProduct(
            name=_field(product, "name"),
            value=_to_decimal(_field(product, "selling_price")) * _quantity(product),
        )
        for product in products
    ]
    # sorted() is stable, so equal values keep input order.
    ranked = sorted(ranked, key=lambda item: item.value, reverse=True)
    return ranked[:limit]


def low_stock_products(products: Optional[Iterable]) -> list[LowStockItem]:
    if not products:
        return []
    items = [
        LowStockItem(
            id=_field(product, "id"),
            name=_field(product, "name"),
            sku=_field(product, "sku"),
            stock_quantity=_quantity(product),
            low_stock_threshold=_threshold(product),
            severity=STATUS_OUT_OF_STOCK if _quantity(product) == 0 else STATUS_LOW_STOCK,
        )
        for product in products
        if _is_low_stock(product)
    ]
    return sorted(items, key=lambda item: item.stock_quantity)


def load_snapshot(db: Session) -> tuple[list[Product], list[Category]]:
    products = (
        db.execute(select(Product).order_by(Product.created_at.desc(), Product.id.desc()))
        .unique()
        .scalars()
        .all()
    )
    categories = db.execute(select(Category).order_by(Category.name)).scalars().all()
    return list(products), list(categories)


def build_inventory_report(db: Session, *, top_limit: int = TOP_PRODUCTS_DEFAULT_LIMIT) -> dict:
    products, categories = load_snapshot(db)
    low_stock = low_stock_products(products)
    return {
        "stats": inventory_stats(products),
        "categories": category_inventory(products, categories),
        "top_products": top_products(products, limit=top_limit),
        "low_stock": low_stock,
        "out_of_stock_count": sum(
            1 for item in low_stock if item.severity == STATUS_OUT_OF_STOCK
        ),
    }


__all__ = [
    "CategoryInventory",
    "InventoryStats",
    "LowStockItem",
    "TopProduct",
    "build_inventory_report",
    "category_inventory",
    "inventory_stats",
    "load_snapshot",
    "low_stock_products",
    "top_products",
]
