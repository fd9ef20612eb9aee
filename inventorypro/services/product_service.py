import logging
from typing import Optional, cast

from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from inventorypro.core.errors import CategoryNotFound, DuplicateCategory, ProductNotFound
from inventorypro.models.category import Category
from inventorypro.models.product import Product
from inventorypro.models.stock_movement import StockMovement
from inventorypro.schemas.product import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


def get_product(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id)
    if product is None:
        raise ProductNotFound(product_id)
    return product


def list_products(
    db: Session,
    *,
    category_id: Optional[int] = None,
    search: Optional[str] = None,
    low_stock_only: bool = False,
) -> list[Product]:
    stmt = select(Product).order_by(Product.created_at.desc(), Product.id.desc())
    if category_id is not None:
        stmt = stmt.where(Product.category_id == category_id)
    if search:
        like = "%{}%".format(search.strip())
        stmt = stmt.where(or_(Product.name.ilike(like), Product.sku.ilike(like)))
    if low_stock_only:
        stmt = stmt.where(Product.stock_quantity < Product.low_stock_threshold)
    products = db.execute(stmt).unique().scalars().all()
    return cast(list[Product], list(products))


def _ensure_category(db: Session, category_id: Optional[int]) -> None:
    if category_id is None:
        return
    if db.get(Category, category_id) is None:
        raise CategoryNotFound(category_id)


def create_product(db: Session, data: ProductCreate) -> Product:
    _ensure_category(db, data.category_id)
    product = Product(**data.model_dump())
    db.add(product)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(product)
    logger.info("Created product %s (%s)", product.id, product.name)
    return product


def update_product(db: Session, product_id: int, data: ProductUpdate) -> Product:
    """Overwrite the given fields.

    A ``stock_quantity`` set here does not go through the ledger and writes no
    movement; :func:`find_ledger_discrepancies` reports such drift.
    """
    product = get_product(db, product_id)
    values = data.model_dump(exclude_unset=True)
    if "category_id" in values:
        _ensure_category(db, values["category_id"])
    for key, value in values.items():
        if value is None and key not in ("sku", "category_id"):
            continue
        setattr(product, key, value)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(product)
    if "stock_quantity" in values:
        logger.warning(
            "Product %s stock overwritten to %s outside the ledger",
            product_id,
            product.stock_quantity,
        )
    return product


def delete_product(db: Session, product_id: int) -> None:
    """Hard delete; movements are kept with their product reference nulled."""
    product = get_product(db, product_id)
    try:
        db.execute(
            update(StockMovement)
            .where(StockMovement.product_id == product_id)
            .values(product_id=None)
        )
        db.delete(product)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    logger.info("Deleted product %s; movement history retained", product_id)


def list_categories(db: Session) -> list[Category]:
    categories = db.execute(select(Category).order_by(Category.name)).scalars().all()
    return cast(list[Category], list(categories))


def create_category(db: Session, name: str) -> Category:
    name = name.strip()
    if not name:
        raise ValueError("Category name is required")
    category = Category(name=name)
    db.add(category)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateCategory(f"Category '{name}' already exists") from exc
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: int) -> None:
    category = db.get(Category, category_id)
    if category is None:
        raise CategoryNotFound(category_id)
    try:
        db.execute(
            update(Product)
            .where(Product.category_id == category_id)
            .values(category_id=None)
        )
        db.delete(category)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


__all__ = [
    "create_category",
    "create_product",
    "delete_category",
    "delete_product",
    "get_product",
    "list_categories",
    "list_products",
    "update_product",
]
