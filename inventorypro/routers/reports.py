from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from inventorypro.core.constants import TOP_PRODUCTS_DEFAULT_LIMIT
from inventorypro.dependencies import get_db
from inventorypro.schemas.report import (
    CategoryInventoryRead,
    InventoryReportRead,
    InventoryStatsRead,
    LowStockItemRead,
    TopProductRead,
)
from inventorypro.services import report_service

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/summary", response_model=InventoryReportRead)
def summary(
    top: int = Query(TOP_PRODUCTS_DEFAULT_LIMIT, ge=1, le=50),
    db: Session = Depends(get_db),
):
    return report_service.build_inventory_report(db, top_limit=top)


@router.get("/stats", response_model=InventoryStatsRead)
def stats(db: Session = Depends(get_db)):
    products, _ = report_service.load_snapshot(db)
    return report_service.inventory_stats(products)


@router.get("/categories", response_model=List[CategoryInventoryRead])
def categories(db: Session = Depends(get_db)):
    products, categories = report_service.load_snapshot(db)
    return report_service.category_inventory(products, categories)


@router.get("/top-products", response_model=List[TopProductRead])
def top_products(
    limit: int = Query(TOP_PRODUCTS_DEFAULT_LIMIT, ge=1, le=50),
    db: Session = Depends(get_db),
):
    products, _ = report_service.load_snapshot(db)
    return report_service.top_products(products, limit=limit)


@router.get("/low-stock", response_model=List[LowStockItemRead])
def low_stock(db: Session = Depends(get_db)):
    products, _ = report_service.load_snapshot(db)
    return report_service.low_stock_products(products)


__all__ = ["router"]
