from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from inventorypro.core.errors import CategoryNotFound, ProductNotFound
from inventorypro.dependencies import get_db, require_auth
from inventorypro.schemas.product import ProductCreate, ProductRead, ProductUpdate
from inventorypro.services import product_service

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=List[ProductRead])
def list_products(
    category_id: Optional[int] = Query(None, description="Only products in this category"),
    search: Optional[str] = Query(None, description="Match on name or SKU"),
    low_stock: bool = Query(False, description="Only products below their threshold"),
    db: Session = Depends(get_db),
):
    return product_service.list_products(
        db,
        category_id=category_id,
        search=search,
        low_stock_only=low_stock,
    )


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: int, db: Session = Depends(get_db)):
    try:
        return product_service.get_product(db, product_id)
    except ProductNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.post("", response_model=ProductRead, status_code=201)
def create_product(
    payload: ProductCreate,
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    try:
        return product_service.create_product(db, payload)
    except CategoryNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.patch("/{product_id}", response_model=ProductRead)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    try:
        return product_service.update_product(db, product_id, payload)
    except (ProductNotFound, CategoryNotFound) as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.delete("/{product_id}", status_code=204)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    try:
        product_service.delete_product(db, product_id)
    except ProductNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=204)


__all__ = ["router"]
