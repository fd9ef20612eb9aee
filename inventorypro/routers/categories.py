from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from inventorypro.core.errors import CategoryNotFound, DuplicateCategory
from inventorypro.dependencies import get_db, require_auth
from inventorypro.schemas.category import CategoryCreate, CategoryRead
from inventorypro.services import product_service

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=List[CategoryRead])
def list_categories(db: Session = Depends(get_db)):
    return product_service.list_categories(db)


@router.post("", response_model=CategoryRead, status_code=201)
def create_category(
    payload: CategoryCreate,
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    try:
        return product_service.create_category(db, payload.name)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except DuplicateCategory as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


@router.delete("/{category_id}", status_code=204)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    try:
        product_service.delete_category(db, category_id)
    except CategoryNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return Response(status_code=204)


__all__ = ["router"]
