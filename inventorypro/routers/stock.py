from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from inventorypro.core.constants import MOVEMENT_LIST_MAX_LIMIT
from inventorypro.core.errors import (
    EmptyBulkUpdate,
    InvalidMovementType,
    InvalidNotes,
    InvalidQuantity,
    PartialBulkFailure,
    ProductNotFound,
    StaleState,
    StoreWriteFailure,
)
from inventorypro.dependencies import get_actor, get_db
from inventorypro.schemas.stock import (
    BulkUpdateFailure,
    BulkUpdateRequest,
    BulkUpdateResponse,
    LedgerDiscrepancyRead,
    StockAdjustRequest,
    StockMovementRead,
)
from inventorypro.services.ledger_service import (
    BulkUpdate,
    adjust_stock,
    bulk_adjust_stock,
    find_ledger_discrepancies,
)
from inventorypro.services.movement_service import list_movements

router = APIRouter(prefix="/stock", tags=["Stock"])

_INVALID_REQUEST_ERRORS = (InvalidQuantity, InvalidMovementType, InvalidNotes, EmptyBulkUpdate)


@router.post("/adjust", response_model=StockMovementRead, status_code=201)
def adjust(
    payload: StockAdjustRequest,
    db: Session = Depends(get_db),
    actor: Optional[str] = Depends(get_actor),
):
    try:
        return adjust_stock(
            db,
            product_id=payload.product_id,
            quantity_change=payload.quantity_change,
            current_quantity=payload.current_quantity,
            movement_type=payload.movement_type,
            notes=payload.notes,
            actor=actor,
        )
    except _INVALID_REQUEST_ERRORS as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ProductNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except StaleState as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except StoreWriteFailure as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.post("/bulk", response_model=BulkUpdateResponse)
def bulk_update(
    payload: BulkUpdateRequest,
    db: Session = Depends(get_db),
    actor: Optional[str] = Depends(get_actor),
):
    updates = [
        BulkUpdate(
            product_id=entry.product_id,
            current_quantity=entry.current_quantity,
            new_quantity=entry.new_quantity,
        )
        for entry in payload.updates
    ]
    try:
        result = bulk_adjust_stock(db, updates, notes=payload.notes, actor=actor)
    except _INVALID_REQUEST_ERRORS as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PartialBulkFailure as exc:
        failure = BulkUpdateFailure(
            message="Bulk update stopped partway; reload products before retrying.",
            committed=[StockMovementRead.model_validate(m) for m in exc.result.committed],
            failed_at=exc.result.failed_at,
            error=str(exc.result.error),
        )
        raise HTTPException(status_code=409, detail=failure.model_dump(mode="json")) from exc

    return BulkUpdateResponse(
        changed=result.changed,
        skipped=result.skipped,
        cancelled=result.cancelled,
        movements=[StockMovementRead.model_validate(m) for m in result.committed],
    )


@router.get("/movements", response_model=List[StockMovementRead])
def movements(
    product_id: Optional[int] = Query(None, description="Only movements for this product"),
    limit: int = Query(100, ge=1, le=MOVEMENT_LIST_MAX_LIMIT, description="Max records to return"),
    db: Session = Depends(get_db),
):
    return list_movements(db, product_id=product_id, limit=limit)


@router.get("/reconcile", response_model=List[LedgerDiscrepancyRead])
def reconcile(db: Session = Depends(get_db)):
    return find_ledger_discrepancies(db)


__all__ = ["router"]
