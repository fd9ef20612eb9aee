from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inventorypro.dependencies import get_db, require_auth
from inventorypro.schemas.alert import AlertOutcomeRead, AlertRead, LowStockAlertRequest
from inventorypro.services.alert_service import list_alerts, run_low_stock_alert

router = APIRouter(prefix="/alerts", tags=["Alerts"])


@router.get("", response_model=List[AlertRead])
def alert_history(
    limit: int = Query(50, ge=1, le=500, description="Max records to return"),
    db: Session = Depends(get_db),
):
    return list_alerts(db, limit=limit)


@router.post("/low-stock", response_model=AlertOutcomeRead)
def send_low_stock_alert(
    payload: Optional[LowStockAlertRequest] = Body(None),
    db: Session = Depends(get_db),
    _auth=Depends(require_auth),
):
    payload = payload or LowStockAlertRequest()
    try:
        outcome = run_low_stock_alert(
            db,
            recipient=payload.email,
            send_notifications=payload.send_notifications,
        )
    except SQLAlchemyError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    if not outcome.success:
        raise HTTPException(status_code=500, detail=outcome.message)
    return outcome
