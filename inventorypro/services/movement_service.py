from typing import Optional, cast

from sqlalchemy import select
from sqlalchemy.orm import Session

from inventorypro.config import get_settings
from inventorypro.core.constants import MOVEMENT_LIST_MAX_LIMIT
from inventorypro.models.stock_movement import StockMovement


def list_movements(
    db: Session,
    *,
    product_id: Optional[int] = None,
    limit: Optional[int] = None,
) -> list[StockMovement]:
    if limit is None:
        limit = get_settings().MOVEMENT_LIST_LIMIT
    limit = max(1, min(int(limit), MOVEMENT_LIST_MAX_LIMIT))

    stmt = (
        select(StockMovement)
        .order_by(StockMovement.created_at.desc(), StockMovement.id.desc())
        .limit(limit)
    )
    if product_id is not None:
        stmt = stmt.where(StockMovement.product_id == product_id)
    movements = db.execute(stmt).unique().scalars().all()
    return cast(list[StockMovement], list(movements))


__all__ = ["list_movements"]
