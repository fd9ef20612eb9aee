from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from inventorypro.config import get_settings
from inventorypro.database import store_is_reachable
from inventorypro.dependencies import get_db

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(response: Response, db: Session = Depends(get_db)):
    """Liveness plus a ``SELECT 1`` against the product store."""
    settings = get_settings()
    store_ok = store_is_reachable(db)
    if not store_ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {
        "status": "ok" if store_ok else "degraded",
        "app": settings.APP_NAME,
        "store": "ok" if store_ok else "unreachable",
        "time": datetime.now(timezone.utc).isoformat(),
    }
