from fastapi import APIRouter, Depends, HTTPException

from inventorypro.core.preferences import Preferences, load_preferences, save_preferences
from inventorypro.dependencies import require_auth

router = APIRouter(prefix="/preferences", tags=["Preferences"])


@router.get("", response_model=Preferences)
def get_preferences():
    return load_preferences()


@router.put("", response_model=Preferences)
def put_preferences(payload: Preferences, _auth=Depends(require_auth)):
    try:
        save_preferences(payload)
    except OSError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return payload
