from typing import Optional

from fastapi import Depends, Header

from inventorypro.core.security import RequestIdentity, authenticate_request
from inventorypro.database.session import get_db


def require_auth(
    api_key: Optional[str] = Header(None, alias="X-API-Key"),
    authorization: Optional[str] = Header(None),
    actor_id: Optional[str] = Header(None, alias="X-Actor-Id"),
) -> RequestIdentity:
    return authenticate_request(api_key, authorization, actor_id)


def get_actor(identity: RequestIdentity = Depends(require_auth)) -> Optional[str]:
    return identity.actor


__all__ = ["get_actor", "get_db", "require_auth"]
