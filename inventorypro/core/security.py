"""Request identity for mutating endpoints.

A request is accepted with a key from ``API_KEYS`` or a bearer JWT signed with
``JWT_SECRET``. With neither configured the service runs open. The identity
carries the actor recorded as ``created_by`` on stock movements.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import HTTPException, status

from inventorypro.config import get_settings

AUTH_OPEN = "open"
AUTH_API_KEY = "api_key"
AUTH_JWT = "jwt"


@dataclass(frozen=True)
class RequestIdentity:
    auth_type: str
    actor: Optional[str] = None


def _configured_keys() -> set[str]:
    raw = get_settings().API_KEYS or ""
    return {value.strip() for value in raw.split(",") if value.strip()}


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _clean_actor(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def decode_actor_token(token: str) -> Optional[str]:
    """Verify ``token`` and return its ``sub`` claim."""
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.PyJWTError as exc:
        raise _unauthorized("Invalid JWT") from exc
    return _clean_actor(claims.get("sub"))


def authenticate_request(
    api_key: Optional[str],
    authorization: Optional[str],
    actor_header: Optional[str] = None,
) -> RequestIdentity:
    settings = get_settings()
    keys = _configured_keys()
    header_actor = _clean_actor(actor_header)

    token = _bearer_token(authorization)
    if token and settings.JWT_SECRET:
        # A verified subject wins over the self-declared header.
        return RequestIdentity(AUTH_JWT, decode_actor_token(token) or header_actor)

    if api_key and api_key in keys:
        return RequestIdentity(AUTH_API_KEY, header_actor)

    if not keys and not settings.JWT_SECRET:
        return RequestIdentity(AUTH_OPEN, header_actor)

    raise _unauthorized("Not authenticated")


__all__ = ["RequestIdentity", "authenticate_request", "decode_actor_token"]
