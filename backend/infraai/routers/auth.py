"""
Session verification for Clerk-issued JWTs.

The token comes from the Authorization header ("Bearer <token>") or from
Clerk's __session cookie. The user id is the token's `sub` claim.
"""

from __future__ import annotations

import logging
from typing import Annotated, Optional

from fastapi import Cookie, Header, HTTPException
from jose import jwt, JWTError

from infraai.config import get_settings

logger = logging.getLogger(__name__)


def decode_session_token(token: str) -> Optional[dict]:
    """Decode and validate a session token. Returns None if invalid."""
    settings = get_settings()
    if not settings.clerk_jwt_key:
        logger.warning("CLERK_JWT_KEY not set - cannot verify session tokens")
        return None
    try:
        return jwt.decode(
            token,
            settings.clerk_jwt_key,
            algorithms=[settings.clerk_jwt_algorithm],
            options={"verify_aud": False},
        )
    except JWTError as e:
        logger.warning(f"Invalid session token: {e}")
        return None


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    if authorization.startswith("Bearer "):
        return authorization[7:]
    return authorization


async def get_current_user_id(
    authorization: Annotated[Optional[str], Header()] = None,
    session: Annotated[Optional[str], Cookie(alias="__session")] = None,
) -> str:
    """Dependency returning the authenticated user's id, or 401."""
    token = _bearer_token(authorization) or session
    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized")

    payload = decode_session_token(token)
    if not payload or not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Unauthorized")

    return payload["sub"]
