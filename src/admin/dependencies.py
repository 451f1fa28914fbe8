"""FastAPI dependencies for admin authentication."""

from __future__ import annotations

from typing import Optional

import redis.asyncio as redis
import structlog
from fastapi import Cookie, Depends, HTTPException

from src.admin.auth import get_session
from src.redis_client import get_redis

logger = structlog.get_logger()

ADMIN_COOKIE = "admin_token"


async def get_current_admin(
    admin_token: Optional[str] = Cookie(None),
    redis_client: redis.Redis = Depends(get_redis),
) -> Optional[dict]:
    """Get the admin session from the session cookie, or None."""
    if not admin_token:
        return None

    session = await get_session(redis_client, admin_token)
    if not session or session.get("role") != "admin":
        return None

    return session


async def require_admin(
    admin: Optional[dict] = Depends(get_current_admin),
) -> dict:
    """Reject the request with 403 unless an admin is logged in."""
    if admin is None:
        raise HTTPException(status_code=403, detail="Admin access required")
    return admin
