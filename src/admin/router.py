"""Admin auth API — login, session check, logout."""

from __future__ import annotations

from typing import Optional

import redis.asyncio as redis
import structlog
from fastapi import APIRouter, Cookie, Depends, HTTPException
from pydantic import BaseModel

from src.admin.auth import authenticate, create_session, delete_session
from src.admin.dependencies import ADMIN_COOKIE, require_admin
from src.api.responses import api_response
from src.config import settings
from src.redis_client import get_redis

logger = structlog.get_logger()

router = APIRouter(prefix="/api/auth", tags=["admin-auth"])


class LoginIn(BaseModel):
    email: str = ""
    password: str = ""


@router.post("/login")
async def login(
    data: LoginIn,
    redis_client: redis.Redis = Depends(get_redis),
):
    """Check admin credentials and set the session cookie."""
    if not data.email or not data.password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    if not authenticate(data.email, data.password):
        logger.warning("admin_login_failed", email=data.email)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = await create_session(redis_client, email=settings.admin_email)

    response = api_response({
        "message": "Login successful",
        "user": {"email": settings.admin_email, "role": "admin"},
    })
    response.set_cookie(
        key=ADMIN_COOKIE,
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        max_age=settings.admin_session_ttl_seconds,
    )

    logger.info("admin_login_success", email=settings.admin_email)
    return response


@router.get("/verify")
async def verify(admin: dict = Depends(require_admin)):
    """Confirm that the session cookie is valid."""
    return api_response({"message": "Token is valid", "user": admin})


@router.post("/logout")
async def logout(
    admin_token: Optional[str] = Cookie(None),
    redis_client: redis.Redis = Depends(get_redis),
):
    """Clear session."""
    if admin_token:
        await delete_session(redis_client, admin_token)

    response = api_response({"message": "Logged out"})
    response.delete_cookie(ADMIN_COOKIE)
    return response
